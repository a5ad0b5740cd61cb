import json
import random
from pathlib import Path
from typer.testing import CliRunner
from ctph.cli.app import app

runner = CliRunner()


def test_cli_scan_and_report_roundtrip(tmp_path: Path):
    # Arrange
    rng = random.Random(4)
    text = rng.randbytes(20_000)
    root = tmp_path / "data"
    (root / "nested").mkdir(parents=True)
    a = root / "a.bin"
    b = root / "nested" / "b.bin"
    c = root / "c.bin"
    a.write_bytes(text)
    b.write_bytes(text[:10_000] + b"inserted" + text[10_000:])
    c.write_bytes(rng.randbytes(20_000))

    db = tmp_path / "ctph.db"
    out = tmp_path / "similar.json"

    # Act
    result_scan = runner.invoke(app, ["scan", "--path", str(root), "--db", str(db)])
    assert result_scan.exit_code == 0, result_scan.output
    assert "hashed 3 files" in result_scan.output

    result_report = runner.invoke(
        app, ["report", "--db", str(db), "--output", str(out)]
    )
    assert result_report.exit_code == 0, result_report.output

    # Assert
    edges = json.loads(out.read_text())
    assert len(edges) == 1
    assert {edges[0]["path_a"], edges[0]["path_b"]} == {str(a), str(b)}
