# tests/services/test_scan_unreadable_file.py
import builtins
from pathlib import Path

from typer.testing import CliRunner
from ctph.cli.app import app

runner = CliRunner()


def test_scan_skips_file_that_cannot_be_opened(tmp_path: Path, monkeypatch):
    root = tmp_path / "data"
    root.mkdir()
    good = root / "a.txt"
    bad = root / "b.txt"
    good.write_text("hello")
    bad.write_text("world")

    db = tmp_path / "sim.db"

    # Make open() fail for THIS specific file only
    orig_open = builtins.open

    def flaky_open(file, *args, **kwargs):
        if Path(str(file)).name == bad.name:
            raise OSError("simulated read failure")
        return orig_open(file, *args, **kwargs)

    monkeypatch.setattr(builtins, "open", flaky_open)

    r = runner.invoke(app, ["scan", "--path", str(root), "--db", str(db)])
    assert r.exit_code == 0, r.output
    assert "hashed 1 files" in r.output
