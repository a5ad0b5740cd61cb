import json
import random
from pathlib import Path
from typing import Iterator

from ctph.services import ScanService, SimilarityService, ReportService
from ctph.adapters.index.sqlite_index import SQLiteIndex
from ctph.adapters.similarity.spamsum_adapter import SpamSumAdapter
from ctph.ports.filesystem import FilesystemPort


class LocalTestFS(FilesystemPort):
    """Concrete FS adapter for tests using the real local filesystem via pathlib."""

    def walk(self, root: Path) -> Iterator[Path]:
        root = Path(root)
        if root.is_file():
            yield root
            return
        for p in sorted(root.rglob("*")):
            if p.is_file():
                yield p

    def stat(self, path: Path) -> dict:
        st = path.stat()
        return {
            "path": str(path),
            "size": st.st_size,
            "mtime_ns": st.st_mtime_ns,
        }


def write_file(p: Path, data: bytes) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


def test_scan_and_report_near_duplicates(tmp_path: Path):
    # Arrange: a.bin and b.bin differ by one byte; c.bin is unrelated
    rng = random.Random(31337)
    base = rng.randbytes(32 * 1024)
    edited = bytearray(base)
    edited[len(edited) // 2] ^= 0xFF

    root = tmp_path / "data"
    a = root / "a.bin"
    b = root / "nested" / "b.bin"
    c = root / "c.bin"
    write_file(a, base)
    write_file(b, bytes(edited))
    write_file(c, rng.randbytes(32 * 1024))

    db = tmp_path / "ctph.db"
    index = SQLiteIndex(db)
    engine = SpamSumAdapter()

    scan = ScanService(LocalTestFS(), engine, index)
    report = ReportService(SimilarityService(index, engine))

    # Act
    processed = scan.scan(root)
    out = tmp_path / "similar.json"
    report.write_similar(out, fmt="json", threshold=50)

    # Assert: all files hashed; one edge between a and b
    assert processed == 3
    edges = json.loads(out.read_text(encoding="utf-8"))
    assert len(edges) == 1
    assert {edges[0]["path_a"], edges[0]["path_b"]} == {str(a), str(b)}
    assert edges[0]["score"] >= 90

    index.close()


def test_rescan_updates_rows_in_place(tmp_path: Path):
    root = tmp_path / "data"
    write_file(root / "x.bin", b"first version " * 100)

    with SQLiteIndex(tmp_path / "ctph.db") as index:
        scan = ScanService(LocalTestFS(), SpamSumAdapter(), index)
        assert scan.scan(root) == 1
        write_file(root / "x.bin", b"second version " * 100)
        assert scan.scan(root) == 1
        assert index.count_signatures() == 1
