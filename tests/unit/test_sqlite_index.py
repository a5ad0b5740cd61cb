# tests/unit/test_sqlite_index.py
import time
from pathlib import Path

import pytest

from ctph.adapters.index.sqlite_index import SQLiteIndex
from ctph.domain.signature import Signature


def _meta(tmp_path: Path, name: str, size: int = 3) -> dict:
    now = int(time.time())
    return {
        "path": str(tmp_path / name),
        "size": size,
        "mtime_ns": now * 1_000_000_000,
        "seen_at": now,
    }


def test_upsert_file_is_idempotent_per_path(tmp_path: Path):
    with SQLiteIndex(tmp_path / "ctph.db") as idx:
        a = idx.upsert_file(_meta(tmp_path, "a.bin"))
        again = idx.upsert_file(_meta(tmp_path, "a.bin", size=99))
        b = idx.upsert_file(_meta(tmp_path, "b.bin"))
        assert a == again
        assert a != b


def test_upsert_file_requires_core_fields(tmp_path: Path):
    with SQLiteIndex(tmp_path / "ctph.db") as idx:
        with pytest.raises(ValueError):
            idx.upsert_file({"path": "x"})


def test_signature_round_trip_and_overwrite(tmp_path: Path):
    with SQLiteIndex(tmp_path / "ctph.db") as idx:
        fid = idx.upsert_file(_meta(tmp_path, "a.bin"))
        assert idx.get_signature(fid) is None
        idx.upsert_signature(fid, Signature(3, "abc", "de"), "spamsum")
        assert idx.get_signature(fid) == Signature(3, "abc", "de")
        idx.upsert_signature(fid, Signature(6, "xyz", "w"), "spamsum")
        assert idx.get_signature(fid) == Signature(6, "xyz", "w")
        assert idx.count_signatures() == 1
        assert list(idx.iter_signatures()) == [
            (fid, str(tmp_path / "a.bin"), Signature(6, "xyz", "w"))
        ]


def test_candidate_pairs_only_join_comparable_block_sizes(tmp_path: Path):
    with SQLiteIndex(tmp_path / "ctph.db") as idx:
        sigs = {
            "a.bin": Signature(48, "aaa", "bbb"),
            "b.bin": Signature(48, "ccc", "ddd"),
            "c.bin": Signature(96, "eee", "fff"),
            "d.bin": Signature(384, "ggg", "hhh"),
        }
        for name, sig in sigs.items():
            fid = idx.upsert_file(_meta(tmp_path, name))
            idx.upsert_signature(fid, sig, "spamsum")

        pairs = {
            (Path(a[1]).name, Path(b[1]).name) for a, b in idx.candidate_pairs()
        }
        assert pairs == {("a.bin", "b.bin"), ("a.bin", "c.bin"), ("b.bin", "c.bin")}


def test_candidate_pairs_do_not_mix_backends(tmp_path: Path):
    with SQLiteIndex(tmp_path / "ctph.db") as idx:
        a = idx.upsert_file(_meta(tmp_path, "a.bin"))
        b = idx.upsert_file(_meta(tmp_path, "b.bin"))
        idx.upsert_signature(a, Signature(3, "abc", "d"), "spamsum")
        idx.upsert_signature(b, Signature(3, "abc", "d"), "ssdeep")
        assert list(idx.candidate_pairs()) == []


def test_candidate_pairs_filter_by_backend(tmp_path: Path):
    with SQLiteIndex(tmp_path / "ctph.db") as idx:
        ids = {}
        for name, backend in [
            ("a.bin", "spamsum"),
            ("b.bin", "spamsum"),
            ("c.bin", "ssdeep"),
            ("d.bin", "ssdeep"),
        ]:
            ids[name] = idx.upsert_file(_meta(tmp_path, name))
            idx.upsert_signature(ids[name], Signature(3, "abc", "d"), backend)

        def names(backend=None):
            return {
                (Path(a[1]).name, Path(b[1]).name)
                for a, b in idx.candidate_pairs(backend)
            }

        assert names() == {("a.bin", "b.bin"), ("c.bin", "d.bin")}
        assert names("spamsum") == {("a.bin", "b.bin")}
        assert names("ssdeep") == {("c.bin", "d.bin")}
        assert names("other") == set()
