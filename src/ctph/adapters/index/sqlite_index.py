# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple, cast

from ...domain.errors import PersistenceError
from ...domain.signature import Signature

DDL = """
PRAGMA foreign_keys=ON;
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;
PRAGMA temp_store=MEMORY;

CREATE TABLE IF NOT EXISTS files (
    id INTEGER PRIMARY KEY,
    path TEXT NOT NULL UNIQUE,
    size INTEGER NOT NULL,
    mtime_ns INTEGER NOT NULL,
    seen_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_files_mtime_size ON files(mtime_ns, size);

CREATE TABLE IF NOT EXISTS signatures (
    file_id INTEGER PRIMARY KEY,
    backend TEXT NOT NULL,
    block_size INTEGER NOT NULL,
    part1 TEXT NOT NULL,
    part2 TEXT NOT NULL,
    FOREIGN KEY(file_id) REFERENCES files(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_signatures_block_size ON signatures(block_size);
"""

# Pairs of stored signatures that compare() can score: equal block sizes or
# one exactly twice the other.
CANDIDATE_PAIRS_SQL = """
SELECT a.file_id AS id_a, fa.path AS path_a,
       a.block_size AS bs_a, a.part1 AS p1_a, a.part2 AS p2_a,
       b.file_id AS id_b, fb.path AS path_b,
       b.block_size AS bs_b, b.part1 AS p1_b, b.part2 AS p2_b
FROM signatures a
JOIN signatures b
  ON a.file_id < b.file_id
 AND a.backend = b.backend
 AND (b.block_size = a.block_size
      OR b.block_size = a.block_size * 2
      OR a.block_size = b.block_size * 2)
JOIN files fa ON fa.id = a.file_id
JOIN files fb ON fb.id = b.file_id
WHERE :backend IS NULL OR a.backend = :backend
ORDER BY fa.path ASC, fb.path ASC
"""

Record = Tuple[int, str, Signature]


class SQLiteIndex:
    """
    Thin, explicit SQLite store of scanned files and their fuzzy hashes.

    - Avoids broad try/except: let sqlite3 errors bubble up.
    - Uses one-shot `conn.execute(...)` calls so cursors are short-lived.
    - Implements context manager support (`with SQLiteIndex(...) as idx:`).
    - Signatures are stored split into columns so candidate pairs can be
      selected by block size without parsing.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = str(db_path)
        try:
            self._conn = sqlite3.connect(self._db_path, isolation_level=None)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open index {self._db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    # --- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        if getattr(self, "_conn", None) is not None:
            self._conn.close()
            self._conn = None  # type: ignore[assignment]

    def __enter__(self) -> SQLiteIndex:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            if getattr(self, "_conn", None) is not None:
                self._conn.close()
        except Exception:
            pass

    # --- public API ---------------------------------------------------------

    def upsert_file(self, file_meta: dict) -> int:
        try:
            path = str(file_meta["path"])
            size = int(file_meta["size"])
            mtime_ns = int(file_meta["mtime_ns"])
        except Exception as e:
            raise ValueError(f"upsert_file requires path/size/mtime_ns: {e}") from e

        seen_at = int(file_meta.get("seen_at") or time.time())

        row = self._conn.execute(
            "SELECT id FROM files WHERE path=?",
            (path,),
        ).fetchone()
        if row:
            file_id = cast(int, row["id"])
            self._conn.execute(
                "UPDATE files SET size=?, mtime_ns=?, seen_at=? WHERE id=?",
                (size, mtime_ns, seen_at, file_id),
            )
            return file_id

        cur = self._conn.execute(
            "INSERT INTO files (path, size, mtime_ns, seen_at) VALUES (?, ?, ?, ?)",
            (path, size, mtime_ns, seen_at),
        )
        return cast(int, cur.lastrowid)

    def upsert_signature(self, file_id: int, signature: Signature, backend: str) -> None:
        self._conn.execute(
            """
            INSERT INTO signatures (file_id, backend, block_size, part1, part2)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(file_id) DO UPDATE SET
                backend=excluded.backend,
                block_size=excluded.block_size,
                part1=excluded.part1,
                part2=excluded.part2
            """,
            (file_id, backend, signature.block_size, signature.part1, signature.part2),
        )

    def get_signature(self, file_id: int) -> Optional[Signature]:
        row = self._conn.execute(
            "SELECT block_size, part1, part2 FROM signatures WHERE file_id=?",
            (file_id,),
        ).fetchone()
        return _signature(row, "") if row else None

    def iter_signatures(self) -> Iterator[Record]:
        cur = self._conn.execute(
            """
            SELECT f.id, f.path, s.block_size, s.part1, s.part2
            FROM signatures s
            JOIN files f ON f.id = s.file_id
            ORDER BY f.path ASC
            """
        )
        for r in cur.fetchall():
            yield cast(int, r["id"]), cast(str, r["path"]), _signature(r, "")

    def candidate_pairs(
        self, backend: Optional[str] = None
    ) -> Iterator[Tuple[Record, Record]]:
        """
        Yield ((id, path, sig), (id, path, sig)) pairs with comparable block
        sizes, optionally restricted to signatures stored by `backend`.

        Rows are streamed from the cursor; the pair count grows quadratically.
        """
        cur = self._conn.execute(CANDIDATE_PAIRS_SQL, {"backend": backend})
        for r in cur:
            yield (
                (cast(int, r["id_a"]), cast(str, r["path_a"]), _signature(r, "_a")),
                (cast(int, r["id_b"]), cast(str, r["path_b"]), _signature(r, "_b")),
            )

    def count_signatures(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) AS n FROM signatures").fetchone()
        return cast(int, row["n"])

    # --- helpers ------------------------------------------------------------

    def _init_schema(self) -> None:
        self._conn.executescript(DDL)


def _signature(row: Any, suffix: str) -> Signature:
    if suffix:
        return Signature(
            int(row["bs" + suffix]), row["p1" + suffix], row["p2" + suffix]
        )
    return Signature(int(row["block_size"]), row["part1"], row["part2"])
