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

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, Optional

from ..adapters.index.sqlite_index import SQLiteIndex
from ..ports.filesystem import FilesystemPort
from ..ports.similarity import FuzzyHasherPort

logger = logging.getLogger(__name__)


class ScanService:
    """
    Orchestrates a file-system scan:
      - walks the filesystem
      - computes the fuzzy hash of every file
      - persists file metadata + signature
      - is best-effort: a file that cannot be stat'ed, read or stored is
        logged and skipped
    """

    def __init__(
        self,
        fs: FilesystemPort,
        hasher: FuzzyHasherPort,
        index: SQLiteIndex,
        *,
        ignore_patterns: Optional[Iterable[str]] = None,
        progress_every: int = 0,
    ) -> None:
        self._fs = fs
        self._hasher = hasher
        self._index = index
        self._ignore_patterns = tuple(ignore_patterns or ())
        self._progress_every = max(0, int(progress_every))

    def _ignored(self, path: Path) -> bool:
        name = str(path)
        for pat in self._ignore_patterns:
            if fnmatch.fnmatch(name, pat) or fnmatch.fnmatch(path.name, pat):
                return True
        return False

    def scan(self, root: Path) -> int:
        """
        Scan a directory tree rooted at `root`.

        Returns:
            Number of files whose signature was stored in the index.
        """
        root = Path(root)
        processed = 0
        backend = self._hasher.name()

        for path in self._fs.walk(root):
            p = Path(path)

            if self._ignored(p):
                continue

            # 1) Stat via FS port
            try:
                meta = self._fs.stat(p)
            except OSError as e:
                logger.warning("ScanService.scan: stat failed for %s: %s", p, e)
                continue

            # 2) Fuzzy hash
            try:
                with open(p, "rb") as fh:
                    signature = self._hasher.hash_stream(fh)
            except Exception as e:
                logger.warning("ScanService.scan: hashing failed for %s: %s", p, e)
                continue
            if signature is None:
                logger.debug("ScanService.scan: %s produced no signature for %s", backend, p)
                continue

            # 3) Persist
            try:
                file_id = self._index.upsert_file(meta)
                self._index.upsert_signature(file_id, signature, backend)
            except Exception as e:
                logger.warning("ScanService.scan: persisting %s failed: %s", p, e)
                continue

            processed += 1
            if self._progress_every and processed % self._progress_every == 0:
                logger.info("ScanService.scan: %d files hashed", processed)

        return processed
