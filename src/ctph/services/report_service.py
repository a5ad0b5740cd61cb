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

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, List

from .similarity_service import SimilarityService


class ReportService:
    """
    Generates human- and machine-readable similarity reports (JSON/NDJSON/CSV).

    Notes:
      - JSON (default): one JSON array of edges, strongest first.
      - NDJSON: one edge object per line.
      - CSV: one row per edge; stable column order.
    """

    FIELDNAMES = ["path_a", "path_b", "score", "file_id_a", "file_id_b", "rationale"]

    def __init__(self, similarity: SimilarityService) -> None:
        self._similarity = similarity

    def _edges(self, threshold: int) -> List[dict[str, Any]]:
        edges = [asdict(e) for e in self._similarity.compute(threshold)]
        edges.sort(key=lambda e: (-e["score"], e["path_a"], e["path_b"]))
        return edges

    def write_similar(self, out: Path, fmt: str = "json", threshold: int = 50) -> Path:
        """
        Write a similarity report to `out` in the specified format.

        Returns:
            The path written.

        Raises:
            ValueError: if an unsupported format is requested.
        """
        fmt = (fmt or "json").lower()
        if fmt not in ("json", "ndjson", "csv"):
            raise ValueError(f"Unsupported format: {fmt}")

        edges = self._edges(threshold)
        out.parent.mkdir(parents=True, exist_ok=True)

        if fmt == "json":
            out.write_text(json.dumps(edges, ensure_ascii=False, indent=2), encoding="utf-8")
            return out

        if fmt == "ndjson":
            text = "\n".join(json.dumps(e, ensure_ascii=False) for e in edges)
            out.write_text(text + ("\n" if text else ""), encoding="utf-8")
            return out

        with open(out, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=self.FIELDNAMES)
            writer.writeheader()
            for e in edges:
                writer.writerow({k: e[k] for k in self.FIELDNAMES})
        return out
