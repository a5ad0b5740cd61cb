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

import logging
from dataclasses import dataclass
from typing import Iterable

from ..adapters.index.sqlite_index import SQLiteIndex
from ..ports.similarity import FuzzyHasherPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarityEdge:
    """Represents a similarity relationship between two files."""
    file_id_a: int
    file_id_b: int
    path_a: str
    path_b: str
    score: int
    rationale: str = ""  # e.g. "96:abc:def ~ 96:abd:def"


class SimilarityService:
    """
    Computes near-duplicate relationships between indexed signatures.
    """

    def __init__(self, index: SQLiteIndex, engine: FuzzyHasherPort) -> None:
        self._index = index
        self._engine = engine

    def compute(self, threshold: int = 50) -> Iterable[SimilarityEdge]:
        """
        Yield SimilarityEdge entries whose score is >= `threshold`.

        Notes:
          * Candidate generation is delegated to the index, which only pairs
            signatures with comparable block sizes.
        """
        if not 0 <= threshold <= 100:
            raise ValueError(f"threshold must be within 0..100, got {threshold}")

        compared = 0
        for (id_a, path_a, sig_a), (id_b, path_b, sig_b) in self._index.candidate_pairs(
            self._engine.name()
        ):
            compared += 1
            score = self._engine.compare(sig_a, sig_b)
            if score < threshold or score <= 0:
                continue
            yield SimilarityEdge(
                file_id_a=id_a,
                file_id_b=id_b,
                path_a=path_a,
                path_b=path_b,
                score=score,
                rationale=f"{sig_a} ~ {sig_b}",
            )
        logger.debug("SimilarityService.compute: %d candidate pairs compared", compared)
