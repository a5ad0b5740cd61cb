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

import logging
from typing import Dict, List, Optional, Union

from ..domain.signature import MIN_BLOCKSIZE, SPAMSUM_LENGTH, Signature
from .edit_distance import edit_distance
from .rolling import ROLLING_WINDOW, RollingState, roll

logger = logging.getLogger(__name__)

Text = Union[str, bytes, bytearray]


def _as_bytes(s: Text) -> bytes:
    if isinstance(s, str):
        return s.encode("ascii", "replace")
    return bytes(s)


def eliminate_sequences(s: Text) -> Text:
    """
    Collapse runs of more than 3 identical symbols down to 3.

    Long runs like 'LLLLL' carry very little information and would bias
    both the common-substring test and the edit distance.
    """
    if len(s) <= 3:
        return s
    keep = [0, 1, 2]
    for i in range(3, len(s)):
        if s[i] != s[i - 1] or s[i] != s[i - 2] or s[i] != s[i - 3]:
            keep.append(i)
    if len(keep) == len(s):
        return s
    if isinstance(s, str):
        return "".join(s[i] for i in keep)
    return type(s)(s[i] for i in keep)


def has_common_substring(s1: Text, s2: Text) -> bool:
    """
    True when `s1` and `s2` share a run of ROLLING_WINDOW symbols.

    The rolling hash of every window of `s1` is indexed; each window of `s2`
    whose hash hits the index is confirmed by a direct comparison.
    """
    b1 = _as_bytes(s1)
    b2 = _as_bytes(s2)
    if len(b1) < ROLLING_WINDOW or len(b2) < ROLLING_WINDOW:
        return False

    state = RollingState()
    index: Dict[int, List[int]] = {}
    for j, c in enumerate(b1):
        h = roll(state, c)
        if j >= ROLLING_WINDOW - 1 and h != 0:
            index.setdefault(h, []).append(j)

    state = RollingState()
    for i, c in enumerate(b2):
        h = roll(state, c)
        if i < ROLLING_WINDOW - 1:
            continue
        candidates = index.get(h)
        if not candidates:
            continue
        start = i - (ROLLING_WINDOW - 1)
        window = b2[start : i + 1]
        for j in candidates:
            if b1[j - (ROLLING_WINDOW - 1) : j + 1] == window:
                return True
    return False


def score_strings(s1: Text, s2: Text, block_size: int) -> int:
    """
    Score two normalized signature parts from 0 (no match) to 100.

    The edit distance is scaled by the combined length so the score measures
    the proportion of the input that changed. For small block sizes the
    score is capped so tiny inputs cannot claim a strong match.
    """
    len1 = len(s1)
    len2 = len(s2)

    if len1 > SPAMSUM_LENGTH or len2 > SPAMSUM_LENGTH:
        # not a real spamsum signature
        return 0

    if not has_common_substring(s1, s2):
        return 0

    score = edit_distance(_as_bytes(s1), _as_bytes(s2))

    # roughly 0..64, 0 being a good match
    score = (score * SPAMSUM_LENGTH) // (len1 + len2)
    score = (100 * score) // SPAMSUM_LENGTH
    if score >= 100:
        return 0
    score = 100 - score

    cap = (block_size // MIN_BLOCKSIZE) * min(len1, len2)
    if score > cap:
        score = cap
    return score


def compare(sig1: Optional[Signature], sig2: Optional[Signature]) -> int:
    """
    Similarity of two signatures: 0..100, -1 if either is missing.

    Signatures whose block sizes are neither equal nor a factor of two apart
    describe the input at unrelated granularities; they score 0.
    """
    if sig1 is None or sig2 is None:
        return -1

    bs1 = sig1.block_size
    bs2 = sig2.block_size
    if bs1 != bs2 and bs1 != bs2 * 2 and bs2 != bs1 * 2:
        logger.debug("block sizes %d and %d are not comparable", bs1, bs2)
        return 0

    s1_1 = eliminate_sequences(sig1.part1)
    s1_2 = eliminate_sequences(sig1.part2)
    s2_1 = eliminate_sequences(sig2.part1)
    s2_2 = eliminate_sequences(sig2.part2)

    if bs1 == bs2:
        return max(score_strings(s1_1, s2_1, bs1), score_strings(s1_2, s2_2, bs1))
    if bs1 == bs2 * 2:
        return score_strings(s1_1, s2_2, bs1)
    return score_strings(s1_2, s2_1, bs2)


def compare_text(text1: str, text2: str) -> int:
    """Parse two `<block_size>:<part1>:<part2>` strings and compare them."""
    return compare(Signature.parse(text1), Signature.parse(text2))
