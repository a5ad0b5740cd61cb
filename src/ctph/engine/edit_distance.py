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

"""
Weighted edit distance in O(n*m) time and O(min(n, m)) space.

Derived from the trn 3.6 routine by Mark Maimone as tuned for spamsum:
fixed costs, and the computation may stop once every cell of a row
exceeds MIN_DIST.

The recursion, with `from` along the columns and `to` along the rows:

    ar(x, 0) := x * insert
    ar(0, y) := y * delete
    ar(x, y) := min(ar(x-1, y-1) + (from[y] == to[x] ? 0 : change),
                    ar(x-1, y) + insert,
                    ar(x, y-1) + delete,
                    ar(x-2, y-2) + (swapped pair ? swap : infinity))

Only the two preceding rows are kept, in one circular buffer of
2 * len(from) + 3 cells. The extra cell keeps the NNWW value alive until
the swap check of the current cell has read it.
"""

from __future__ import annotations

from typing import Optional, Sequence

INSERT_COST = 1
DELETE_COST = 1
CHANGE_COST = 3
SWAP_COST = 5

# rows whose best cell exceeds this stop the computation
MIN_DIST = 100


def _cell(buffer: list, radix: int, x: int, y: int, index: int, ins: int, dele: int) -> int:
    """Matrix value ar(x, y); row 0 and column 0 are derived, not stored."""
    if x == 0:
        return y * dele
    if y == 0:
        return x * ins
    return buffer[index % radix]


def edit_distance(src: Optional[Sequence[int]], dst: Optional[Sequence[int]]) -> int:
    """
    Cost of turning `src` into `dst` with insert=1, delete=1, change=3 and
    swap of an adjacent pair=5.

    Results above MIN_DIST are a lower approximation: once a whole row is
    beyond it the remaining rows are skipped.
    """
    if not src:
        return len(dst) * INSERT_COST if dst else 0
    if not dst:
        return len(src) * DELETE_COST
    if src == dst:
        return 0

    ins, dele = INSERT_COST, DELETE_COST

    # keep the buffer proportional to the shorter input
    if len(src) > len(dst):
        src, dst = dst, src
        ins, dele = dele, ins

    from_len = len(src)
    to_len = len(dst)
    radix = 2 * from_len + 3
    buffer = [0] * radix

    # Row 1 of the matrix (string row 0); no swap is possible yet.
    index = 0
    buffer[index] = min(ins + dele, 0 if src[0] == dst[0] else CHANGE_COST)
    low = buffer[index]
    index += 1

    for col in range(1, from_len):
        value = min(
            col * dele + (0 if src[col] == dst[0] else CHANGE_COST),
            (col + 1) * dele + ins,
            buffer[index - 1] + dele,
        )
        buffer[index] = value
        if value < low:
            low = value
        index += 1

    for row in range(1, to_len):
        for col in range(from_len):
            nw = _cell(buffer, radix, row, col, index + from_len + 2, ins, dele)
            n = _cell(buffer, radix, row, col + 1, index + from_len + 3, ins, dele)
            w = _cell(buffer, radix, row + 1, col, index + radix - 1, ins, dele)
            value = min(
                nw + (0 if src[col] == dst[row] else CHANGE_COST),
                n + ins,
                w + dele,
            )

            if col > 0 and src[col] == dst[row - 1] and src[col - 1] == dst[row]:
                nnww = _cell(buffer, radix, row - 1, col - 1, index + 1, ins, dele)
                value = min(value, nnww + SWAP_COST)

            buffer[index] = value
            if value < low or col == 0:
                low = value

            index = (index + 1) % radix

        if low > MIN_DIST:
            break

    return buffer[(index + radix - 1) % radix]
