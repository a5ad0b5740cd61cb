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

from typing import List

from ..domain.errors import HashingError, InvalidInputError
from ..domain.signature import B64, SPAMSUM_LENGTH, Signature
from ..ports.byte_source import ByteSourcePort
from .rolling import MASK32, RollingState, roll


HASH_PRIME = 0x01000193
HASH_INIT = 0x28021967
BUFFER_SIZE = 8192


class GenerationContext:
    """
    State of one signature attempt at a fixed block size.

    Each reset point of the rolling hash closes a piece of the input and
    emits one symbol of the FNV-style hash of that piece. The second output
    runs the same way at twice the block size, which softens the effect of
    small size changes near a block-size boundary.
    """

    __slots__ = (
        "block_size",
        "total_length",
        "roll_state",
        "acc1",
        "acc2",
        "chars1",
        "chars2",
    )

    def __init__(self, block_size: int, total_length: int = 0) -> None:
        if block_size <= 0:
            raise InvalidInputError(f"block_size must be positive, got {block_size}")
        self.block_size = block_size
        self.total_length = total_length
        self.roll_state = RollingState()
        self.acc1 = HASH_INIT
        self.acc2 = HASH_INIT
        # chars emitted at reset points; their length is the output cursor
        self.chars1: List[str] = []
        self.chars2: List[str] = []

    @property
    def cursor1(self) -> int:
        return len(self.chars1)

    @property
    def cursor2(self) -> int:
        return len(self.chars2)

    def update(self, data: bytes) -> None:
        """Run the piecewise hash over `data`, continuing from the current state."""
        rs = self.roll_state
        acc1 = self.acc1
        acc2 = self.acc2
        chars1 = self.chars1
        chars2 = self.chars2
        bs1 = self.block_size
        bs2 = bs1 * 2
        limit1 = SPAMSUM_LENGTH - 1
        limit2 = SPAMSUM_LENGTH // 2 - 1

        for c in data:
            h = roll(rs, c)
            acc1 = ((acc1 * HASH_PRIME) & MASK32) ^ c
            acc2 = ((acc2 * HASH_PRIME) & MASK32) ^ c

            if h % bs1 == bs1 - 1:
                # Once the last slot is reached the accumulator keeps running,
                # folding the rest of the input into the final symbol.
                if len(chars1) < limit1:
                    chars1.append(B64[acc1 % 64])
                    acc1 = HASH_INIT

            if h % bs2 == bs2 - 1:
                if len(chars2) < limit2:
                    chars2.append(B64[acc2 % 64])
                    acc2 = HASH_INIT

        self.acc1 = acc1
        self.acc2 = acc2

    def digest(self) -> Signature:
        """Signature for everything fed so far, including the trailing piece."""
        part1 = "".join(self.chars1)
        part2 = "".join(self.chars2)
        if self.roll_state.n:
            part1 += B64[self.acc1 % 64]
            part2 += B64[self.acc2 % 64]
        return Signature(self.block_size, part1, part2)


def generate(source: ByteSourcePort, block_size: int) -> GenerationContext:
    """
    Hash the entire `source` at `block_size`, starting from its first byte.

    Raises:
        InvalidInputError: on a missing source or non-positive block size.
        HashingError: when the source fails to rewind or read.
    """
    if source is None:
        raise InvalidInputError("byte source must not be None")

    ctx = GenerationContext(block_size, source.length())
    try:
        source.rewind()
        while True:
            chunk = source.read(BUFFER_SIZE)
            if not chunk:
                break
            ctx.update(chunk)
    except OSError as e:
        raise HashingError(f"Reading byte source failed: {e}") from e
    return ctx
