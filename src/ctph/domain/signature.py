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

from dataclasses import dataclass
from typing import Optional

from .errors import SignatureFormatError

B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_B64_SET = frozenset(B64)

SPAMSUM_LENGTH = 64
MIN_BLOCKSIZE = 3


@dataclass(frozen=True)
class Signature:
    """
    A spamsum/ssdeep signature: block size plus two base64-alphabet strings.

    `part1` is produced at `block_size` granularity (up to 64 symbols) and
    `part2` at `2 * block_size` (up to 32 symbols). Length bounds are not
    enforced here; over-long parts simply never match during comparison.
    """

    block_size: int
    part1: str = ""
    part2: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.block_size, bool) or not isinstance(self.block_size, int):
            raise SignatureFormatError(
                f"block_size must be an int, got {type(self.block_size).__name__}"
            )
        if self.block_size < 0:
            raise SignatureFormatError(f"block_size must be >= 0, got {self.block_size}")
        for label, part in (("part1", self.part1), ("part2", self.part2)):
            if not isinstance(part, str):
                raise SignatureFormatError(f"{label} must be a str")
            bad = set(part) - _B64_SET
            if bad:
                raise SignatureFormatError(
                    f"{label} contains symbols outside the base64 alphabet: "
                    f"{''.join(sorted(bad))!r}"
                )

    @classmethod
    def parse(cls, text: Optional[str]) -> Signature:
        """
        Parse the classic `<block_size>:<part1>:<part2>` form.

        A trailing `,"filename"` column, as printed by the ssdeep tool, is
        accepted and dropped.

        Raises:
            SignatureFormatError: empty text, a missing separator or a block
            size that is not a non-negative base-10 integer.
        """
        if not text:
            raise SignatureFormatError("Signature string cannot be empty")

        head, sep1, rest = text.partition(":")
        if not sep1:
            raise SignatureFormatError(f"Signature is not valid: {text!r}")
        part1, sep2, part2 = rest.partition(":")
        if not sep2:
            raise SignatureFormatError(f"Signature is not valid: {text!r}")

        # ssdeep -l / -b output: 96:abc:def,"path/to/file"
        comma = part2.find(",")
        if comma >= 0:
            part2 = part2[:comma]

        head = head.strip()
        if not (head.isascii() and head.isdigit()):
            raise SignatureFormatError(f"Invalid block size {head!r} in {text!r}")

        return cls(int(head), part1, part2.strip())

    def __str__(self) -> str:
        return f"{self.block_size}:{self.part1}:{self.part2}"
