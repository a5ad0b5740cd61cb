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

import io
import logging
from pathlib import Path
from typing import Union

from ..adapters.source.stream_source import BytesSource, FileSource, StreamSource
from ..domain.errors import HashingError, InvalidInputError
from ..domain.signature import MIN_BLOCKSIZE, SPAMSUM_LENGTH, Signature
from ..ports.byte_source import ByteSourcePort
from .generator import generate

logger = logging.getLogger(__name__)

Hashable = Union[ByteSourcePort, bytes, bytearray, memoryview, io.IOBase]


def initial_block_size(total_length: int) -> int:
    """Smallest 3 * 2**k such that 64 symbols at that block size cover the input."""
    block_size = MIN_BLOCKSIZE
    while block_size * SPAMSUM_LENGTH < total_length:
        block_size *= 2
    return block_size


def calculate_source(source: ByteSourcePort) -> Signature:
    """
    Compute the signature of a re-readable byte source.

    The first block-size guess only depends on the input length, so it can
    be too coarse for inputs with few reset points. In that case the whole
    input is hashed again at half the block size until part1 gets at least
    32 symbols from reset points or the minimum block size is reached.
    """
    if source is None:
        raise InvalidInputError("byte source must not be None")

    total = source.length()
    block_size = initial_block_size(total)

    while True:
        ctx = generate(source, block_size)
        if block_size > MIN_BLOCKSIZE and ctx.cursor1 < SPAMSUM_LENGTH // 2:
            logger.debug(
                "block size %d too coarse for %d bytes (%d symbols), retrying at %d",
                block_size,
                total,
                ctx.cursor1,
                block_size // 2,
            )
            block_size //= 2
            continue
        return ctx.digest()


def calculate(data: Hashable) -> Signature:
    """
    Fuzzy hash of `data`: a ByteSourcePort, a bytes-like object, or a
    seekable binary stream (whose position is restored afterwards).
    """
    if data is None:
        raise InvalidInputError("Nothing to hash: input is None")
    if isinstance(data, ByteSourcePort):
        return calculate_source(data)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return calculate_source(BytesSource(data))
    if hasattr(data, "read") and hasattr(data, "seek"):
        with StreamSource(data) as source:  # type: ignore[arg-type]
            return calculate_source(source)
    raise InvalidInputError(
        f"Cannot hash object of type {type(data).__name__}; "
        "expected bytes, a seekable binary stream or a ByteSourcePort"
    )


def calculate_file(path: Union[str, Path]) -> Signature:
    """Fuzzy hash of the file at `path`."""
    if path is None:
        raise InvalidInputError("Nothing to hash: path is None")
    try:
        source = FileSource(path)
    except OSError as e:
        raise HashingError(f"Cannot open {path}: {e}") from e
    with source:
        return calculate_source(source)
