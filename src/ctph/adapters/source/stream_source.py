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
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ...domain.errors import InvalidInputError
from ...ports.byte_source import ByteSourcePort


class BytesSource(ByteSourcePort):
    """In-memory bytes (or any buffer) exposed as a re-readable source."""

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._view = memoryview(data).cast("B")
        self._pos = 0

    def length(self) -> int:
        return len(self._view)

    def rewind(self) -> None:
        self._pos = 0

    def read(self, size: int) -> bytes:
        chunk = self._view[self._pos : self._pos + size]
        self._pos += len(chunk)
        return chunk.tobytes()


class StreamSource(ByteSourcePort):
    """
    Wraps a seekable binary stream owned by the caller.

    The stream's position at construction time is remembered; `restore()`
    puts it back once hashing is done. The source covers the whole stream
    (offset 0 to EOF) regardless of that starting position.
    """

    def __init__(self, stream: BinaryIO) -> None:
        if stream is None:
            raise InvalidInputError("stream must not be None")
        if not _is_seekable(stream):
            raise InvalidInputError("stream must be seekable; wrap it in BytesSource instead")
        if not isinstance(stream.read(0), (bytes, bytearray)):
            raise InvalidInputError("stream must be opened in binary mode")
        self._stream = stream
        self._origin = stream.tell()
        stream.seek(0, os.SEEK_END)
        self._length = stream.tell()
        stream.seek(self._origin, os.SEEK_SET)

    def length(self) -> int:
        return self._length

    def rewind(self) -> None:
        self._stream.seek(0, os.SEEK_SET)

    def read(self, size: int) -> bytes:
        return self._stream.read(size)

    def restore(self) -> None:
        self._stream.seek(self._origin, os.SEEK_SET)

    def __enter__(self) -> StreamSource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()


class FileSource(ByteSourcePort):
    """A file on disk, opened in binary mode until `close()`."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._fh: Optional[BinaryIO] = open(self.path, "rb")
        try:
            self._length = os.fstat(self._fh.fileno()).st_size
        except OSError:
            self._fh.close()
            raise

    def length(self) -> int:
        return self._length

    def rewind(self) -> None:
        self._handle().seek(0, os.SEEK_SET)

    def read(self, size: int) -> bytes:
        return self._handle().read(size)

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> FileSource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _handle(self) -> BinaryIO:
        if self._fh is None:
            raise ValueError(f"FileSource for {self.path} is closed")
        return self._fh


def _is_seekable(stream: BinaryIO) -> bool:
    try:
        return bool(stream.seekable())
    except (AttributeError, ValueError, io.UnsupportedOperation):
        return False
