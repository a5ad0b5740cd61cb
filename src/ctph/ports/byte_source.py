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

from abc import ABC, abstractmethod


class ByteSourcePort(ABC):
    """
    A finite, re-readable byte sequence of known length.

    Block-size calibration may need several full passes over the input, so
    implementations must support going back to the first byte any number of
    times.
    """

    @abstractmethod
    def length(self) -> int:
        """Total number of bytes in the source."""
        raise NotImplementedError

    @abstractmethod
    def rewind(self) -> None:
        """Position the source at its first byte."""
        raise NotImplementedError

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Return up to `size` bytes; an empty result means end of input."""
        raise NotImplementedError
