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
Rolling checksum over a 7-byte window, based on the Adler checksum.

`h1` is the sum of the bytes in the window and `h2` the sum of the bytes
weighted by their position; together they let the generator resynchronise
after inserts and deletes. `h3` is a shift/xor hash over the whole stream,
mostly there so that large block sizes still see enough entropy.
"""

ROLLING_WINDOW = 7
MASK32 = 0xFFFFFFFF


class RollingState:
    """Mutable state of one rolling pass; `RollingState()` is the reset state."""

    __slots__ = ("window", "h1", "h2", "h3", "n")

    def __init__(self) -> None:
        self.window = bytearray(ROLLING_WINDOW)
        self.h1 = 0
        self.h2 = 0
        self.h3 = 0
        self.n = 0

    def __repr__(self) -> str:
        return (
            f"RollingState(h1={self.h1:#x}, h2={self.h2:#x}, "
            f"h3={self.h3:#x}, n={self.n})"
        )


def roll(state: RollingState, c: int) -> int:
    """Feed byte `c` into `state` and return the 32-bit rolling hash."""
    slot = state.n % ROLLING_WINDOW

    state.h2 = (state.h2 - state.h1 + ROLLING_WINDOW * c) & MASK32
    state.h1 = (state.h1 + c - state.window[slot]) & MASK32

    state.window[slot] = c
    state.n += 1

    # bits shifted past 32 are dropped
    state.h3 = ((state.h3 << 5) & MASK32) ^ c

    return (state.h1 + state.h2 + state.h3) & MASK32
