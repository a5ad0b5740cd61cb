# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import BinaryIO, Optional, Protocol

from ..domain.signature import Signature


class FuzzyHasherPort(Protocol):
    """
    Context-triggered piecewise hashing backend.
    Implementers may return None from `hash_stream` when the backend is
    unavailable or on recoverable failure.
    """

    def name(self) -> str: ...

    def hash_stream(self, stream: BinaryIO) -> Optional[Signature]:
        """Return the fuzzy hash of a seekable binary stream, or None."""
        ...

    def compare(self, a: Signature, b: Signature) -> int:
        """Return a similarity score in 0..100 (or -1 on invalid input)."""
        ...
