# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from ...domain.signature import Signature
from ...ports.similarity import FuzzyHasherPort

logger = logging.getLogger(__name__)

try:
    import ssdeep as _ssdeep  # pip install ssdeep
except Exception:
    _ssdeep = None


def available() -> bool:
    return _ssdeep is not None


class SsdeepAdapter(FuzzyHasherPort):
    """
    Reference backend on top of the libfuzzy binding. Useful for checking the
    native engine against the C implementation; every call degrades to
    None / -1 when the binding is not installed.
    """

    def name(self) -> str:
        return "ssdeep"

    def hash_stream(self, stream: BinaryIO) -> Optional[Signature]:
        if _ssdeep is None:
            return None
        try:
            h = _ssdeep.Hash()
            while True:
                chunk = stream.read(65536)
                if not chunk:
                    break
                h.update(chunk)
            return Signature.parse(h.digest())
        except Exception as e:
            logger.debug("ssdeep backend failed: %s", e)
            return None

    def compare(self, a: Signature, b: Signature) -> int:
        if _ssdeep is None or a is None or b is None:
            return -1
        return int(_ssdeep.compare(str(a), str(b)))
