# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from ...domain.signature import Signature
from ...engine.calibrator import calculate
from ...engine.comparator import compare
from ...ports.similarity import FuzzyHasherPort

logger = logging.getLogger(__name__)


class SpamSumAdapter(FuzzyHasherPort):
    """Native context-triggered piecewise hashing (the `ctph.engine` package)."""

    def name(self) -> str:
        return "spamsum"

    def hash_stream(self, stream: BinaryIO) -> Optional[Signature]:
        if stream.seekable():
            return calculate(stream)
        # calibration needs several passes; buffer one-shot streams
        logger.debug("buffering non-seekable stream for hashing")
        return calculate(stream.read())

    def compare(self, a: Signature, b: Signature) -> int:
        return compare(a, b)
