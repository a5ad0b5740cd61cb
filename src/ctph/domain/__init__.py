from .errors import (
    CtphError,
    HashingError,
    InvalidInputError,
    PersistenceError,
    SignatureFormatError,
)
from .signature import B64, MIN_BLOCKSIZE, SPAMSUM_LENGTH, Signature

__all__ = [
    "B64",
    "CtphError",
    "HashingError",
    "InvalidInputError",
    "MIN_BLOCKSIZE",
    "PersistenceError",
    "SPAMSUM_LENGTH",
    "Signature",
    "SignatureFormatError",
]
