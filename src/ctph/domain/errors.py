class CtphError(Exception):
    """Base exception for domain-specific errors."""


class InvalidInputError(CtphError, ValueError):
    """Absent or unusable input handed to the engine (no byte source, bad block size)."""


class SignatureFormatError(CtphError, ValueError):
    """Signature text or fields that do not follow `<block_size>:<part1>:<part2>`."""


class HashingError(CtphError):
    """Problems while reading a byte source during signature generation."""


class PersistenceError(CtphError):
    """Database or storage layer problems."""
