from .byte_source import ByteSourcePort
from .filesystem import FilesystemPort
from .similarity import FuzzyHasherPort

__all__ = ["ByteSourcePort", "FilesystemPort", "FuzzyHasherPort"]
