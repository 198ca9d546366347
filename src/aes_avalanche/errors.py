"""Exceptions raised at the cipher API boundary."""

from __future__ import annotations


class AESError(ValueError):
    """Base class for caller contract violations."""


class InvalidKeyLength(AESError):
    """Key (or key expansion) has the wrong number of bytes."""

    def __init__(self, length: int, expected: int = 16):
        self.length = length
        self.expected = expected
        super().__init__(f"Key must be {expected} bytes, got {length}")


class InvalidBlockLength(AESError):
    """Block is not exactly 16 bytes (or a buffer is not block aligned)."""

    def __init__(self, length: int, expected: int = 16, message: str | None = None):
        self.length = length
        self.expected = expected
        super().__init__(message or f"Block must be {expected} bytes, got {length}")


class InvalidBitPosition(AESError):
    """Bit position outside the 128-bit block."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Bit position must be 0..127, got {position}")


class KeyFileError(AESError):
    """Key file is missing, unreadable or does not hold 16 hex bytes."""
