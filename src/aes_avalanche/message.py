"""Message framing and key/ciphertext file handling.

Messages are zero-padded to a multiple of 16 bytes and processed one
block at a time (ECB-style, no chaining). Ciphertext files hold exactly
N * 16 raw bytes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from .cipher import BLOCK_SIZE, decrypt_block, encrypt_block
from .errors import InvalidBlockLength, KeyFileError
from .key_schedule import KEY_SIZE, expand_key

logger = logging.getLogger(__name__)


def pad_message(data: bytes) -> bytes:
    """Zero-pad ``data`` to a multiple of the block size."""
    remainder = len(data) % BLOCK_SIZE
    if remainder == 0:
        return data
    return data + bytes(BLOCK_SIZE - remainder)


def strip_padding(data: bytes) -> bytes:
    """Remove trailing zero bytes added by ``pad_message``."""
    return data.rstrip(b"\x00")


def iter_blocks(data: bytes) -> Iterator[bytes]:
    """Yield consecutive 16-byte blocks of a padded buffer.

    Raises:
        InvalidBlockLength: If len(data) is not a multiple of 16
    """
    if len(data) % BLOCK_SIZE:
        raise InvalidBlockLength(
            len(data),
            message=f"Buffer length must be a multiple of {BLOCK_SIZE}, got {len(data)}",
        )
    for offset in range(0, len(data), BLOCK_SIZE):
        yield data[offset:offset + BLOCK_SIZE]


def encrypt_message(data: bytes, key: bytes) -> bytes:
    """Pad and encrypt a message block by block."""
    expanded_key = expand_key(key)
    padded = pad_message(data)
    return b"".join(encrypt_block(block, expanded_key) for block in iter_blocks(padded))


def decrypt_message(data: bytes, key: bytes) -> bytes:
    """Decrypt a block-aligned ciphertext. Padding is left in place."""
    expanded_key = expand_key(key)
    return b"".join(decrypt_block(block, expanded_key) for block in iter_blocks(data))


def parse_key_hex(text: str) -> bytes:
    """Parse a 16-byte key written as hex.

    Accepts whitespace-separated byte pairs (``"2b 7e 15 ..."``) or one
    contiguous 32-character string.

    Raises:
        KeyFileError: If the text is not valid hex or not 16 bytes
    """
    tokens = text.split()
    try:
        if len(tokens) > 1:
            key = bytes(int(tok, 16) for tok in tokens)
        else:
            key = bytes.fromhex("".join(tokens))
    except ValueError as e:
        raise KeyFileError(f"Invalid key hex: {e}") from e

    if len(key) != KEY_SIZE:
        raise KeyFileError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    return key


def read_key_file(path: str | Path) -> bytes:
    """Read a hex key from the first line of ``path``."""
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise KeyFileError(f"Unable to open key file {path}: {e}") from e

    lines = text.splitlines()
    key = parse_key_hex(lines[0] if lines else "")
    logger.debug("loaded key from %s", path)
    return key


def read_binary(path: str | Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def write_binary(path: str | Path, data: bytes) -> Path:
    """Write raw bytes, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    logger.info("wrote %d bytes to %s", len(data), path)
    return path
