"""AES-128 key expansion.

The 16-byte key is expanded into 44 four-byte words w[0..43]. Every
fourth word is derived from its predecessor by RotWord, SubWord and an
XOR with the round constant; every word is then XOR-chained with the word
four positions back. Words 4*i .. 4*i+3 form round key i.
"""

from __future__ import annotations

import logging

from .errors import InvalidKeyLength
from .gf_tables import SBOX

logger = logging.getLogger(__name__)

KEY_SIZE = 16
NUM_ROUNDS = 10
EXPANDED_KEY_SIZE = KEY_SIZE * (NUM_ROUNDS + 1)

# Round constants
RCON = [0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1b, 0x36]


def expand_key(key: bytes) -> bytes:
    """Expand a 16-byte key into the 176-byte round key schedule.

    Args:
        key: 16-byte AES-128 key

    Returns:
        176 bytes: 11 consecutive 16-byte round keys, round key 0 first

    Raises:
        InvalidKeyLength: If key is not 16 bytes
    """
    if len(key) != KEY_SIZE:
        raise InvalidKeyLength(len(key))

    w = [list(key[i:i + 4]) for i in range(0, KEY_SIZE, 4)]

    for i in range(4, 4 * (NUM_ROUNDS + 1)):
        temp = w[i - 1][:]
        if i % 4 == 0:
            # RotWord + SubWord + Rcon
            temp = [SBOX[temp[1]], SBOX[temp[2]], SBOX[temp[3]], SBOX[temp[0]]]
            temp[0] ^= RCON[i // 4 - 1]
        w.append([w[i - 4][j] ^ temp[j] for j in range(4)])

    expanded = bytes(b for word in w for b in word)

    if logger.isEnabledFor(logging.DEBUG):
        for round_num, rk in enumerate(round_keys(expanded)):
            logger.debug("round key %2d: %s", round_num, rk.hex())

    return expanded


def round_keys(expanded_key: bytes) -> list[bytes]:
    """Split a key expansion into its 11 round keys.

    Raises:
        InvalidKeyLength: If the expansion is not 176 bytes
    """
    if len(expanded_key) != EXPANDED_KEY_SIZE:
        raise InvalidKeyLength(len(expanded_key), expected=EXPANDED_KEY_SIZE)
    return [
        expanded_key[i:i + KEY_SIZE]
        for i in range(0, EXPANDED_KEY_SIZE, KEY_SIZE)
    ]
