"""AES-128 forward and inverse round pipelines.

The state is a flat list of 16 ints in column-major order, so byte
``4 * col + row`` holds matrix entry (row, col)::

    [0, 4,  8, 12]
    [1, 5,  9, 13]
    [2, 6, 10, 14]
    [3, 7, 11, 15]

Every transform returns a new list; callers never share a state.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import InvalidBlockLength
from .gf_tables import INV_SBOX, MUL2, MUL3, MUL9, MUL11, MUL13, MUL14, SBOX
from .key_schedule import NUM_ROUNDS, round_keys

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16

# Called with (round_num, state_bytes) after round 0 and after rounds 1..10
RoundObserver = Callable[[int, bytes], None]

# new[r + 4c] = old[r + 4((c + r) mod 4)]: row r rotated left by r
SHIFT_ROWS_MAP = [(i % 4) + 4 * ((i // 4 + i % 4) % 4) for i in range(BLOCK_SIZE)]
INV_SHIFT_ROWS_MAP = [(i % 4) + 4 * ((i // 4 - i % 4) % 4) for i in range(BLOCK_SIZE)]


def _check_block(block: bytes) -> None:
    if len(block) != BLOCK_SIZE:
        raise InvalidBlockLength(len(block))


# ------------------------------------------------------------------
# Round transforms
# ------------------------------------------------------------------

def add_round_key(state: list[int], round_key: bytes) -> list[int]:
    """XOR state with round key. Applying it twice restores the state."""
    return [s ^ k for s, k in zip(state, round_key)]


def sub_bytes(state: list[int]) -> list[int]:
    """Apply S-box to each byte."""
    return [SBOX[b] for b in state]


def inv_sub_bytes(state: list[int]) -> list[int]:
    """Apply inverse S-box to each byte."""
    return [INV_SBOX[b] for b in state]


def shift_rows(state: list[int]) -> list[int]:
    """Rotate row r left by r positions."""
    return [state[i] for i in SHIFT_ROWS_MAP]


def inv_shift_rows(state: list[int]) -> list[int]:
    """Rotate row r right by r positions."""
    return [state[i] for i in INV_SHIFT_ROWS_MAP]


def mix_columns(state: list[int]) -> list[int]:
    """Multiply each column by the circulant matrix (2, 3, 1, 1)."""
    result = []
    for col in range(4):
        a0, a1, a2, a3 = state[col * 4:col * 4 + 4]
        result.extend([
            MUL2[a0] ^ MUL3[a1] ^ a2 ^ a3,
            a0 ^ MUL2[a1] ^ MUL3[a2] ^ a3,
            a0 ^ a1 ^ MUL2[a2] ^ MUL3[a3],
            MUL3[a0] ^ a1 ^ a2 ^ MUL2[a3],
        ])
    return result


def inv_mix_columns(state: list[int]) -> list[int]:
    """Multiply each column by the circulant matrix (14, 11, 13, 9)."""
    result = []
    for col in range(4):
        a0, a1, a2, a3 = state[col * 4:col * 4 + 4]
        result.extend([
            MUL14[a0] ^ MUL11[a1] ^ MUL13[a2] ^ MUL9[a3],
            MUL9[a0] ^ MUL14[a1] ^ MUL11[a2] ^ MUL13[a3],
            MUL13[a0] ^ MUL9[a1] ^ MUL14[a2] ^ MUL11[a3],
            MUL11[a0] ^ MUL13[a1] ^ MUL9[a2] ^ MUL14[a3],
        ])
    return result


# ------------------------------------------------------------------
# Block operations
# ------------------------------------------------------------------

def encrypt_block(
    plaintext: bytes,
    expanded_key: bytes,
    observer: RoundObserver | None = None,
) -> bytes:
    """Encrypt a single 16-byte block.

    Args:
        plaintext: 16-byte plaintext block
        expanded_key: 176-byte key expansion from ``expand_key``
        observer: Optional hook called with ``(round_num, state)`` after the
            initial AddRoundKey (round 0) and after each of rounds 1..10

    Returns:
        16-byte ciphertext block

    Raises:
        InvalidBlockLength: If plaintext is not 16 bytes
        InvalidKeyLength: If expanded_key is not 176 bytes
    """
    _check_block(plaintext)
    keys = round_keys(expanded_key)

    def checkpoint(round_num: int, state: list[int]) -> None:
        snapshot = bytes(state)
        logger.debug("encrypt round %2d: %s", round_num, snapshot.hex())
        if observer is not None:
            observer(round_num, snapshot)

    # Initial round (just AddRoundKey)
    state = add_round_key(list(plaintext), keys[0])
    checkpoint(0, state)

    # Main rounds 1-9
    for round_num in range(1, NUM_ROUNDS):
        state = sub_bytes(state)
        state = shift_rows(state)
        state = mix_columns(state)
        state = add_round_key(state, keys[round_num])
        checkpoint(round_num, state)

    # Final round (no MixColumns)
    state = sub_bytes(state)
    state = shift_rows(state)
    state = add_round_key(state, keys[NUM_ROUNDS])
    checkpoint(NUM_ROUNDS, state)

    return bytes(state)


def decrypt_block(ciphertext: bytes, expanded_key: bytes) -> bytes:
    """Decrypt a single 16-byte block.

    Args:
        ciphertext: 16-byte ciphertext block
        expanded_key: 176-byte key expansion from ``expand_key``

    Returns:
        16-byte plaintext block

    Raises:
        InvalidBlockLength: If ciphertext is not 16 bytes
        InvalidKeyLength: If expanded_key is not 176 bytes
    """
    _check_block(ciphertext)
    keys = round_keys(expanded_key)

    state = add_round_key(list(ciphertext), keys[NUM_ROUNDS])
    state = inv_shift_rows(state)
    state = inv_sub_bytes(state)

    for round_num in range(NUM_ROUNDS - 1, 0, -1):
        state = add_round_key(state, keys[round_num])
        state = inv_mix_columns(state)
        state = inv_shift_rows(state)
        state = inv_sub_bytes(state)
        logger.debug("decrypt round %2d: %s", round_num, bytes(state).hex())

    state = add_round_key(state, keys[0])
    return bytes(state)
