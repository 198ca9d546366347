"""Avalanche-effect measurement.

Runs the forward pipeline twice, once on the baseline input and once with
a single plaintext or key bit flipped, and records the Hamming distance
between the two runs' states after every round (11 checkpoints).
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Any, Iterable

from .cipher import BLOCK_SIZE, encrypt_block
from .errors import InvalidBitPosition, InvalidBlockLength, InvalidKeyLength
from .key_schedule import EXPANDED_KEY_SIZE, KEY_SIZE, expand_key
from .trace import RoundTrace
from .utils import xor_bytes

logger = logging.getLogger(__name__)

BLOCK_BITS = BLOCK_SIZE * 8


class AvalancheTarget(str, enum.Enum):
    """Which input receives the flipped bit."""

    PLAINTEXT = "plaintext"
    KEY = "key"


@dataclass(frozen=True)
class AvalancheRecord:
    """Per-round changed-bit counts for one block under one bit flip."""

    target: AvalancheTarget
    bit_position: int
    rounds: tuple[tuple[int, int], ...]
    block_index: int = 0

    @property
    def changed_bits(self) -> list[int]:
        """Changed-bit counts ordered by round."""
        return [count for _, count in self.rounds]

    @property
    def final_changed_bits(self) -> int:
        return self.rounds[-1][1]

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for serialization."""
        return {
            "target": self.target.value,
            "bit_position": self.bit_position,
            "block_index": self.block_index,
            "rounds": [
                {"round": round_num, "changed_bits": count}
                for round_num, count in self.rounds
            ],
        }


def count_changed_bits(a: bytes, b: bytes) -> int:
    """Hamming distance between two equal-length byte strings."""
    return sum(bin(x).count("1") for x in xor_bytes(a, b))


def check_bit_position(bit_position: int) -> None:
    """Raise InvalidBitPosition unless bit_position is an int in 0..127."""
    if isinstance(bit_position, bool) or not isinstance(bit_position, int):
        raise InvalidBitPosition(bit_position)
    if not 0 <= bit_position < BLOCK_BITS:
        raise InvalidBitPosition(bit_position)


def flip_bit(data: bytes, bit_position: int) -> bytes:
    """Return a copy of ``data`` with one bit toggled.

    Bit ``p`` is bit ``p % 8`` (LSB = 0) of byte ``p // 8``, so position 0
    is the low bit of byte 0 and position 127 the high bit of byte 15.

    Args:
        data: 16-byte block or key
        bit_position: Bit to flip, 0..127

    Returns:
        New 16-byte value; ``data`` is not modified

    Raises:
        InvalidBitPosition: If bit_position is not an int in 0..127
        InvalidBlockLength: If data is not 16 bytes
    """
    check_bit_position(bit_position)
    if len(data) != BLOCK_SIZE:
        raise InvalidBlockLength(len(data))
    flipped = bytearray(data)
    flipped[bit_position // 8] ^= 1 << (bit_position % 8)
    return bytes(flipped)


def _flip_key_bit(key: bytes, bit_position: int) -> bytes:
    """Expand ``key`` with one bit flipped."""
    if len(key) != KEY_SIZE:
        raise InvalidKeyLength(len(key))
    return expand_key(flip_bit(key, bit_position))


def _measure(
    block: bytes,
    expanded_key: bytes,
    perturbed_block: bytes,
    perturbed_key: bytes,
) -> tuple[tuple[int, int], ...]:
    baseline = RoundTrace(label="baseline")
    perturbed = RoundTrace(label="perturbed")
    encrypt_block(block, expanded_key, observer=baseline)
    encrypt_block(perturbed_block, perturbed_key, observer=perturbed)

    return tuple(
        (round_num, count_changed_bits(a, b))
        for round_num, a, b in zip(baseline.rounds, baseline.states, perturbed.states)
    )


def run_avalanche_experiment(
    block: bytes,
    expanded_key: bytes,
    bit_position: int,
    target: AvalancheTarget | str,
    block_index: int = 0,
) -> AvalancheRecord:
    """Measure per-round diffusion of a single bit flip.

    For the key target the cipher key is recovered from the expansion
    (round key 0 is the key itself), flipped, and expanded again.

    Args:
        block: 16-byte baseline plaintext
        expanded_key: 176-byte expansion of the baseline key
        bit_position: Bit to flip, 0..127
        target: ``plaintext`` or ``key``
        block_index: Position of ``block`` within its message

    Returns:
        AvalancheRecord with 11 (round, changed_bits) pairs

    Raises:
        InvalidBitPosition: If bit_position is not an int in 0..127
        InvalidBlockLength: If block is not 16 bytes
        InvalidKeyLength: If expanded_key is not 176 bytes
    """
    target = AvalancheTarget(target)
    check_bit_position(bit_position)
    if len(block) != BLOCK_SIZE:
        raise InvalidBlockLength(len(block))
    if len(expanded_key) != EXPANDED_KEY_SIZE:
        raise InvalidKeyLength(len(expanded_key), expected=EXPANDED_KEY_SIZE)

    if target is AvalancheTarget.PLAINTEXT:
        perturbed_block = flip_bit(block, bit_position)
        perturbed_key = expanded_key
    else:
        perturbed_block = block
        perturbed_key = _flip_key_bit(bytes(expanded_key[:KEY_SIZE]), bit_position)

    rounds = _measure(block, expanded_key, perturbed_block, perturbed_key)
    logger.debug(
        "avalanche %s bit=%d block=%d: %s",
        target.value, bit_position, block_index, [c for _, c in rounds],
    )
    return AvalancheRecord(
        target=target,
        bit_position=bit_position,
        rounds=rounds,
        block_index=block_index,
    )


def run_avalanche_message(
    blocks: Iterable[bytes],
    key: bytes,
    bit_position: int,
    target: AvalancheTarget | str,
) -> list[AvalancheRecord]:
    """Run one experiment per block of a padded message.

    The key is expanded once; for the key target the flipped key is also
    expanded once and shared by every block.
    """
    target = AvalancheTarget(target)
    check_bit_position(bit_position)
    expanded_key = expand_key(key)

    if target is AvalancheTarget.KEY:
        perturbed_key = _flip_key_bit(key, bit_position)

    records = []
    for index, block in enumerate(blocks):
        if target is AvalancheTarget.PLAINTEXT:
            rounds = _measure(block, expanded_key, flip_bit(block, bit_position), expanded_key)
        else:
            if len(block) != BLOCK_SIZE:
                raise InvalidBlockLength(len(block))
            rounds = _measure(block, expanded_key, block, perturbed_key)
        records.append(AvalancheRecord(
            target=target,
            bit_position=bit_position,
            rounds=rounds,
            block_index=index,
        ))

    logger.info(
        "avalanche %s bit=%d: %d block(s) measured",
        target.value, bit_position, len(records),
    )
    return records


def run_avalanche_trials(
    trials: int,
    target: AvalancheTarget | str,
    seed: int | None = None,
) -> list[AvalancheRecord]:
    """Run ``trials`` experiments on random keys, blocks and bit positions.

    A seeded ``random.Random`` makes the sweep reproducible.
    """
    if trials < 1:
        raise ValueError(f"trials must be positive, got {trials}")

    rng = random.Random(seed)
    records = []
    for _ in range(trials):
        key = bytes(rng.randint(0, 255) for _ in range(16))
        block = bytes(rng.randint(0, 255) for _ in range(16))
        bit_position = rng.randrange(BLOCK_BITS)
        records.append(run_avalanche_experiment(
            block, expand_key(key), bit_position, target,
        ))
    return records
