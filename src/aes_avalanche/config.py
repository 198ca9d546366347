"""Configuration for avalanche runs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .avalanche import BLOCK_BITS, AvalancheTarget


@dataclass
class AvalancheConfig:
    """Options shared by the ``avalanche`` and ``trials`` commands.

    Validated on construction so bad CLI input fails before any
    encryption runs.
    """

    target: AvalancheTarget = AvalancheTarget.PLAINTEXT

    # Bit to flip (single-message experiments)
    bit_position: int = 0

    # Random experiments for the statistical sweep
    trials: int = 100

    seed: int | None = None

    output_dir: Path = Path("reports")

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self.target = AvalancheTarget(self.target)
        self.output_dir = Path(self.output_dir)
        if not 0 <= self.bit_position < BLOCK_BITS:
            raise ValueError(f"bit_position must be 0..{BLOCK_BITS - 1}, got {self.bit_position}")
        if self.trials < 1:
            raise ValueError(f"trials must be positive, got {self.trials}")

    @property
    def csv_name(self) -> str:
        """CSV report name for the configured target."""
        return f"avalanche_data_{self.target.value}.csv"
