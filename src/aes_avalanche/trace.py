"""
Round-state recording for the forward pipeline.

``RoundTrace`` is passed to ``encrypt_block`` as its observer. It keeps
every checkpoint in memory and can mirror them to a JSON Lines file.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TextIO

from .utils import format_block_grid

logger = logging.getLogger(__name__)


class RoundTrace:
    """
    Records the state after round 0 and after each of rounds 1..10.

    Supports:
    - in-memory checkpoints (always)
    - JSON Lines output (when trace_file is set)
    - 4x4 grid dumps to the log at DEBUG (when verbose is set)
    """

    def __init__(
        self,
        label: str = "",
        trace_file: TextIO | None = None,
        verbose: bool = False,
    ):
        self.label = label
        self.trace_file = trace_file
        self.verbose = verbose
        self._states: list[tuple[int, bytes]] = []

    def __call__(self, round_num: int, state: bytes) -> None:
        self._states.append((round_num, state))

        if self.trace_file:
            self._write_jsonl({
                "label": self.label,
                "round": round_num,
                "state": state,
            })

        if self.verbose:
            logger.debug("%s round %d:\n%s", self.label or "trace", round_num,
                         format_block_grid(state))

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = {
            k: v.hex() if isinstance(v, bytes) else v for k, v in record.items()
        }
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    @property
    def states(self) -> list[bytes]:
        """States in checkpoint order."""
        return [state for _, state in self._states]

    @property
    def rounds(self) -> list[int]:
        return [round_num for round_num, _ in self._states]

    def clear(self) -> None:
        self._states.clear()

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return f"RoundTrace(label={self.label!r}, checkpoints={len(self._states)})"
