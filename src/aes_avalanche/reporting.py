"""Reporting for avalanche experiments.

Writes CSV and JSON reports and renders text tables for the CLI.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from tabulate import tabulate

from .avalanche import AvalancheRecord


@dataclass
class RoundSummary:
    """Changed-bit statistics for one round across many records."""

    round: int
    samples: int
    mean: float
    minimum: int
    maximum: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "samples": self.samples,
            "mean": self.mean,
            "min": self.minimum,
            "max": self.maximum,
        }


def summarize(records: Sequence[AvalancheRecord]) -> list[RoundSummary]:
    """Aggregate changed-bit counts per round.

    Args:
        records: Records from one or more experiments

    Returns:
        One RoundSummary per round, ordered by round number
    """
    by_round: dict[int, list[int]] = {}
    for record in records:
        for round_num, count in record.rounds:
            by_round.setdefault(round_num, []).append(count)

    return [
        RoundSummary(
            round=round_num,
            samples=len(counts),
            mean=sum(counts) / len(counts),
            minimum=min(counts),
            maximum=max(counts),
        )
        for round_num, counts in sorted(by_round.items())
    ]


def export_to_csv(
    records: Sequence[AvalancheRecord],
    output_path: str | Path,
    include_block: bool = False,
) -> Path:
    """Export records to CSV, one row per round per block.

    Args:
        records: Records to write
        output_path: Path to output CSV file
        include_block: Prefix every row with the block index

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    header = ["Round", "Changed Bits"]
    if include_block:
        header.insert(0, "Block")

    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for record in records:
            for round_num, count in record.rounds:
                row = [round_num, count]
                if include_block:
                    row.insert(0, record.block_index)
                writer.writerow(row)

    return output_path


def export_to_json(
    records: Sequence[AvalancheRecord],
    output_path: str | Path,
    indent: int = 2,
) -> Path:
    """Export records and their per-round summary to JSON.

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": "1.0",
        "count": len(records),
        "summary": [s.to_dict() for s in summarize(records)],
        "records": [r.to_dict() for r in records],
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=indent)

    return output_path


def format_record_table(records: Sequence[AvalancheRecord]) -> str:
    """Format records as a round-by-block table."""
    if not records:
        return "No results."

    headers = ["Round"] + [f"Block {r.block_index}" for r in records]
    round_numbers = [round_num for round_num, _ in records[0].rounds]
    rows = [
        [round_num] + [record.changed_bits[i] for record in records]
        for i, round_num in enumerate(round_numbers)
    ]
    return tabulate(rows, headers=headers, tablefmt="simple")


def format_summary_table(summary: Sequence[RoundSummary]) -> str:
    """Format per-round statistics as a table."""
    if not summary:
        return "No results."

    headers = ["Round", "Samples", "Mean", "Min", "Max", "Mean %"]
    rows = [
        [s.round, s.samples, s.mean, s.minimum, s.maximum, 100 * s.mean / 128]
        for s in summary
    ]
    return tabulate(
        rows,
        headers=headers,
        tablefmt="simple",
        floatfmt=("g", "g", ".2f", "g", "g", ".1f"),
    )
