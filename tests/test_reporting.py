"""Tests for avalanche report generation."""

import csv
import json

import pytest

from aes_avalanche.avalanche import AvalancheRecord, AvalancheTarget
from aes_avalanche.reporting import (
    export_to_csv,
    export_to_json,
    format_record_table,
    format_summary_table,
    summarize,
)


def make_record(counts: list[int], block_index: int = 0) -> AvalancheRecord:
    return AvalancheRecord(
        target=AvalancheTarget.PLAINTEXT,
        bit_position=9,
        rounds=tuple(enumerate(counts)),
        block_index=block_index,
    )


@pytest.fixture
def records() -> list[AvalancheRecord]:
    return [
        make_record([1, 20, 60, 64, 62, 66, 63, 64, 65, 61, 64], block_index=0),
        make_record([1, 12, 68, 64, 66, 62, 65, 64, 63, 67, 60], block_index=1),
    ]


class TestSummarize:
    """Tests for per-round aggregation."""

    def test_one_summary_per_round(self, records) -> None:
        summary = summarize(records)
        assert [s.round for s in summary] == list(range(11))

    def test_statistics(self, records) -> None:
        summary = summarize(records)

        assert summary[0].mean == 1
        assert summary[1].mean == 16
        assert summary[1].minimum == 12
        assert summary[1].maximum == 20
        assert summary[10].samples == 2

    def test_empty(self) -> None:
        assert summarize([]) == []


class TestExportCsv:
    """Tests for CSV export."""

    def test_header_and_rows(self, records, tmp_path) -> None:
        path = export_to_csv(records[:1], tmp_path / "avalanche_data_plaintext.csv")

        with open(path, newline="") as f:
            rows = list(csv.reader(f))

        assert rows[0] == ["Round", "Changed Bits"]
        assert rows[1] == ["0", "1"]
        assert rows[-1] == ["10", "64"]
        assert len(rows) == 12

    def test_block_column(self, records, tmp_path) -> None:
        path = export_to_csv(records, tmp_path / "nested" / "out.csv", include_block=True)

        with open(path, newline="") as f:
            rows = list(csv.reader(f))

        assert rows[0] == ["Block", "Round", "Changed Bits"]
        assert len(rows) == 23
        assert rows[12] == ["1", "0", "1"]


class TestExportJson:
    """Tests for JSON export."""

    def test_contents(self, records, tmp_path) -> None:
        path = export_to_json(records, tmp_path / "report.json")
        data = json.loads(path.read_text())

        assert data["count"] == 2
        assert len(data["records"]) == 2
        assert data["records"][1]["block_index"] == 1
        assert data["summary"][1]["mean"] == 16
        assert data["summary"][1]["min"] == 12


class TestTables:
    """Tests for text table formatting."""

    def test_record_table(self, records) -> None:
        table = format_record_table(records)

        assert "Round" in table
        assert "Block 0" in table
        assert "Block 1" in table
        assert len(table.splitlines()) == 13

    def test_summary_table(self, records) -> None:
        table = format_summary_table(summarize(records))

        assert "Mean" in table
        assert "16.00" in table

    def test_summary_table_keeps_decimals_on_whole_means(self, records) -> None:
        lines = format_summary_table(summarize(records)).splitlines()
        round_three = next(line for line in lines if line.split()[0] == "3")

        assert round_three.split() == ["3", "2", "64.00", "64", "64", "50.0"]

    def test_empty_tables(self) -> None:
        assert format_record_table([]) == "No results."
        assert format_summary_table([]) == "No results."
