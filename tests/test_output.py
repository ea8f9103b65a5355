"""Unit tests for report rendering and result payloads."""

from __future__ import annotations

import csv
import io
import json

import pytest

from portprobe.models import ProbeOutcome, Protocol, ScanResult
from portprobe.output import TABLE_COLUMNS, format_csv, format_json, format_table, render, to_row
from portprobe.prober import TIMEOUT_NOTE


@pytest.fixture
def results() -> list[ScanResult]:
    return [
        ScanResult(
            host="web01",
            port=22,
            protocol=Protocol.TCP,
            open=True,
            outcome=ProbeOutcome.OPEN,
            note="SSH-2.0-OpenSSH_9.6\r\nProtocol mismatch.\r\n",
            elapsed_ms=2503.1,
        ),
        ScanResult(
            host="web01",
            port=81,
            protocol=Protocol.TCP,
            open=False,
            outcome=ProbeOutcome.TIMEOUT,
            note=TIMEOUT_NOTE,
            elapsed_ms=1000.4,
        ),
        ScanResult(
            host="db01",
            port=5432,
            protocol=Protocol.TCP,
            open=True,
            outcome=ProbeOutcome.OPEN,
        ),
    ]


class TestScanResult:
    """Test cases for ScanResult."""

    def test_to_payload(self, results) -> None:
        assert results[1].to_payload() == {
            "host": "web01",
            "port": 81,
            "protocol": "tcp",
            "open": False,
            "outcome": "timeout",
            "note": TIMEOUT_NOTE,
            "elapsed_ms": 1000.4,
        }

    def test_is_immutable(self, results) -> None:
        with pytest.raises(AttributeError):
            results[0].open = False  # type: ignore[misc]


class TestToRow:
    """Test cases for to_row."""

    def test_columns(self, results) -> None:
        assert to_row(results[1]) == {
            "Server": "web01",
            "Port": "81",
            "TypePort": "TCP",
            "Open": "False",
            "Notes": TIMEOUT_NOTE,
        }

    def test_note_flattened(self, results) -> None:
        assert to_row(results[0])["Notes"] == "SSH-2.0-OpenSSH_9.6 Protocol mismatch."

    def test_missing_note(self, results) -> None:
        assert to_row(results[2])["Notes"] == ""


class TestFormats:
    """Test cases for the rendered formats."""

    def test_table(self, results) -> None:
        lines = format_table(results).splitlines()

        assert lines[0].split() == list(TABLE_COLUMNS)
        assert set(lines[1].replace(" ", "")) == {"-"}
        assert len(lines) == 2 + len(results)
        assert lines[2].split()[:4] == ["web01", "22", "TCP", "True"]
        assert lines[4].split() == ["db01", "5432", "TCP", "True"]

    def test_table_columns_aligned(self, results) -> None:
        lines = format_table(results).splitlines()
        open_column = lines[0].index("Open")
        for line in lines[2:]:
            assert line[open_column:].split()[0] in ("True", "False")

    def test_empty_table(self) -> None:
        assert format_table([]).splitlines()[0].split() == list(TABLE_COLUMNS)

    def test_json(self, results) -> None:
        payload = json.loads(format_json(results))
        assert [row["port"] for row in payload] == [22, 81, 5432]
        assert payload[2]["note"] is None

    def test_csv(self, results) -> None:
        rows = list(csv.DictReader(io.StringIO(format_csv(results))))
        assert [row["Port"] for row in rows] == ["22", "81", "5432"]
        assert rows[1]["Open"] == "False"

    def test_render_dispatch(self, results) -> None:
        assert render(results, "table") == format_table(results)
        assert render(results, "json") == format_json(results)
        assert render(results, "csv") == format_csv(results)

    def test_render_unsupported(self, results) -> None:
        with pytest.raises(ValueError, match="Unsupported format"):
            render(results, "html")
