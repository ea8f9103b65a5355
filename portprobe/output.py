"""Report rendering for scan results."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable

from portprobe.models import ScanResult

TABLE_COLUMNS = ("Server", "Port", "TypePort", "Open", "Notes")
FORMATS = ("table", "json", "csv")


def to_row(result: ScanResult) -> dict[str, str]:
    """Map a result onto the report columns."""
    note = " ".join((result.note or "").split())
    return {
        "Server": result.host,
        "Port": str(result.port),
        "TypePort": result.protocol.value.upper(),
        "Open": "True" if result.open else "False",
        "Notes": note,
    }


def format_table(results: Iterable[ScanResult]) -> str:
    rows = [to_row(r) for r in results]
    widths = {
        col: max([len(col)] + [len(row[col]) for row in rows]) for col in TABLE_COLUMNS
    }

    def line(values: dict[str, str]) -> str:
        return "  ".join(values[col].ljust(widths[col]) for col in TABLE_COLUMNS).rstrip()

    header = line({col: col for col in TABLE_COLUMNS})
    rule = line({col: "-" * widths[col] for col in TABLE_COLUMNS})
    return "\n".join([header, rule] + [line(row) for row in rows])


def format_json(results: Iterable[ScanResult]) -> str:
    return json.dumps([r.to_payload() for r in results], indent=2)


def format_csv(results: Iterable[ScanResult]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=TABLE_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for r in results:
        writer.writerow(to_row(r))
    return buffer.getvalue().rstrip("\n")


def render(results: Iterable[ScanResult], fmt: str = "table") -> str:
    """Render results in the requested format.

    Raises:
        ValueError: If the format is not supported
    """
    if fmt == "table":
        return format_table(results)
    if fmt == "json":
        return format_json(results)
    if fmt == "csv":
        return format_csv(results)
    raise ValueError(f"Unsupported format: {fmt}")
