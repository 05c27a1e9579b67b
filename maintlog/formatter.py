"""Output writers — NDJSON, CSV and aligned table over the union of record keys."""

import csv
import json
from typing import Callable, Iterable, TextIO

from maintlog.models import IndexActionRecord

Writer = Callable[[Iterable[IndexActionRecord], TextIO], int]


def collect_columns(records: Iterable[IndexActionRecord]) -> list[str]:
    """Union of keys across records, in first-seen order.

    Keys differing only in case are one column, named by first spelling.
    """
    columns = []
    seen = set()
    for record in records:
        for key in record:
            folded = key.lower()
            if folded not in seen:
                seen.add(folded)
                columns.append(key)
    return columns


def format_json(record: IndexActionRecord) -> str:
    """One JSON object per line, compatible with jq."""
    return json.dumps(record.to_dict())


def write_json(records: Iterable[IndexActionRecord], stream: TextIO) -> int:
    """Stream NDJSON as records arrive. Returns the number written."""
    count = 0
    for record in records:
        stream.write(format_json(record) + "\n")
        count += 1
    return count


def write_csv(records: Iterable[IndexActionRecord], stream: TextIO) -> int:
    """CSV with a header row; needs every record up front for the columns."""
    records = list(records)
    columns = collect_columns(records)
    if not columns:
        return 0
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        writer.writerow([record.get(c, "") for c in columns])
    return len(records)


def format_table(records: list[IndexActionRecord], columns: list[str] | None = None) -> str:
    columns = columns or collect_columns(records)
    if not columns:
        return ""
    rows = [[record.get(c, "") for c in columns] for record in records]
    widths = [
        max([len(c)] + [len(row[i]) for row in rows])
        for i, c in enumerate(columns)
    ]
    lines = [
        "  ".join(c.ljust(w) for c, w in zip(columns, widths)).rstrip(),
        "  ".join("-" * w for w in widths),
    ]
    for row in rows:
        lines.append("  ".join(v.ljust(w) for v, w in zip(row, widths)).rstrip())
    return "\n".join(lines)


def write_table(records: Iterable[IndexActionRecord], stream: TextIO) -> int:
    records = list(records)
    text = format_table(records)
    if text:
        stream.write(text + "\n")
    return len(records)


_WRITERS: dict[str, Writer] = {
    "json": write_json,
    "csv": write_csv,
    "table": write_table,
}


def get_writer(output_format: str = "table") -> Writer:
    """Factory that returns the right writer for an output format name."""
    try:
        return _WRITERS[output_format]
    except KeyError:
        raise ValueError(f"Unknown output format: {output_format}") from None
