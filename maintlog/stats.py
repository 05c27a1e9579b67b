"""Statistics — counts per action, outcome and database, time spent."""

import json
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from maintlog.models import IndexActionRecord

_DURATION_RE = re.compile(r"^(?:(?P<days>\d+)\.)?(?P<h>\d+):(?P<m>\d{1,2}):(?P<s>\d{1,2})$")

SLOWEST_LIMIT = 5


@dataclass
class MaintenanceStats:
    total_records: int = 0
    action_counts: dict[str, int] = field(default_factory=dict)
    outcome_counts: dict[str, int] = field(default_factory=dict)
    database_counts: dict[str, int] = field(default_factory=dict)
    total_duration_seconds: int = 0
    unparsed_durations: int = 0
    slowest: list[tuple[str, int]] = field(default_factory=list)


def parse_duration(value: str | None) -> int | None:
    """'00:00:12' → 12, '1.02:00:00' → 93600. None if unparsable."""
    if not value:
        return None
    m = _DURATION_RE.match(value.strip())
    if not m:
        return None
    days = int(m.group("days") or 0)
    return days * 86400 + int(m.group("h")) * 3600 + int(m.group("m")) * 60 + int(m.group("s"))


def _describe(record: IndexActionRecord) -> str:
    return f"[{record.database}].[{record.schema}].[{record.table}].[{record.index}] {record.action}"


def compute_stats(records: Iterable[IndexActionRecord]) -> MaintenanceStats:
    """Consume a record stream and produce aggregated statistics."""
    actions = Counter()
    outcomes = Counter()
    databases = Counter()
    timed = []
    total = 0
    seconds = 0
    unparsed = 0

    for record in records:
        total += 1
        actions[record.action or "-"] += 1
        outcomes[record.outcome or "-"] += 1
        databases[record.database or "-"] += 1
        duration = parse_duration(record.duration)
        if duration is None:
            unparsed += 1
            continue
        seconds += duration
        timed.append((_describe(record), duration))

    timed.sort(key=lambda item: item[1], reverse=True)
    return MaintenanceStats(
        total_records=total,
        action_counts=dict(actions.most_common()),
        outcome_counts=dict(outcomes.most_common()),
        database_counts=dict(databases.most_common()),
        total_duration_seconds=seconds,
        unparsed_durations=unparsed,
        slowest=timed[:SLOWEST_LIMIT],
    )


def format_seconds(seconds: int) -> str:
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_stats_text(stats: MaintenanceStats) -> str:
    """Human-readable stats summary."""
    lines = [f"Total index actions: {stats.total_records}"]
    lines.append(f"Total duration: {format_seconds(stats.total_duration_seconds)}")
    if stats.unparsed_durations:
        lines.append(f"Unparsed durations: {stats.unparsed_durations}")
    lines.append("")

    for title, counts in (
        ("Actions:", stats.action_counts),
        ("Outcomes:", stats.outcome_counts),
        ("Databases:", stats.database_counts),
    ):
        lines.append(title)
        for name, count in counts.items():
            lines.append(f"  {name:24s} {count}")
        lines.append("")

    if stats.slowest:
        lines.append("Slowest actions:")
        for description, seconds in stats.slowest:
            lines.append(f"  {format_seconds(seconds)}  {description}")
    else:
        lines.append("No timed actions.")

    return "\n".join(lines)


def format_stats_json(stats: MaintenanceStats) -> str:
    """JSON stats output."""
    return json.dumps({
        "total_records": stats.total_records,
        "action_counts": stats.action_counts,
        "outcome_counts": stats.outcome_counts,
        "database_counts": stats.database_counts,
        "total_duration_seconds": stats.total_duration_seconds,
        "unparsed_durations": stats.unparsed_durations,
        "slowest": [
            {"action": description, "seconds": seconds}
            for description, seconds in stats.slowest
        ],
    }, indent=2)
