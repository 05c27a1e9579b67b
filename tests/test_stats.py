"""Tests for maintlog/stats.py"""

import json

import pytest

from maintlog.models import IndexActionRecord
from maintlog.stats import (
    compute_stats,
    format_seconds,
    format_stats_json,
    format_stats_text,
    parse_duration,
)


def _record(index, duration, action="REBUILD", outcome="Succeeded", database="db"):
    return IndexActionRecord({
        "Database": database,
        "Schema": "dbo",
        "Table": "T",
        "Index": index,
        "Action": action,
        "Outcome": outcome,
        "Duration": duration,
    })


@pytest.fixture
def records():
    return [
        _record("IX_1", "00:00:12"),
        _record("IX_2", "00:01:05", outcome="Failed", database="other"),
        _record("IX_3", "00:00:03", action="REORGANIZE"),
        _record("IX_4", "soon"),
    ]


class TestParseDuration:
    @pytest.mark.parametrize("value, expected", [
        ("00:00:12", 12),
        ("01:02:03", 3723),
        ("1.02:00:00", 93600),
        ("100:00:00", 360000),
    ])
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", [None, "", "12", "a:b:c", "00:00"])
    def test_invalid(self, value):
        assert parse_duration(value) is None


class TestComputeStats:
    def test_counts(self, records):
        stats = compute_stats(records)
        assert stats.total_records == 4
        assert stats.action_counts == {"REBUILD": 3, "REORGANIZE": 1}
        assert stats.outcome_counts == {"Succeeded": 3, "Failed": 1}
        assert stats.database_counts == {"db": 3, "other": 1}

    def test_durations(self, records):
        stats = compute_stats(records)
        assert stats.total_duration_seconds == 80
        assert stats.unparsed_durations == 1
        assert [seconds for _, seconds in stats.slowest] == [65, 12, 3]
        assert stats.slowest[0][0] == "[other].[dbo].[T].[IX_2] REBUILD"

    def test_empty(self):
        stats = compute_stats([])
        assert stats.total_records == 0
        assert stats.slowest == []

    def test_accepts_generator(self, records):
        assert compute_stats(r for r in records).total_records == 4


class TestFormatting:
    def test_format_seconds(self):
        assert format_seconds(3723) == "01:02:03"
        assert format_seconds(0) == "00:00:00"

    def test_text(self, records):
        text = format_stats_text(compute_stats(records))
        assert "Total index actions: 4" in text
        assert "Total duration: 00:01:20" in text
        assert "Unparsed durations: 1" in text
        assert "REORGANIZE" in text

    def test_text_without_timed_actions(self):
        assert "No timed actions." in format_stats_text(compute_stats([]))

    def test_json(self, records):
        data = json.loads(format_stats_json(compute_stats(records)))
        assert data["total_records"] == 4
        assert data["total_duration_seconds"] == 80
        assert data["slowest"][0] == {"action": "[other].[dbo].[T].[IX_2] REBUILD", "seconds": 65}
