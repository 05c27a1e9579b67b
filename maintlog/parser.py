"""IndexOptimize log parser — a fold of line rules over explicit state.

A log file is a run of blocks like::

    Database: [AdventureWorks]
    Status: ONLINE
    ...
    Command: ALTER INDEX [PK_Orders] ON [AdventureWorks].[dbo].[Orders] REBUILD WITH (ONLINE=ON)
    Comment: ObjectType: Table, PageCount: 1250
    Outcome: Succeeded
    Duration: 00:00:12
    Date and time: 2017-05-01 02:00:15

Every line is run through all rules, in this order:

  1. Database line   → new database context (clone of identity)
  2. Status line     → field on the database context
  3. Command line    → new index context (clone of database context)
  4. Comment line    → free-form fields on the index context
  5. Outcome line    → Outcome on the index context
  6. Completion      → if the previous line was Duration: EndTime, emit
  7. Duration line   → Duration on the index context, await completion

Rule 6 runs before rule 7, so a Duration line is never its own completion
line.
"""

import enum
import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator

from maintlog.models import (
    ACTION, DATABASE, DURATION, END_TIME, INDEX, OPTIONS, OUTCOME, SCHEMA,
    TABLE, FieldMap, Identity, IndexActionRecord,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Line patterns
# ---------------------------------------------------------------------------

DATABASE_RE = re.compile(r"^Database: \[(?P<database>[^\]]*)\]")

STATUS_RE = re.compile(
    r"^(?P<key>Status|Standby|Updateability|User ?access|Is ?accessible"
    r"|Recovery ?[Mm]odel)\s*:"
)

COMMAND_RE = re.compile(
    r"^Command: ALTER INDEX \[(?P<index>[^\]]+)\] "
    r"ON \[(?P<database>[^\]]+)\]\.\[(?P<schema>[^\]]+)\]\.\[(?P<table>[^\]]+)\] "
    r"(?P<action>\S+) WITH \((?P<options>.*)\)"
)

ALTER_INDEX_PREFIX = "Command: ALTER INDEX "
COMMENT_PREFIX = "Comment: "
OUTCOME_PREFIX = "Outcome: "
DURATION_PREFIX = "Duration: "

END_TIME_RE = re.compile(r"^Date and time: ", re.IGNORECASE)

# Status keys as they appear in the log → field names on the record
STATUS_FIELDS = {
    "status": "Status",
    "standby": "Standby",
    "updateability": "Updateability",
    "useraccess": "UserAccess",
    "isaccessible": "IsAccessible",
    "recoverymodel": "RecoveryModel",
}


class Phase(enum.Enum):
    AWAITING_DURATION = "awaiting_duration"
    AWAITING_TIMESTAMP = "awaiting_timestamp"


@dataclass(frozen=True)
class ParserState:
    identity: FieldMap
    database: FieldMap | None = None
    index: IndexActionRecord | None = None
    phase: Phase = Phase.AWAITING_DURATION


def initial_state(identity: Identity | FieldMap) -> ParserState:
    fields = identity.to_fields() if isinstance(identity, Identity) else identity
    return ParserState(identity=fields)


# ---------------------------------------------------------------------------
# Field extraction helpers
# ---------------------------------------------------------------------------


def _after_last_colon(line: str) -> str:
    return line.rsplit(":", 1)[-1].strip()


def parse_comment(line: str) -> dict[str, str]:
    """Split 'Comment: k1: v1, k2: v2' into {'k1': 'v1', 'k2': 'v2'}.

    A part with no colon keeps its key with an empty value; blank parts are
    skipped.
    """
    body = line[len(COMMENT_PREFIX):] if line.startswith(COMMENT_PREFIX) else line
    fields = {}
    for part in body.split(","):
        key, _, value = part.partition(":")
        key = key.strip()
        if not key:
            continue
        fields[key] = value.strip()
    return fields


def parse_duration_value(line: str) -> str:
    """'Duration: 00:00:12' → '00:00:12' (last three colon tokens)."""
    body = line[len(DURATION_PREFIX):] if line.startswith(DURATION_PREFIX) else line
    tokens = [t.strip() for t in body.split(":")]
    return ":".join(tokens[-3:])


def parse_end_time(line: str) -> str:
    return END_TIME_RE.sub("", line, count=1).strip()


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------


def _set_on_index(state: ParserState, fields: dict[str, str]) -> ParserState:
    if state.index is None:
        return state
    return replace(state, index=state.index.merge(fields))


def step(state: ParserState, line: str) -> tuple[ParserState, IndexActionRecord | None]:
    """Apply every line rule to *line*. Returns the new state and the record
    completed by this line, if any. Never raises on content."""
    emitted = None

    m = DATABASE_RE.match(line)
    if m:
        state = replace(
            state, database=state.identity.merge({DATABASE: m.group("database")})
        )

    m = STATUS_RE.match(line)
    if m and state.database is not None:
        key = STATUS_FIELDS[m.group("key").replace(" ", "").lower()]
        state = replace(
            state, database=state.database.merge({key: _after_last_colon(line)})
        )

    m = COMMAND_RE.match(line)
    if m:
        if state.database is None:
            logger.debug("Index command before any database line, ignored: %s", line)
        else:
            index = IndexActionRecord(state.database).merge({
                INDEX: m.group("index"),
                SCHEMA: m.group("schema"),
                TABLE: m.group("table"),
                ACTION: m.group("action"),
                OPTIONS: m.group("options"),
            })
            state = replace(state, index=index)
    elif line.startswith(ALTER_INDEX_PREFIX):
        logger.debug("Unrecognized index command, ignored: %s", line)

    if line.startswith(COMMENT_PREFIX):
        state = _set_on_index(state, parse_comment(line))

    if line.startswith(OUTCOME_PREFIX):
        state = _set_on_index(state, {OUTCOME: _after_last_colon(line)})

    if state.phase is Phase.AWAITING_TIMESTAMP:
        state = _set_on_index(state, {END_TIME: parse_end_time(line)})
        emitted = state.index
        state = replace(state, index=None, phase=Phase.AWAITING_DURATION)

    if line.startswith(DURATION_PREFIX):
        state = _set_on_index(state, {DURATION: parse_duration_value(line)})
        state = replace(state, phase=Phase.AWAITING_TIMESTAMP)

    return state, emitted


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class MaintenanceLogParser:
    """Parses every log file of one target.

    State carries over between parse() calls, so an index block split across
    two files of the same target is still completed. Use a new instance per
    target.
    """

    def __init__(self, identity: Identity | FieldMap):
        self.state = initial_state(identity)
        self.lines_seen = 0
        self.records_emitted = 0

    def parse(self, lines: Iterable[str]) -> Iterator[IndexActionRecord]:
        it = iter(lines)
        try:
            for line in it:
                self.lines_seen += 1
                self.state, record = step(self.state, line.rstrip("\r\n"))
                if record is not None:
                    self.records_emitted += 1
                    yield record
        finally:
            # Release the underlying file when the consumer stops early.
            close = getattr(it, "close", None)
            if close is not None:
                close()

    @property
    def pending(self) -> bool:
        """True if a Duration line is still waiting for its completion line."""
        return self.state.phase is Phase.AWAITING_TIMESTAMP


def parse(identity: Identity | FieldMap, lines: Iterable[str]) -> Iterator[IndexActionRecord]:
    """Parse a single line sequence with a fresh parser."""
    return MaintenanceLogParser(identity).parse(lines)
