"""Target orchestrator — connect, list log files, parse, concatenate."""

import logging
from datetime import datetime
from typing import Callable, Iterable, Iterator

from maintlog.config import TargetSpec
from maintlog.models import IndexActionRecord
from maintlog.parser import MaintenanceLogParser
from maintlog.reader import DEFAULT_LOG_TYPE, list_log_files, read_lines

logger = logging.getLogger(__name__)


def collect_target(
    target: TargetSpec,
    connector,
    log_type: str = DEFAULT_LOG_TYPE,
    since: datetime | None = None,
    line_reader: Callable[[str], Iterable[str]] = read_lines,
) -> Iterator[IndexActionRecord]:
    """Yield every index action recorded in one target's log files.

    Problems with the target are logged and end its records; they never
    raise to the caller.
    """
    try:
        identity = connector.connect(target)
    except ConnectionError as e:
        logger.warning("Skipping %s: %s", target.name, e)
        return

    if not identity.log_directory:
        logger.warning("Skipping %s: no log directory configured", target.name)
        return

    try:
        files = list_log_files(identity.log_directory, log_type=log_type, since=since)
    except FileNotFoundError as e:
        logger.warning("Skipping %s: %s", target.name, e)
        return

    if not files:
        logger.warning(
            "Skipping %s: no %s log files in %s",
            target.name, log_type, identity.log_directory,
        )
        return

    # One parser for all files: context carries across file boundaries.
    parser = MaintenanceLogParser(identity)
    for path in files:
        logger.info("Parsing %s", path)
        try:
            yield from parser.parse(line_reader(path))
        except OSError as e:
            logger.error("Failed reading %s for %s: %s", path, target.name, e)
            return

    if parser.pending:
        logger.info("%s: last Duration line has no completion line, dropped", target.name)
    logger.info(
        "%s: %d record(s) from %d line(s) in %d file(s)",
        target.name, parser.records_emitted, parser.lines_seen, len(files),
    )


def collect(
    targets: Iterable[TargetSpec],
    connector,
    log_type: str = DEFAULT_LOG_TYPE,
    since: datetime | None = None,
    line_reader: Callable[[str], Iterable[str]] = read_lines,
) -> Iterator[IndexActionRecord]:
    """Yield records from each target in turn. A failing target is skipped."""
    for target in targets:
        yield from collect_target(
            target, connector, log_type=log_type, since=since, line_reader=line_reader
        )
