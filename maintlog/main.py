#!/usr/bin/env python3
"""maintlog — rebuild index maintenance records from IndexOptimize log files."""

import logging
import os
import socket
import sys
from argparse import ArgumentParser
from dataclasses import replace
from datetime import datetime
from itertools import islice

from maintlog.collector import collect
from maintlog.config import OUTPUT_FORMATS, ConfigError, load_config, load_yaml_config, parse_target
from maintlog.connector import FileSystemConnector
from maintlog.filters import build_filter_chain
from maintlog.formatter import get_writer

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [MAINTLOG] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_TARGETS = 1
EXIT_CONFIG = 2


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="maintlog",
        description="Rebuild index maintenance records from IndexOptimize log files.",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        help="SQL instance name(s), e.g. SQL01 or SQL01\\REPORTING",
    )
    parser.add_argument(
        "--path",
        help="Read log files from this directory instead of the configured one",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("MAINTLOG_CONFIG"),
        help="YAML file listing targets and settings (env: MAINTLOG_CONFIG)",
    )
    parser.add_argument(
        "--log-type",
        help="Log file name prefix (default: IndexOptimize)",
    )
    parser.add_argument(
        "--since",
        help="Only read log files modified on or after this date (YYYY-MM-DD)",
    )
    parser.add_argument("--database", help="Only show actions on this database")
    parser.add_argument("--table", help="Only show actions on this table (name or schema.name)")
    parser.add_argument("--outcome", help="Only show actions with this outcome")
    parser.add_argument("--action", help="Only show this action (REBUILD, REORGANIZE)")
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--lines",
        type=int,
        help="Limit output to N records",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show statistics instead of records",
    )
    parser.add_argument(
        "--log-level",
        help="Diagnostic log level on stderr (default: WARNING)",
    )
    return parser


def _parse_since(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ConfigError(f"--since must be YYYY-MM-DD, got {value!r}") from None


def resolve_targets(args, config):
    """Targets to read. --path pins the log directory of a single target."""
    if not args.path:
        return config.targets
    if config.targets:
        # Command-line targets come after the YAML ones.
        target = config.targets[-1] if getattr(args, "targets", None) else config.targets[0]
        if len(config.targets) > 1:
            logger.warning("--path given; reading only %s", target.name)
    else:
        target = parse_target(socket.gethostname())
    return [replace(target, log_directory=args.path, admin_share=False)]


def run(args) -> int:
    """Assemble and execute the record pipeline."""
    try:
        yaml_data = load_yaml_config(args.config)
        config = load_config(args, yaml_data)
        since = _parse_since(args.since)
        targets = resolve_targets(args, config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    logging.getLogger().setLevel(config.log_level)

    if not targets:
        print("Error: no targets given (pass instance names, --path or --config)", file=sys.stderr)
        return EXIT_NO_TARGETS

    logger.info("Reading %d target(s), log type %s", len(targets), config.log_type)

    records = collect(targets, FileSystemConnector(), log_type=config.log_type, since=since)

    filter_fn = build_filter_chain(args)
    records = (r for r in records if filter_fn(r))

    if args.stats:
        from maintlog.stats import compute_stats, format_stats_json, format_stats_text
        stats = compute_stats(records)
        if config.output == "json":
            print(format_stats_json(stats))
        else:
            print(format_stats_text(stats))
        return EXIT_OK

    if args.lines:
        records = islice(records, args.lines)

    writer = get_writer(config.output)
    count = writer(records, sys.stdout)
    logger.info("Wrote %d record(s)", count)
    return EXIT_OK


def main():
    parser = build_parser()
    args = parser.parse_args()
    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)


if __name__ == "__main__":
    main()
