"""Log file discovery and generator-based line reading."""

import codecs
import glob
import logging
import os
from datetime import datetime
from typing import Generator

logger = logging.getLogger(__name__)

DEFAULT_LOG_TYPE = "IndexOptimize"

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def list_log_files(
    directory: str,
    log_type: str = DEFAULT_LOG_TYPE,
    since: datetime | None = None,
) -> list[str]:
    """Return '<log_type>_*.txt' files in *directory*, sorted by name.

    With *since*, only files modified at or after that moment are kept.
    Raises FileNotFoundError if the directory doesn't exist.
    """
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Log directory not found: {directory}")

    pattern = os.path.join(glob.escape(directory), f"{log_type}_*.txt")
    paths = sorted(p for p in glob.glob(pattern) if os.path.isfile(p))

    if since is not None:
        cutoff = since.timestamp()
        paths = [p for p in paths if os.path.getmtime(p) >= cutoff]

    logger.debug("Found %d %s log file(s) in %s", len(paths), log_type, directory)
    return paths


def detect_encoding(filepath: str) -> str:
    """Pick a text encoding from the file's byte-order mark, UTF-8 otherwise."""
    with open(filepath, "rb") as f:
        head = f.read(4)
    for bom, encoding in _BOMS:
        if head.startswith(bom):
            return encoding
    return "utf-8"


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of *filepath* without its line terminator.

    The file is closed when the generator is exhausted, closed early, or
    raises.
    """
    encoding = detect_encoding(filepath)
    with open(filepath, "r", encoding=encoding, errors="replace", newline="") as f:
        for line in f:
            yield line.rstrip("\r\n")
