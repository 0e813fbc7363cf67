"""Generator-based line reading from a log file or standard input."""

import os
import sys
from typing import Generator, TextIO


def read_stream(stream: TextIO) -> Generator[tuple[int, str], None, None]:
    """Yield (line_number, line) for each line of an open text stream."""
    for number, line in enumerate(stream, start=1):
        yield number, line


def read_lines(filepath: str) -> Generator[tuple[int, str], None, None]:
    """Yield (line_number, line) for each line in a single file.

    Undecodable bytes are replaced so one bad line cannot abort the scan.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        yield from read_stream(f)


def stdin_is_interactive(stream: TextIO | None = None) -> bool:
    """True if nothing is piped in (stdin is a terminal)."""
    stream = stream or sys.stdin
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, ValueError, OSError):
        return False


def open_source(filepath: str | None) -> Generator[tuple[int, str], None, None]:
    """Lines from *filepath*, or from stdin when no file is given.

    Raises FileNotFoundError if the file does not exist.
    """
    if filepath:
        if not os.path.isfile(filepath):
            raise FileNotFoundError(f"File not found: {filepath}")
        return read_lines(filepath)

    stream = sys.stdin
    if hasattr(stream, "reconfigure"):
        stream.reconfigure(errors="replace")
    return read_stream(stream)
