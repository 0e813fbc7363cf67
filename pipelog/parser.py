"""Record parser — one NDJSON line in, one ParsedRequest (or None) out."""

import json
from dataclasses import dataclass
from datetime import datetime

from pipelog.config import PipelogConfig
from pipelog.extractor import (
    ExtractionError,
    extract_number,
    extract_string,
    extract_timestamp,
)


@dataclass(frozen=True)
class ParsedRequest:
    duration_ms: float
    uri: str
    method: str
    timestamp: datetime


class RecordParser:
    """Applies the configured field paths to decoded log lines."""

    def __init__(self, config: PipelogConfig):
        self._paths = config.field_paths()

    @property
    def paths(self) -> dict:
        return dict(self._paths)

    def parse_line(self, line: str, line_number: int | None = None) -> ParsedRequest | None:
        """Parse a single log line.

        Returns None for lines that do not start with ``{`` (non-JSON noise).
        Raises PathNotFound or TypeMismatch when a field cannot be extracted;
        malformed JSON surfaces as PathNotFound on the first field.
        """
        if not line.startswith("{"):
            return None

        try:
            document = json.loads(line)
        except (ValueError, RecursionError):
            document = None

        try:
            return ParsedRequest(
                duration_ms=extract_number(self._paths["duration"], document),
                uri=extract_string(self._paths["uri"], document),
                method=extract_string(self._paths["method"], document),
                timestamp=extract_timestamp(self._paths["timestamp"], document),
            )
        except ExtractionError as e:
            e.line_number = line_number
            raise
