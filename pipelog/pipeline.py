"""Single-pass scan: lines -> ParsedRequests -> Aggregator."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from pipelog.aggregator import Aggregator
from pipelog.config import PipelogConfig
from pipelog.extractor import ExtractionError
from pipelog.parser import RecordParser

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    aggregator: Aggregator
    lines: int = 0
    parsed: int = 0
    skipped: int = 0
    failed: int = 0
    failures: dict[str, int] = field(default_factory=dict)

    def summary(self) -> dict:
        return {
            "lines": self.lines,
            "parsed": self.parsed,
            "skipped": self.skipped,
            "failed": self.failed,
            "failures": dict(self.failures),
        }


def scan(lines: Iterable[tuple[int, str]], config: PipelogConfig) -> ScanResult:
    """Consume (line_number, line) pairs and aggregate every parsable record.

    Under fail-fast the first ExtractionError propagates to the caller;
    otherwise the offending line is counted and skipped.
    """
    parser = RecordParser(config)
    logger.debug(
        "Field paths: %s",
        ", ".join(f"{name}={path.expression}" for name, path in parser.paths.items()),
    )
    result = ScanResult(aggregator=Aggregator(merge_uuid=config.merge_uuid))

    for line_number, line in lines:
        result.lines += 1
        try:
            request = parser.parse_line(line, line_number)
        except ExtractionError as e:
            if config.fail_fast:
                raise
            result.failed += 1
            kind = type(e).__name__
            result.failures[kind] = result.failures.get(kind, 0) + 1
            logger.debug("Skipping %s", e)
            continue

        if request is None:
            result.skipped += 1
            continue

        result.aggregator.add(request)
        result.parsed += 1

    logger.info(
        "Scanned %d lines: %d parsed, %d non-JSON skipped, %d failed",
        result.lines, result.parsed, result.skipped, result.failed,
    )
    return result
