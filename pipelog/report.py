"""Report builder — derive, rank and truncate StatLines for display."""

from dataclasses import dataclass

from pipelog.aggregator import Aggregator
from pipelog.config import PipelogConfig
from pipelog.stats import StatLine, summarize

DAY_TITLE = "Day"
ENDPOINT_TITLE = "URI"


@dataclass(frozen=True)
class Report:
    title: str
    rows: tuple[StatLine, ...]


def build_rows(samples: dict[str, list[float]], ranked: bool, limit: int = 0) -> list[StatLine]:
    """Summarize every group, order it and apply the row limit.

    Ranked mode sorts by request count descending (ties by key); otherwise
    rows are sorted by key ascending. A limit of 0, or one larger than the
    number of rows, keeps everything.
    """
    lines = [summarize(key, data) for key, data in samples.items() if data]

    if ranked:
        lines.sort(key=lambda line: (-line.requests, line.key))
    else:
        lines.sort(key=lambda line: line.key)

    if limit and limit < len(lines):
        lines = lines[:limit]
    return lines


def build_reports(aggregator: Aggregator, config: PipelogConfig) -> list[Report]:
    """Day report (full history, by date) then endpoint report (top-N by volume)."""
    return [
        Report(DAY_TITLE, tuple(build_rows(aggregator.by_day, ranked=False))),
        Report(
            ENDPOINT_TITLE,
            tuple(build_rows(aggregator.by_endpoint, ranked=True, limit=config.top_endpoints)),
        ),
    ]
