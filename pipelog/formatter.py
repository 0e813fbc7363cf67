"""Output formatters — bordered text table and JSON."""

import json
from typing import Callable, Sequence

from pipelog.report import DAY_TITLE, ENDPOINT_TITLE, Report
from pipelog.stats import StatLine


def headers(title: str, show_stddev: bool = True) -> list[str]:
    columns = [title, "Reqs", "Avg", "Std Dev", "Min", "Max", "95th"]
    if not show_stddev:
        columns.remove("Std Dev")
    return columns


def row(line: StatLine, show_stddev: bool = True) -> list[str]:
    """Cells for one StatLine, durations as fixed-precision milliseconds."""
    values = [line.mean, line.stddev, line.min, line.max, line.p95]
    if not show_stddev:
        del values[1]
    return [line.key, str(line.requests)] + [f"{v:.3f}ms" for v in values]


def render_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render a bordered table; first column left-aligned, the rest right-aligned."""
    widths = [len(h) for h in header]
    for cells in rows:
        for i, cell in enumerate(cells):
            widths[i] = max(widths[i], len(cell))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def fmt(cells, align_header=False):
        parts = []
        for i, cell in enumerate(cells):
            if align_header:
                parts.append(cell.center(widths[i]))
            elif i == 0:
                parts.append(cell.ljust(widths[i]))
            else:
                parts.append(cell.rjust(widths[i]))
        return "| " + " | ".join(parts) + " |"

    lines = [border, fmt(header, align_header=True), border]
    lines.extend(fmt(cells) for cells in rows)
    if rows:
        lines.append(border)
    return "\n".join(lines)


def format_table(reports: Sequence[Report], summary: dict | None = None, show_stddev: bool = True) -> str:
    """Every report as a text table, separated by a blank line."""
    tables = [
        render_table(
            headers(report.title, show_stddev),
            [row(line, show_stddev) for line in report.rows],
        )
        for report in reports
    ]
    return "\n\n".join(tables)


def format_json(reports: Sequence[Report], summary: dict | None = None, show_stddev: bool = True) -> str:
    """JSON document keyed by report, with raw numeric values."""
    keys = {DAY_TITLE: "days", ENDPOINT_TITLE: "endpoints"}
    document = {}
    for report in reports:
        rows = []
        for line in report.rows:
            data = line.to_dict()
            if not show_stddev:
                del data["stddev"]
            rows.append(data)
        document[keys.get(report.title, report.title.lower())] = rows
    if summary is not None:
        document["summary"] = summary
    return json.dumps(document, indent=2)


def get_formatter(output_format: str = "table") -> Callable[..., str]:
    """Factory that returns the right formatter for the output setting."""
    if output_format == "json":
        return format_json
    return format_table
