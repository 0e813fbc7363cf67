"""Statistics — count, mean, population std dev, min, max, 95th percentile."""

import math
from dataclasses import asdict, dataclass
from typing import Sequence

PERCENTILE = 95


@dataclass(frozen=True)
class StatLine:
    key: str
    requests: int
    mean: float
    stddev: float
    min: float
    max: float
    p95: float

    def __str__(self) -> str:
        return (
            f"{self.key}: {self.requests} reqs; avg. {self.mean:.2f}ms; "
            f"std.dev. {self.stddev:.2f}ms, min. {self.min:.2f}ms; "
            f"max. {self.max:.2f}ms; 95th {self.p95:.2f}ms"
        )

    def to_dict(self) -> dict:
        return asdict(self)


def percentile_index(n: int, p: int = PERCENTILE) -> int:
    """Zero-based index of the p-th percentile in a sorted list of n values.

    Truncating nearest-rank: floor(p * n / 100). For n=100, p=95 this is 95.
    """
    return (p * n) // 100


def summarize(key: str, samples: Sequence[float]) -> StatLine:
    """Summarize a non-empty list of durations. The input is not mutated."""
    if not samples:
        raise ValueError(f"No samples for {key!r}")

    data = sorted(samples)
    n = len(data)
    # fsum rounding can still land a hair outside [min, max]
    mean = min(max(math.fsum(data) / n, data[0]), data[-1])
    if data[0] == data[-1]:
        stddev = 0.0
    else:
        stddev = math.sqrt(math.fsum((value - mean) ** 2 for value in data) / n)

    return StatLine(
        key=key,
        requests=n,
        mean=mean,
        stddev=stddev,
        min=data[0],
        max=data[-1],
        p95=data[percentile_index(n)],
    )
