"""Aggregator — duration samples bucketed by day and by endpoint."""

from collections import defaultdict

from pipelog.normalizer import day_key, endpoint_key
from pipelog.parser import ParsedRequest


class Aggregator:
    """Owns the two group-key -> durations maps for the lifetime of a run."""

    def __init__(self, merge_uuid: bool = False):
        self._merge_uuid = merge_uuid
        self._by_day: dict[str, list[float]] = defaultdict(list)
        self._by_endpoint: dict[str, list[float]] = defaultdict(list)

    def record_day(self, key: str, duration_ms: float) -> None:
        self._by_day[key].append(duration_ms)

    def record_endpoint(self, key: str, duration_ms: float) -> None:
        self._by_endpoint[key].append(duration_ms)

    def add(self, request: ParsedRequest) -> None:
        """Record one parsed request in both maps."""
        self.record_day(day_key(request.timestamp), request.duration_ms)
        self.record_endpoint(
            endpoint_key(request.method, request.uri, self._merge_uuid),
            request.duration_ms,
        )

    @property
    def by_day(self) -> dict[str, list[float]]:
        return dict(self._by_day)

    @property
    def by_endpoint(self) -> dict[str, list[float]]:
        return dict(self._by_endpoint)
