"""URI normalization and group keys for aggregation."""

import re
from datetime import datetime

UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-4[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}"
)
UUID_PLACEHOLDER = ":uuid"


def normalize_uri(uri: str, mask_identifiers: bool = False) -> str:
    """Strip the query string and optionally mask UUIDs anywhere in the path.

    >>> normalize_uri("/a/b?x=1")
    '/a/b'
    >>> normalize_uri("/orders/123e4567-e89b-42d3-a456-426614174000", True)
    '/orders/:uuid'
    """
    path = uri.split("?", 1)[0]
    if not mask_identifiers:
        return path
    return UUID_PATTERN.sub(UUID_PLACEHOLDER, path)


def endpoint_key(method: str, uri: str, mask_identifiers: bool = False) -> str:
    """Group key for endpoint aggregation: ``"<METHOD> <path>"``."""
    return f"{method} {normalize_uri(uri, mask_identifiers)}"


def day_key(timestamp: datetime) -> str:
    """Group key for day aggregation, in the timestamp's own UTC offset."""
    return timestamp.date().isoformat()
