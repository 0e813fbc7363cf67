import json

import pytest

from pipelog.config import PipelogConfig
from pipelog.parser import RecordParser


def _make_line(duration=12.5, uri="/api/orders", method="GET", time="2024-03-01T10:00:00Z", **extra):
    """Serialize one access-log record; fields set to None are omitted."""
    record = {"duration": duration, "uri": uri, "method": method, "time": time, **extra}
    return json.dumps({k: v for k, v in record.items() if v is not None}) + "\n"


@pytest.fixture
def make_line():
    return _make_line


@pytest.fixture
def config():
    return PipelogConfig()


@pytest.fixture
def fail_fast_config():
    return PipelogConfig(fail_fast=True)


@pytest.fixture
def parser(config):
    return RecordParser(config)
