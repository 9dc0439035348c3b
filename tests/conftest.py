"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add parent directory to path before any other imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from influxtemplate.properties import InfluxDBProperties  # noqa: E402


@pytest.fixture
def properties() -> InfluxDBProperties:
    """Connection properties for a local server with a `metrics` database."""
    return InfluxDBProperties(
        url="http://localhost:8086",
        database="metrics",
        retention_policy="autogen",
        gzip=False,
    )


@pytest.fixture
def mock_client_cls():
    """Patch the InfluxDB client class used by the connection factory."""
    with patch("influxtemplate.connection.InfluxDBClient") as client_cls:
        yield client_cls
