"""
Shared fixtures for the station map tests.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from tidewatch.config import Settings
from tidewatch.data.fetchers import TimeSeriesFetcher
from tidewatch.data.parsing import parse_time_series
from tidewatch.models import SeriesRole

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
BASE_URL = "https://example.test/api/v1"


def station_record(**overrides):
    record = {
        "id": "st-1",
        "code": "00490",
        "officialName": "Halifax",
        "operating": True,
        "latitude": 44.0,
        "longitude": -63.0,
        "timeSeries": [{"code": "wlo"}, {"code": "wlp"}],
    }
    record.update(overrides)
    return record


OBSERVED_RECORDS = [
    {"eventDate": "2024-05-01T11:00:00Z", "value": "1.20"},
    {"eventDate": "2024-05-01T10:00:00Z", "value": "0.85"},
    {"eventDate": "2024-05-01T12:00:00Z", "value": 1.47},
]

PREDICTED_RECORDS = [
    {"eventDate": "2024-05-01T12:00:00Z", "value": "1.50"},
    {"eventDate": "2024-05-01T13:00:00Z", "value": "1.62"},
    {"eventDate": "2024-05-01T14:00:00Z", "value": "1.31"},
]


@pytest.fixture
def settings():
    return Settings(api_base_url=BASE_URL)


@pytest.fixture
def observed():
    return parse_time_series(OBSERVED_RECORDS, SeriesRole.OBSERVED)


@pytest.fixture
def predicted():
    return parse_time_series(PREDICTED_RECORDS, SeriesRole.PREDICTED)


@pytest.fixture
def fetcher(observed, predicted):
    """Fetcher double resolving both windows immediately."""
    mock = Mock(spec=TimeSeriesFetcher)
    mock.fetch_observed = AsyncMock(return_value=observed)
    mock.fetch_predicted = AsyncMock(return_value=predicted)
    return mock


def json_response(payload, status_code=200):
    return httpx.Response(status_code, json=payload)


@pytest.fixture
def provider():
    """HTTP client double routing directory and series requests."""
    routes = {
        "directory": json_response([station_record()]),
        "wlo": json_response(OBSERVED_RECORDS),
        "wlp": json_response(PREDICTED_RECORDS),
    }

    async def fake_get(url, params=None):
        if url.endswith("/stations"):
            return routes["directory"]
        return routes[params["time-series-code"]]

    client = AsyncMock()
    client.get.side_effect = fake_get
    client.routes = routes
    return client
