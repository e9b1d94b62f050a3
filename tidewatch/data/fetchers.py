import httpx
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..exceptions import DirectoryError, FetchError
from ..models import Series, SeriesRole
from .parsing import parse_time_series

logger = logging.getLogger(__name__)


def format_instant(dt: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


async def _get(client: Optional[httpx.AsyncClient], url: str, timeout: float,
               params: Optional[Dict[str, str]] = None) -> httpx.Response:
    if client is not None:
        return await client.get(url, params=params)
    async with httpx.AsyncClient(timeout=timeout) as session:
        return await session.get(url, params=params)


async def fetch_station_directory(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> List[Dict[str, Any]]:
    """Fetches the full station list in one request."""
    url = settings.stations_url
    logger.info(f"Fetching station directory: {url}")
    resp = await _get(client, url, settings.http_timeout)
    if not resp.is_success:
        raise DirectoryError(resp.status_code, resp.reason_phrase)
    return resp.json() or []


class TimeSeriesFetcher:
    """Issues time-windowed water level requests for one station at a time.

    Each call is a single attempt; a pooled client may be injected, otherwise
    a short-lived one is opened per request.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client

    def _role_for(self, code: str) -> SeriesRole:
        if code.lower() == self.settings.predicted_code.lower():
            return SeriesRole.PREDICTED
        return SeriesRole.OBSERVED

    async def fetch(self, station_id: str, code: str, start: datetime, end: datetime) -> Series:
        url = self.settings.station_data_url(station_id)
        params = {
            "time-series-code": code,
            "from": format_instant(start),
            "to": format_instant(end),
        }
        logger.info(f"Fetching {code} data: {url} from={params['from']} to={params['to']}")

        try:
            resp = await _get(self._client, url, self.settings.http_timeout, params)
        except httpx.RequestError as e:
            raise FetchError(None, f"Network error: {e}") from e

        if not resp.is_success:
            raise FetchError(resp.status_code, resp.reason_phrase)
        return parse_time_series(resp.json(), self._role_for(code))

    async def fetch_observed(self, station_id: str, now: datetime) -> Series:
        """Observations over the trailing window ending at `now`."""
        return await self.fetch(station_id, self.settings.observed_code,
                                now - self.settings.fetch_window, now)

    async def fetch_predicted(self, station_id: str, now: datetime) -> Series:
        """Predictions over the window starting at `now`."""
        return await self.fetch(station_id, self.settings.predicted_code,
                                now, now + self.settings.fetch_window)
