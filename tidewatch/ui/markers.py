import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, TYPE_CHECKING

from ..charts.render import ChartSurface, render_chart
from ..config import Settings
from ..data.fetchers import TimeSeriesFetcher
from ..exceptions import JoinFailure
from ..models import MarkerState, Series, SeriesRole, Station
from .popup import ChartSlot, PopupContent

if TYPE_CHECKING:
    from .map import MapMarker, StationMap

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StationMarkerController:
    """Drives one station marker's popup chart.

    IDLE -> LOADING on popup open (only for stations reporting observations),
    then RENDERED or FAILED once both series requests have settled. A second
    open while the popup is still open is ignored; closing the popup drops the
    series and any result still in flight.
    """

    def __init__(self, station: Station, fetcher: TimeSeriesFetcher, settings: Settings,
                 station_map: Optional["StationMap"] = None, marker: Optional["MapMarker"] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.station = station
        self.fetcher = fetcher
        self.settings = settings
        self.map = station_map
        self.marker = marker
        self._clock = clock

        self.has_chart = station.has_code(settings.observed_code)
        self.has_prediction = station.has_code(settings.predicted_code)
        self.chart = ChartSlot() if self.has_chart else None
        self.content = PopupContent(title=station.name, code=station.code, chart=self.chart)

        self.state = MarkerState.IDLE
        self.observed: Optional[Series] = None
        self.predicted: Optional[Series] = None
        self._session = 0
        self._open = False

    async def _no_prediction(self) -> Series:
        return Series.empty(SeriesRole.PREDICTED)

    async def on_popup_open(self) -> None:
        if self.chart is None:
            return
        if self._open and self.state in (MarkerState.LOADING, MarkerState.RENDERED):
            logger.debug(f"Popup for {self.station.name} already {self.state.value}; ignoring open")
            return

        self._open = True
        self._session += 1
        session = self._session
        self.state = MarkerState.LOADING
        self.observed = self.predicted = None
        self.chart.show_loading()

        now = self._clock()
        predicted = (self.fetcher.fetch_predicted(self.station.id, now)
                     if self.has_prediction else self._no_prediction())
        results = await asyncio.gather(
            self.fetcher.fetch_observed(self.station.id, now), predicted, return_exceptions=True
        )

        if session != self._session:
            logger.debug(f"Discarding stale chart data for {self.station.name}")
            return

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            self._fail(JoinFailure(self.station.id, errors))
            return

        self.observed, self.predicted = results
        self.chart.clear()
        surface = ChartSurface.from_settings(self.settings)
        try:
            render_chart(self.observed, self.predicted, surface, now=self._clock())
        except Exception as e:
            logger.exception(f"Chart rendering failed for {self.station.name}")
            self._fail(e)
            return

        self.chart.show_chart(surface)
        self.state = MarkerState.RENDERED
        if self.map is not None and self.marker is not None:
            self.map.update_popup_layout(self.marker)

    def on_popup_close(self) -> None:
        if not self._open:
            return
        self._open = False
        self._session += 1
        self.observed = self.predicted = None
        if self.chart is not None:
            self.chart.clear()
        self.state = MarkerState.IDLE

    def _fail(self, error: Exception) -> None:
        logger.error(f"Failed to load chart data: {error}")
        self.chart.show_failure()
        self.state = MarkerState.FAILED
