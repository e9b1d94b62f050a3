"""
Exceptions for station directory and time-series operations.
"""
from typing import Optional, Sequence


class TidewatchError(Exception):
    """Base exception for station map errors."""

    pass


class _HTTPFailure(TidewatchError):
    """Failure carrying the HTTP status of the response that caused it."""

    def __init__(self, status: Optional[int], status_text: str):
        self.status = status
        self.status_text = status_text
        if status is None:
            super().__init__(status_text)
        else:
            super().__init__(f"HTTP {status}: {status_text}")


class DirectoryError(_HTTPFailure):
    """Station directory could not be fetched or processed."""

    pass


class FetchError(_HTTPFailure):
    """A single time-series request failed."""

    pass


class JoinFailure(TidewatchError):
    """At least one of a station's paired series fetches failed."""

    def __init__(self, station_id: str, errors: Sequence[BaseException]):
        self.station_id = station_id
        self.errors = list(errors)
        detail = "; ".join(str(e) or type(e).__name__ for e in self.errors)
        super().__init__(f"Station {station_id}: {detail}")
