from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import pandas as pd


class SeriesRole(Enum):
    OBSERVED = "Observed"
    PREDICTED = "Predicted"

    @property
    def label(self) -> str:
        return self.value


class MarkerState(Enum):
    """Lifecycle of a station marker's chart for the currently open popup."""
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass(frozen=True)
class Station:
    """Represents a single monitoring station from the directory."""
    id: str
    name: str
    latitude: Optional[float]
    longitude: Optional[float]
    operating: bool = False
    code: Optional[str] = None
    time_series_codes: Tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Station":
        station_id = record.get("id")
        name = record.get("officialName") or record.get("name") or station_id
        codes = tuple(str(ts.get("code") or "").lower() for ts in (record.get("timeSeries") or []))
        return cls(
            id=station_id,
            name=name,
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
            operating=record.get("operating") is True,
            code=record.get("code") or None,
            time_series_codes=codes,
        )

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def has_code(self, code: str) -> bool:
        return code.lower() in self.time_series_codes


@dataclass(frozen=True)
class Reading:
    timestamp: datetime
    value: float


@dataclass(frozen=True)
class Series:
    """Readings for one role, ascending by timestamp. May be empty."""
    role: SeriesRole
    readings: Tuple[Reading, ...] = ()

    @classmethod
    def empty(cls, role: SeriesRole) -> "Series":
        return cls(role=role)

    def __len__(self) -> int:
        return len(self.readings)

    def __iter__(self):
        return iter(self.readings)

    @property
    def is_empty(self) -> bool:
        return not self.readings

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "date": [r.timestamp for r in self.readings],
            "value": [r.value for r in self.readings],
            "series": [self.role.label] * len(self.readings),
        }, columns=["date", "value", "series"])


@dataclass(frozen=True)
class ChartDomain:
    time_extent: Tuple[datetime, datetime]
    value_extent: Tuple[float, float]

    def contains_time(self, instant: datetime) -> bool:
        return self.time_extent[0] <= instant <= self.time_extent[1]


@dataclass
class StatusBoard:
    """User-visible status line plus the (normally hidden) error area."""
    status: str = "Loading stations…"
    error: Optional[str] = None

    @property
    def error_visible(self) -> bool:
        return self.error is not None
