"""
Coordinate mappings for the water level chart.

Pure functions only: domains are derived from the readings and turned into
linear value -> pixel mappings that the renderer (and the "now" marker) reuse.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from ..models import ChartDomain, Series

E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)


def tick_increment(start: float, stop: float, count: int) -> float:
    """Step between round ticks; negative values encode 1/step for steps below 1."""
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    factor = 10 if error >= E10 else 5 if error >= E5 else 2 if error >= E2 else 1
    if power >= 0:
        return factor * math.pow(10, power)
    return -math.pow(10, -power) / factor


def nice_domain(lo: float, hi: float, count: int = 10) -> Tuple[float, float]:
    """Extends [lo, hi] outward to round tick boundaries."""
    if hi < lo:
        return tuple(reversed(nice_domain(hi, lo, count)))
    start, stop = lo, hi
    if start == stop or not (math.isfinite(start) and math.isfinite(stop)):
        return lo, hi

    prestep = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return start, stop


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        t = (value - d0) / span if span else 0.5
        return r0 + t * (r1 - r0)


@dataclass(frozen=True)
class TimeScale(LinearScale):
    """LinearScale over epoch milliseconds, called with instants."""

    def __call__(self, instant: datetime) -> float:
        return super().__call__(to_epoch_ms(instant))


@dataclass(frozen=True)
class ChartScales:
    x: TimeScale
    y: LinearScale
    domain: ChartDomain


def to_epoch_ms(instant: datetime) -> float:
    return pd.Timestamp(instant).timestamp() * 1000.0


def _extents(series: Sequence[Series]) -> Tuple[List[datetime], List[float]]:
    times, values = [], []
    for s in series:
        for r in s:
            if not pd.isna(r.timestamp):
                times.append(r.timestamp)
            if not pd.isna(r.value):
                values.append(r.value)
    return times, values


def build_scales(observed: Series, predicted: Series, width: float, height: float) -> Optional[ChartScales]:
    """Time and value mappings over the union of both series.

    Returns None when neither series has a reading.
    """
    if observed.is_empty and predicted.is_empty:
        return None

    times, values = _extents([observed, predicted])
    if not times:
        return None
    t0, t1 = min(times), max(times)
    v0, v1 = (min(values), max(values)) if values else (0.0, 0.0)

    x = TimeScale(domain=(to_epoch_ms(t0), to_epoch_ms(t1)), range=(0.0, float(width)))
    y = LinearScale(domain=nice_domain(v0, v1), range=(float(height), 0.0))
    return ChartScales(x=x, y=y, domain=ChartDomain(time_extent=(t0, t1), value_extent=(v0, v1)))
