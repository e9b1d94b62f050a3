import pandas as pd
from typing import Any, Dict, Iterable, Optional

from ..models import Reading, Series, SeriesRole


def parse_time_series(records: Optional[Iterable[Dict[str, Any]]], role: SeriesRole) -> Series:
    """Normalizes raw `{eventDate, value}` records into a Series sorted by time.

    The provider is trusted: unparseable dates become NaT and non-numeric values
    NaN, and both are kept so the output length always equals the input length.
    """
    items = list(records or [])
    if not items:
        return Series.empty(role)

    df = pd.DataFrame(items)
    dates = df["eventDate"] if "eventDate" in df.columns else pd.Series([None] * len(df))
    values = df["value"] if "value" in df.columns else pd.Series([None] * len(df))

    frame = pd.DataFrame({
        "date": pd.to_datetime(dates, utc=True, errors="coerce", format="ISO8601"),
        "value": pd.to_numeric(values, errors="coerce").astype(float),
    }).sort_values("date", kind="mergesort", na_position="last")

    readings = tuple(
        Reading(timestamp=row.date, value=float(row.value))
        for row in frame.itertuples(index=False)
    )
    return Series(role=role, readings=readings)
