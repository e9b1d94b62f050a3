import pandas as pd
from typing import Any, Dict, Iterable, List

from ..config import Settings
from ..models import Station


def active_stations(records: Iterable[Dict[str, Any]]) -> List[Station]:
    """Keeps only directory records explicitly flagged as operating."""
    return [Station.from_record(r) for r in records if r.get("operating") is True]


def stations_frame(stations: Iterable[Station], settings: Settings) -> pd.DataFrame:
    """Flattens stations into a table for display and CSV export."""
    cols = ["id", "name", "code", "latitude", "longitude", "observed", "predicted"]
    rows = [{
        "id": s.id,
        "name": s.name,
        "code": s.code,
        "latitude": s.latitude,
        "longitude": s.longitude,
        "observed": s.has_code(settings.observed_code),
        "predicted": s.has_code(settings.predicted_code),
    } for s in stations]
    return pd.DataFrame(rows, columns=cols)
