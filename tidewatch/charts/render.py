import altair as alt
import logging
import pandas as pd
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Union

from .. import config
from ..config import Settings
from ..models import Series, SeriesRole
from .scales import ChartScales, build_scales

logger = logging.getLogger(__name__)

SERIES_STYLE = {
    SeriesRole.OBSERVED: {"color": config.THEME_COLORS["observed"], "strokeWidth": 1.5},
    SeriesRole.PREDICTED: {"color": config.THEME_COLORS["predicted"], "strokeWidth": 1.5, "strokeDash": [5, 3]},
}

# Value-only marks still need one row to draw from.
_DATUM = pd.DataFrame({"_": [0]})


class ChartSurface:
    """Fixed-size drawing area that collects named chart layers.

    Drawing appends; call `clear()` before drawing again.
    """

    def __init__(self, width: int, height: int, margin: Dict[str, int]):
        self.width = width
        self.height = height
        self.margin = dict(margin)
        self.layers: List[Tuple[str, Union[alt.Chart, alt.LayerChart]]] = []
        self.legend_labels: List[str] = []
        self.notice: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChartSurface":
        return cls(settings.chart_width, settings.chart_height, settings.chart_margin)

    @property
    def inner_width(self) -> int:
        return self.width - self.margin["left"] - self.margin["right"]

    @property
    def inner_height(self) -> int:
        return self.height - self.margin["top"] - self.margin["bottom"]

    @property
    def layer_names(self) -> List[str]:
        return [name for name, _ in self.layers]

    @property
    def is_blank(self) -> bool:
        return not self.layers and self.notice is None

    def add_layer(self, name: str, chart: Union[alt.Chart, alt.LayerChart]) -> None:
        self.layers.append((name, chart))

    def show_notice(self, text: str) -> None:
        self.notice = text

    def clear(self) -> None:
        self.layers = []
        self.legend_labels = []
        self.notice = None

    def to_altair(self) -> Optional[alt.LayerChart]:
        if not self.layers:
            return None
        return alt.layer(*[chart for _, chart in self.layers]).properties(
            width=self.inner_width,
            height=self.inner_height,
            padding=self.margin,
        )


def _legend_entry(series: Series, x: float, y: float) -> alt.LayerChart:
    style = SERIES_STYLE[series.role]
    swatch = alt.Chart(_DATUM).mark_rule(**style).encode(
        x=alt.value(x), x2=alt.value(x + 18), y=alt.value(y), y2=alt.value(y)
    )
    label = alt.Chart(_DATUM).mark_text(
        text=series.role.label, align="left", fontSize=10, color=config.THEME_COLORS["legend_text"]
    ).encode(x=alt.value(x + 22), y=alt.value(y + 4))
    return alt.layer(swatch, label)


def render_chart(observed: Series, predicted: Series, surface: ChartSurface,
                 scales: Optional[ChartScales] = None, now: Optional[datetime] = None) -> None:
    """Draws axes, the "now" line, both series and a legend onto `surface`.

    With no readings at all only the empty-state notice is drawn.
    """
    if scales is None:
        scales = build_scales(observed, predicted, surface.inner_width, surface.inner_height)
    if scales is None:
        surface.show_notice(config.MSG_NO_DATA)
        return
    now = now or datetime.now(timezone.utc)

    x_enc = alt.X(
        "date:T", title=None,
        scale=alt.Scale(domain=list(scales.x.domain), nice=False),
        axis=alt.Axis(tickCount=config.X_TICKS, format=config.TIME_FORMAT, labelFontSize=10),
    )
    y_enc = alt.Y(
        "value:Q", title=config.Y_LABEL,
        scale=alt.Scale(domain=list(scales.y.domain), nice=False, zero=False),
        axis=alt.Axis(tickCount=config.Y_TICKS, labelFontSize=10, titleFontSize=11,
                      titleFontWeight="normal", titleColor=config.THEME_COLORS["axis_label"]),
    )

    # Axes
    points = pd.concat([observed.to_frame(), predicted.to_frame()], ignore_index=True)
    surface.add_layer("axes", alt.Chart(points).mark_point(opacity=0).encode(x=x_enc, y=y_enc))

    # "Now" reference line
    if scales.domain.contains_time(now):
        x_now = scales.x(now)
        surface.add_layer("now", alt.Chart(_DATUM).mark_rule(
            color=config.THEME_COLORS["now"], strokeWidth=1, strokeDash=[4, 3]
        ).encode(x=alt.value(x_now), y=alt.value(0), y2=alt.value(surface.inner_height)))

    drawn = [s for s in (observed, predicted) if not s.is_empty]
    for series in drawn:
        surface.add_layer(
            series.role.name.lower(),
            alt.Chart(series.to_frame()).mark_line(**SERIES_STYLE[series.role]).encode(x=x_enc, y=y_enc),
        )

    # Legend
    legend_x = surface.inner_width - config.LEGEND_OFFSET
    entries = [_legend_entry(s, legend_x, i * config.LEGEND_STEP) for i, s in enumerate(drawn)]
    surface.add_layer("legend", alt.layer(*entries))
    surface.legend_labels = [s.role.label for s in drawn]
    logger.debug(f"Rendered chart layers: {surface.layer_names}")
