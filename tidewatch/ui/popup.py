from dataclasses import dataclass, field
from html import escape
from typing import Optional

from .. import config
from ..charts.render import ChartSurface


@dataclass
class ChartSlot:
    """The chart area of a station popup: a message, a chart, or nothing."""
    message: Optional[str] = None
    is_error: bool = False
    surface: Optional[ChartSurface] = None

    def show_loading(self) -> None:
        self.message, self.is_error, self.surface = config.MSG_LOADING, False, None

    def show_failure(self) -> None:
        self.message, self.is_error, self.surface = config.MSG_FAILED, True, None

    def show_chart(self, surface: ChartSurface) -> None:
        self.message, self.is_error, self.surface = None, False, surface

    def clear(self) -> None:
        self.message, self.is_error, self.surface = None, False, None

    @property
    def has_chart(self) -> bool:
        return self.surface is not None and bool(self.surface.layers)

    def to_html(self, chart_html: str = "") -> str:
        if self.message:
            color = config.THEME_COLORS["error" if self.is_error else "muted"]
            return f'<p style="color:{color};font-size:12px;">{escape(self.message)}</p>'
        if self.surface is not None and self.surface.notice:
            return (f'<p style="color:{config.THEME_COLORS["muted"]};font-size:13px;">'
                    f'{escape(self.surface.notice)}</p>')
        return chart_html


@dataclass
class PopupContent:
    """Static title/code header plus the optional chart slot."""
    title: str
    code: Optional[str] = None
    chart: Optional[ChartSlot] = field(default=None)

    def to_html(self, chart_html: str = "") -> str:
        parts = [f"<strong>{escape(str(self.title))}</strong>"]
        if self.code:
            parts.append(f'<span class="popup-code"> ({escape(self.code)})</span>')
        if self.chart is not None:
            parts.append(f'<div class="wl-chart">{self.chart.to_html(chart_html)}</div>')
        return f'<div class="popup-content">{"".join(parts)}</div>'
