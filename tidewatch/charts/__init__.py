from .scales import ChartScales, LinearScale, TimeScale, build_scales, nice_domain
from .render import ChartSurface, render_chart
