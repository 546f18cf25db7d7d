from __future__ import annotations

from typing import Any

from tsline.chart import DEFAULT_MARGINS, LineChart, Margins
from tsline.options import ChartOptions
from tsline.surface import CHART_CLASS, MountTarget


def mount(host: MountTarget, options: ChartOptions | dict[str, Any], *, margins: Margins = DEFAULT_MARGINS) -> LineChart:
    if isinstance(options, dict):
        options = ChartOptions.from_dict(options)
    return LineChart(host, options, margins=margins)


def draw(host: MountTarget, options: ChartOptions | dict[str, Any], data: Any) -> LineChart:
    """Render `data` into `host`, replacing any chart surface already attached to it."""
    for surface in host.child_surfaces():
        if surface.root.get("class") == CHART_CLASS:
            surface.remove()
    chart = mount(host, options)
    chart.draw(data)
    return chart
