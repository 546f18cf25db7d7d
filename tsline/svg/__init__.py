from .draw_axis import AxisStyle, draw_bottom_axis, draw_left_axis, tick_count
from .draw_legend import LegendLayout, draw_legend, layout_legend, legend_width
from .draw_lines import draw_series, line_path

__all__ = [
    "AxisStyle",
    "LegendLayout",
    "draw_bottom_axis",
    "draw_left_axis",
    "draw_legend",
    "draw_series",
    "layout_legend",
    "legend_width",
    "line_path",
    "tick_count",
]
