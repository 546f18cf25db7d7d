from tsline.adapters.normalize import DataMapping
from tsline.api import draw, mount
from tsline.chart import ChartGeometry, LineChart, Margins
from tsline.errors import ChartDataError, ChartLayoutError, ChartOptionsError
from tsline.options import AxisOptions, ChartOptions, LegendOptions, XAxisOptions, load_options
from tsline.palette import DEFAULT_COLORS, Palette
from tsline.series import CategorySeries
from tsline.surface import BoundingBox, HostElement, MountTarget, SvgSurface

__all__ = [
    "AxisOptions",
    "BoundingBox",
    "CategorySeries",
    "ChartDataError",
    "ChartGeometry",
    "ChartLayoutError",
    "ChartOptions",
    "ChartOptionsError",
    "DEFAULT_COLORS",
    "DataMapping",
    "HostElement",
    "LegendOptions",
    "LineChart",
    "Margins",
    "MountTarget",
    "Palette",
    "SvgSurface",
    "XAxisOptions",
    "draw",
    "load_options",
    "mount",
]
