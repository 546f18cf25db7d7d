from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from tsline.adapters.normalize import normalize_rows
from tsline.errors import ChartDataError, ChartLayoutError
from tsline.options import ChartOptions, LegendOptions
from tsline.scales import LinearScale, TimeScale, compute_domains
from tsline.series import CategorySeries
from tsline.surface import MountTarget, SvgSurface, translate
from tsline.svg import (
    LegendLayout,
    draw_bottom_axis,
    draw_left_axis,
    draw_legend,
    draw_series,
    layout_legend,
    tick_count,
)
from tsline.svg.draw_axis import X_TICK_DENSITY_DIVISOR, Y_TICK_DENSITY_DIVISOR
from tsline.svg.draw_legend import LEGEND_HEIGHT


LOGGER = logging.getLogger(__name__)

X_AXIS_HEIGHT = 20.0
Y_AXIS_WIDTH = 100.0


@dataclass(frozen=True)
class Margins:
    top: float = 50.0
    right: float = 50.0
    bottom: float = 50.0
    left: float = 50.0


DEFAULT_MARGINS = Margins()


@dataclass(frozen=True)
class ChartGeometry:
    width: float
    height: float
    chart_width: float
    chart_height: float
    plot_width: float
    plot_height: float
    origin_x: float
    origin_y: float


def compute_geometry(
    width: float,
    height: float,
    legend: LegendOptions,
    *,
    margins: Margins = DEFAULT_MARGINS,
) -> ChartGeometry:
    """Derive the plotting rectangle from the surface size.

    `chart_*` is the area inside the margins (less the legend band); `plot_*` further
    removes the y-axis label column and the x-axis label row.
    """
    chart_width = width - margins.right - margins.left
    chart_height = height - margins.bottom - margins.top
    legend_band = legend.padding + LEGEND_HEIGHT if legend.enabled else 0.0
    chart_height -= legend_band

    plot_width = chart_width - Y_AXIS_WIDTH
    plot_height = chart_height - X_AXIS_HEIGHT
    if plot_width <= 0 or plot_height <= 0:
        raise ChartLayoutError(f"surface {width:g}x{height:g} is too small for the plotting area")

    origin_y = margins.top
    if legend.enabled and legend.position == "topCenter":
        origin_y += legend_band
    return ChartGeometry(
        width=width,
        height=height,
        chart_width=chart_width,
        chart_height=chart_height,
        plot_width=plot_width,
        plot_height=plot_height,
        origin_x=margins.left + Y_AXIS_WIDTH,
        origin_y=origin_y,
    )


class LineChart:
    """A multi-series line chart bound to one host element.

    Each `draw` replaces the surface from the previous one, so the host holds at most one
    surface from this chart at any time.
    """

    def __init__(self, host: MountTarget, options: ChartOptions, *, margins: Margins = DEFAULT_MARGINS) -> None:
        self.host = host
        self.options = options
        self.margins = margins
        self._surface: SvgSurface | None = None
        self._data: Any = None
        self._categories: tuple[CategorySeries, ...] = ()
        self._geometry: ChartGeometry | None = None
        self._scales: tuple[TimeScale, LinearScale] | None = None
        self._legend_layout: LegendLayout | None = None

    @property
    def surface(self) -> SvgSurface | None:
        return self._surface

    def last_categories(self) -> tuple[CategorySeries, ...]:
        return self._categories

    def last_geometry(self) -> ChartGeometry | None:
        return self._geometry

    def last_scales(self) -> tuple[TimeScale, LinearScale] | None:
        return self._scales

    def last_legend_layout(self) -> LegendLayout | None:
        return self._legend_layout

    def draw(self, data: Any) -> SvgSurface:
        self.destroy()
        options = self.options
        box = self.host.get_bounding_client_rect()
        surface = SvgSurface(box.width, box.height)
        geometry = compute_geometry(box.width, box.height, options.legend, margins=self.margins)

        categories = normalize_rows(data, options.data_mapping, sort=options.x_axis.sort)
        if options.palette.wraps(len(categories)):
            LOGGER.warning(
                "%d categories share a %d-color palette; colors repeat",
                len(categories),
                len(options.palette),
            )
        x_domain, y_domain = compute_domains(categories)
        x_scale = TimeScale(domain=x_domain, range=(0.0, geometry.plot_width))
        y_scale = LinearScale(domain=y_domain, range=(geometry.plot_height, 0.0))

        plot = surface.group(cl="plot", transform=translate(geometry.origin_x, geometry.origin_y))
        draw_series(plot, categories, x_scale=x_scale, y_scale=y_scale, palette=options.palette)
        draw_bottom_axis(
            plot,
            x_scale,
            count=tick_count(geometry.chart_width, options.x_axis.ticks_density, X_TICK_DENSITY_DIVISOR),
            y_offset=geometry.plot_height,
            grid_height=geometry.plot_height if options.x_axis.gridlines else None,
        )
        draw_left_axis(
            plot,
            y_scale,
            count=tick_count(geometry.chart_height, options.y_axis.ticks_density, Y_TICK_DENSITY_DIVISOR),
            grid_width=geometry.plot_width if options.y_axis.gridlines else None,
        )

        legend_layout = None
        if options.legend.enabled:
            legend_layout = layout_legend(
                count=len(categories),
                title=options.legend.title,
                position=options.legend.position,
                padding=options.legend.padding,
                margin_left=self.margins.left,
                margin_top=self.margins.top,
                chart_width=geometry.chart_width,
                chart_height=geometry.chart_height,
            )
            draw_legend(
                surface.root,
                categories,
                layout=legend_layout,
                palette=options.palette,
                text_size=options.legend.text_size,
                title_text=options.legend.legend_name if options.legend.title else None,
            )

        surface.attach(self.host)
        self._surface = surface
        self._data = data
        self._categories = tuple(categories)
        self._geometry = geometry
        self._scales = (x_scale, y_scale)
        self._legend_layout = legend_layout
        LOGGER.debug(
            "drew %d categories on %gx%g surface (x=%s, y=%s)",
            len(categories),
            box.width,
            box.height,
            x_domain,
            y_domain,
        )
        return surface

    def update(self, *, options: ChartOptions | None = None, data: Any = None) -> SvgSurface:
        if options is not None:
            self.options = options
        if data is None:
            data = self._data
        if data is None:
            raise ChartDataError("no data to draw; pass data on the first draw")
        return self.draw(data)

    def destroy(self) -> None:
        if self._surface is not None:
            self._surface.remove()
            self._surface = None
