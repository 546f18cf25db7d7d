from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal
import xml.etree.ElementTree as ET

import numpy as np

from tsline.scales import LinearScale
from tsline.surface import element, fmt_number, translate


Orient = Literal["bottom", "left"]

X_TICK_DENSITY_DIVISOR = 8000.0
Y_TICK_DENSITY_DIVISOR = 1000.0


@dataclass(frozen=True)
class AxisStyle:
    tick_size_inner: float = 6.0
    tick_size_outer: float = 6.0
    tick_padding: float = 3.0
    font_size: float = 10.0
    font_family: str = "sans-serif"
    grid_opacity: float = 0.1


def tick_count(pixels: float, density: float, divisor: float) -> int:
    """Advisory tick count: available pixels scaled by density, floored, never negative."""
    if not math.isfinite(pixels) or not math.isfinite(density):
        return 0
    return max(0, math.floor(pixels * (density / divisor)))


def draw_bottom_axis(
    parent: ET.Element,
    scale: LinearScale,
    *,
    count: int,
    y_offset: float,
    grid_height: float | None = None,
    style: AxisStyle = AxisStyle(tick_size_outer=0.0),
) -> ET.Element:
    g = _axis_group(parent, "bottom", style, cl="axis x-axis", transform=translate(0, y_offset))
    r0, r1 = scale.range
    outer = fmt_number(style.tick_size_outer)
    element(g, "path", cl="domain", stroke="currentColor", d=f"M{fmt_number(r0)},{outer}V0H{fmt_number(r1)}V{outer}")
    _draw_ticks(g, scale, "bottom", count=count, grid_extent=grid_height, style=style)
    return g


def draw_left_axis(
    parent: ET.Element,
    scale: LinearScale,
    *,
    count: int,
    grid_width: float | None = None,
    show_domain: bool = False,
    style: AxisStyle = AxisStyle(),
) -> ET.Element:
    g = _axis_group(parent, "left", style, cl="axis y-axis")
    if show_domain:
        r0, r1 = scale.range
        outer = fmt_number(-style.tick_size_outer)
        element(g, "path", cl="domain", stroke="currentColor", d=f"M{outer},{fmt_number(r0)}H0V{fmt_number(r1)}H{outer}")
    _draw_ticks(g, scale, "left", count=count, grid_extent=grid_width, style=style)
    return g


def _axis_group(parent: ET.Element, orient: Orient, style: AxisStyle, **attrs: str) -> ET.Element:
    return element(
        parent,
        "g",
        fill="none",
        font_size=style.font_size,
        font_family=style.font_family,
        text_anchor="middle" if orient == "bottom" else "end",
        **attrs,
    )


def _draw_ticks(
    g: ET.Element,
    scale: LinearScale,
    orient: Orient,
    *,
    count: int,
    grid_extent: float | None,
    style: AxisStyle,
) -> None:
    if count <= 0:
        return
    ticks = scale.ticks(count)
    labels = scale.tick_labels(ticks)
    positions = np.asarray(scale(ticks), dtype=np.float64)
    spacing = style.tick_size_inner + style.tick_padding
    for pos, label in zip(positions.tolist(), labels, strict=True):
        if orient == "bottom":
            tick = element(g, "g", cl="tick", opacity=1, transform=translate(pos, 0))
            element(tick, "line", stroke="currentColor", y2=style.tick_size_inner)
            if grid_extent:
                element(tick, "line", cl="grid", stroke="currentColor", stroke_opacity=style.grid_opacity, y2=-grid_extent)
            element(tick, "text", label, fill="currentColor", y=spacing, dy="0.71em")
        else:
            tick = element(g, "g", cl="tick", opacity=1, transform=translate(0, pos))
            element(tick, "line", stroke="currentColor", x2=-style.tick_size_inner)
            if grid_extent:
                element(tick, "line", cl="grid", stroke="currentColor", stroke_opacity=style.grid_opacity, x2=grid_extent)
            element(tick, "text", label, fill="currentColor", x=-spacing, dy="0.32em")
