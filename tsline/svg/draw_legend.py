from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence
import xml.etree.ElementTree as ET

from tsline.palette import Palette
from tsline.series import CategorySeries
from tsline.surface import element, translate


LegendPosition = Literal["bottomCenter", "topCenter"]

LEGEND_HEIGHT = 20.0
LEGEND_ITEM_WIDTH = 100.0
LEGEND_TITLE_WIDTH = 100.0
SWATCH_SIZE = 20.0
LABEL_OFFSET = 30.0


@dataclass(frozen=True)
class LegendLayout:
    x: float
    y: float
    width: float
    title_width: float
    item_width: float = LEGEND_ITEM_WIDTH
    height: float = LEGEND_HEIGHT


def legend_width(count: int, *, title: bool) -> float:
    return LEGEND_ITEM_WIDTH * count + (LEGEND_TITLE_WIDTH if title else 0.0)


def layout_legend(
    *,
    count: int,
    title: bool,
    position: LegendPosition,
    padding: float,
    margin_left: float,
    margin_top: float,
    chart_width: float,
    chart_height: float,
) -> LegendLayout:
    """Center the legend block on the chart, below it or in the top margin band."""
    width = legend_width(count, title=title)
    x = margin_left + chart_width / 2.0 - width / 2.0
    if position == "bottomCenter":
        y = chart_height + margin_top + padding
    else:
        y = margin_top
    return LegendLayout(x=x, y=y, width=width, title_width=LEGEND_TITLE_WIDTH if title else 0.0)


def draw_legend(
    parent: ET.Element,
    categories: Sequence[CategorySeries],
    *,
    layout: LegendLayout,
    palette: Palette,
    text_size: float,
    title_text: str | None = None,
) -> ET.Element:
    legend = element(
        parent,
        "g",
        cl="legend",
        transform=translate(layout.x, layout.y),
        text_anchor="start",
        font_family="sans-serif",
        font_size=text_size,
    )
    if title_text is not None:
        element(legend, "text", title_text, cl="legend-title", x=0, y=10, font_weight="bold", dy="0.35em")

    items = element(legend, "g", transform=translate(layout.title_width, 0))
    for i, category in enumerate(categories):
        item = element(items, "g", cl="legend-item", transform=translate(i * layout.item_width, 0))
        element(item, "rect", cl="swatch", x=0, width=SWATCH_SIZE, height=SWATCH_SIZE, fill=palette.color_for(i))
        element(item, "text", category.name, x=LABEL_OFFSET, y=10, dy="0.35em")
    return legend
