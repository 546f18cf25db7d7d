from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import math
from pathlib import Path
import tomllib
from typing import Any

from tsline.adapters.normalize import DataMapping, SortMode
from tsline.errors import ChartOptionsError
from tsline.palette import Palette
from tsline.svg.draw_legend import LegendPosition


LOGGER = logging.getLogger(__name__)

LEGEND_POSITIONS = ("bottomCenter", "topCenter")
SORT_MODES = ("temporal", "lexical")


@dataclass(frozen=True)
class LegendOptions:
    enabled: bool = False
    text_size: float = 12.0
    position: LegendPosition = "bottomCenter"
    padding: float = 10.0
    title: bool = False
    legend_name: str = ""


@dataclass(frozen=True)
class AxisOptions:
    ticks_density: float = 100.0
    gridlines: bool = False


@dataclass(frozen=True)
class XAxisOptions(AxisOptions):
    sort: SortMode = "temporal"


DEFAULT_Y_AXIS = AxisOptions(ticks_density=20.0)


@dataclass(frozen=True)
class ChartOptions:
    data_mapping: DataMapping
    legend: LegendOptions = LegendOptions()
    x_axis: XAxisOptions = XAxisOptions()
    y_axis: AxisOptions = DEFAULT_Y_AXIS
    palette: Palette = Palette()

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ChartOptions":
        """Build options from the camelCase layout used by chart configuration files."""
        root = _expect_obj(payload, "options")
        _warn_unknown(root, {"dataMapping", "legend", "xAxis", "yAxis", "palette"}, "options")

        mapping_obj = _expect_obj(root.get("dataMapping"), "dataMapping")
        mapping = DataMapping(
            x=_require_str(mapping_obj.get("x"), "dataMapping.x"),
            y=_require_str(mapping_obj.get("y"), "dataMapping.y"),
            z=_require_str(mapping_obj.get("z"), "dataMapping.z"),
        )

        legend_obj = _expect_obj(root.get("legend", {}), "legend")
        _warn_unknown(legend_obj, {"enabled", "textSize", "position", "padding", "title", "legendName"}, "legend")
        defaults = LegendOptions()
        position = legend_obj.get("position", defaults.position)
        if position not in LEGEND_POSITIONS:
            raise ChartOptionsError(f"legend.position must be one of {', '.join(LEGEND_POSITIONS)}")
        legend = LegendOptions(
            enabled=_coerce_bool(legend_obj.get("enabled", defaults.enabled), "legend.enabled"),
            text_size=_coerce_number(legend_obj.get("textSize", defaults.text_size), "legend.textSize"),
            position=position,
            padding=_coerce_number(legend_obj.get("padding", defaults.padding), "legend.padding"),
            title=_coerce_bool(legend_obj.get("title", defaults.title), "legend.title"),
            legend_name=_coerce_str(legend_obj.get("legendName", defaults.legend_name), "legend.legendName"),
        )

        x_obj = _expect_obj(root.get("xAxis", {}), "xAxis")
        _warn_unknown(x_obj, {"ticksDensity", "gridlines", "sort"}, "xAxis")
        x_defaults = XAxisOptions()
        sort = x_obj.get("sort", x_defaults.sort)
        if sort not in SORT_MODES:
            raise ChartOptionsError(f"xAxis.sort must be one of {', '.join(SORT_MODES)}")
        x_axis = XAxisOptions(
            ticks_density=_coerce_number(x_obj.get("ticksDensity", x_defaults.ticks_density), "xAxis.ticksDensity"),
            gridlines=_coerce_bool(x_obj.get("gridlines", x_defaults.gridlines), "xAxis.gridlines"),
            sort=sort,
        )

        y_obj = _expect_obj(root.get("yAxis", {}), "yAxis")
        _warn_unknown(y_obj, {"ticksDensity", "gridlines"}, "yAxis")
        y_defaults = DEFAULT_Y_AXIS
        y_axis = AxisOptions(
            ticks_density=_coerce_number(y_obj.get("ticksDensity", y_defaults.ticks_density), "yAxis.ticksDensity"),
            gridlines=_coerce_bool(y_obj.get("gridlines", y_defaults.gridlines), "yAxis.gridlines"),
        )

        colors = root.get("palette")
        if colors is not None:
            if not isinstance(colors, list) or not all(isinstance(c, str) and c.strip() for c in colors):
                raise ChartOptionsError("palette must be a list of non-empty color strings")
        palette = Palette.from_colors(colors)

        return cls(data_mapping=mapping, legend=legend, x_axis=x_axis, y_axis=y_axis, palette=palette)


def load_options(path: str | Path) -> ChartOptions:
    source = Path(path)
    suffix = source.suffix.lower()
    if suffix == ".toml":
        with source.open("rb") as f:
            raw = tomllib.load(f)
    elif suffix == ".json":
        with source.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    else:
        raise ChartOptionsError(f"unsupported options file type: {source.name} (expected .toml or .json)")
    return ChartOptions.from_dict(raw)


def _expect_obj(value: object, field_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ChartOptionsError(f"{field_name} must be an object")
    return value


def _require_str(value: object, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ChartOptionsError(f"{field_name} must be a non-empty string")
    return value


def _coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ChartOptionsError(f"{field_name} must be a string")
    return value


def _coerce_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ChartOptionsError(f"{field_name} must be a boolean")
    return value


def _coerce_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartOptionsError(f"{field_name} must be a number")
    out = float(value)
    if not math.isfinite(out) or out < 0:
        raise ChartOptionsError(f"{field_name} must be a finite number >= 0")
    return out


def _warn_unknown(obj: dict[str, Any], known: set[str], field_name: str) -> None:
    for key in sorted(set(obj) - known):
        LOGGER.warning("ignoring unknown option %s.%s", field_name, key)
