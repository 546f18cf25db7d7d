from __future__ import annotations

from typing import Sequence
import xml.etree.ElementTree as ET

import numpy as np

from tsline.palette import Palette
from tsline.scales import LinearScale
from tsline.series import DEFAULT_SERIES_STYLE, CategorySeries, SeriesStyle
from tsline.surface import element, fmt_number


def draw_series(
    parent: ET.Element,
    categories: Sequence[CategorySeries],
    *,
    x_scale: LinearScale,
    y_scale: LinearScale,
    palette: Palette,
    style: SeriesStyle = DEFAULT_SERIES_STYLE,
) -> list[ET.Element]:
    paths: list[ET.Element] = []
    for i, category in enumerate(categories):
        px = np.asarray(x_scale(category.x), dtype=np.float64)
        py = np.asarray(y_scale(category.y), dtype=np.float64)
        data = line_path(px, py, category.mask)
        paths.append(
            element(
                parent,
                "path",
                cl="series",
                data_name=category.name,
                fill="none",
                stroke=palette.color_for(i),
                stroke_width=style.stroke_width,
                stroke_linejoin=style.line_join,
                stroke_linecap=style.line_cap,
                d=data,
            )
        )
    return paths


def line_path(px: np.ndarray, py: np.ndarray, mask: np.ndarray) -> str | None:
    """Straight-segment path through the defined points; every gap starts a new subpath.

    Returns None when nothing is defined so the caller leaves `d` unset.
    """
    defined = mask & np.isfinite(px) & np.isfinite(py)
    parts: list[str] = []
    for start, stop in _contiguous_true_runs(defined):
        coords = [f"{fmt_number(px[i])},{fmt_number(py[i])}" for i in range(start, stop)]
        parts.append("M" + "L".join(coords))
        if stop - start == 1:
            parts.append("Z")
    return "".join(parts) or None


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs
