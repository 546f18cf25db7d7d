from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class CategorySeries:
    """Points of one category in row order.

    `x` holds epoch milliseconds (UTC) and `y` magnitudes; undefined coordinates are NaN
    and excluded by `mask`.
    """

    name: str
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray

    @property
    def size(self) -> int:
        return int(self.x.size)

    def defined_points(self) -> list[tuple[float, float]]:
        return [(float(x), float(y)) for x, y in zip(self.x[self.mask], self.y[self.mask], strict=True)]


@dataclass(frozen=True)
class SeriesStyle:
    stroke_width: float = 1.5
    line_join: str = "round"
    line_cap: str = "round"


DEFAULT_SERIES_STYLE = SeriesStyle()
