from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tsline.errors import ChartOptionsError


DEFAULT_COLORS: tuple[str, ...] = ("red", "blue", "green", "black", "orange", "pink", "purple")


@dataclass(frozen=True)
class Palette:
    """Ordered stroke/swatch colors; category index `i` maps to `colors[i % len(colors)]`."""

    colors: tuple[str, ...] = DEFAULT_COLORS

    def __post_init__(self) -> None:
        if not self.colors:
            raise ChartOptionsError("palette must contain at least one color")

    @classmethod
    def from_colors(cls, colors: Sequence[str] | None) -> "Palette":
        if colors is None:
            return cls()
        return cls(colors=tuple(colors))

    def __len__(self) -> int:
        return len(self.colors)

    def color_for(self, index: int) -> str:
        if index < 0:
            raise IndexError("palette index must be >= 0")
        return self.colors[index % len(self.colors)]

    def wraps(self, count: int) -> bool:
        return count > len(self.colors)
