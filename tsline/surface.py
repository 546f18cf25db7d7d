from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
import xml.etree.ElementTree as ET


SVG_NAMESPACE = "http://www.w3.org/2000/svg"
CHART_CLASS = "tsline-chart"


@dataclass(frozen=True)
class BoundingBox:
    width: float
    height: float


class MountTarget(Protocol):
    """Host element a chart attaches its surface to.

    Mirrors the slice of a DOM element the renderer needs: a measured box plus child
    attach/detach.
    """

    def get_bounding_client_rect(self) -> BoundingBox:
        ...

    def append_child(self, surface: "SvgSurface") -> None:
        ...

    def remove_child(self, surface: "SvgSurface") -> None:
        ...

    def child_surfaces(self) -> list["SvgSurface"]:
        ...


@dataclass
class HostElement:
    """In-memory mount target with a fixed measured size."""

    width: float
    height: float
    children: list["SvgSurface"] = field(default_factory=list)

    def get_bounding_client_rect(self) -> BoundingBox:
        return BoundingBox(width=float(self.width), height=float(self.height))

    def append_child(self, surface: "SvgSurface") -> None:
        self.children.append(surface)

    def remove_child(self, surface: "SvgSurface") -> None:
        self.children = [child for child in self.children if child is not surface]

    def child_surfaces(self) -> list["SvgSurface"]:
        return list(self.children)

    def resize(self, width: float, height: float) -> None:
        if width < 0 or height < 0:
            raise ValueError("host width/height must be >= 0")
        self.width = width
        self.height = height


class SvgSurface:
    """An `<svg>` root sized to its host, detachable as a unit."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NAMESPACE,
                "class": CHART_CLASS,
                "width": fmt_number(width),
                "height": fmt_number(height),
            },
        )
        self._host: MountTarget | None = None

    @property
    def attached(self) -> bool:
        return self._host is not None

    def attach(self, host: MountTarget) -> None:
        if self._host is not None:
            raise RuntimeError("surface is already attached")
        host.append_child(self)
        self._host = host

    def remove(self) -> None:
        if self._host is None:
            return
        self._host.remove_child(self)
        self._host = None

    def group(self, **attrs: str) -> ET.Element:
        return element(self.root, "g", **attrs)

    def to_markup(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def write(self, path: str | Path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.to_markup() + "\n", encoding="utf-8")
        return target


def element(parent: ET.Element, tag: str, text: str | None = None, **attrs: object) -> ET.Element:
    """Append a child element; underscores in attribute names become dashes."""
    child = ET.SubElement(parent, tag, {_attr_name(k): _attr_value(v) for k, v in attrs.items() if v is not None})
    if text is not None:
        child.text = text
    return child


def translate(x: float, y: float) -> str:
    return f"translate({fmt_number(x)},{fmt_number(y)})"


def fmt_number(value: float) -> str:
    out = f"{float(value):.6f}".rstrip("0").rstrip(".")
    return "0" if out in {"-0", ""} else out


def _attr_name(name: str) -> str:
    if name == "cl":
        return "class"
    return name.rstrip("_").replace("_", "-")


def _attr_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return fmt_number(value)
    return str(value)
