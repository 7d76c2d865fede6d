"""Declarative scene primitives.

The heatmap composer produces a ``Scene``; the SVG emitter in
``figure.py`` only reads it. Every primitive is a frozen dataclass and
the element list is a tuple, so a composed scene cannot change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class CellInfo:
    """Hover metadata for one heatmap cell (already formatted for display)."""

    start: str
    low: str
    high: str
    count: int


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    css_class: str | None = None
    title: str | None = None
    cell: CellInfo | None = None


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float
    css_class: str | None = None


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    content: str
    fill: str
    font_size: float
    anchor: str = "start"
    rotate: float | None = None
    element_id: str | None = None
    css_class: str | None = None


@dataclass(frozen=True)
class Script:
    source: str


Element = Union[Rect, Line, Text, Script]


@dataclass(frozen=True)
class Scene:
    width: float
    height: float
    elements: Tuple[Element, ...]
    font_family: str = "sans-serif"

    def of_type(self, kind: type) -> Tuple[Element, ...]:
        return tuple(e for e in self.elements if isinstance(e, kind))
