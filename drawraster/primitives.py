from __future__ import annotations

from dataclasses import dataclass, field
import numbers
from typing import TypeAlias


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Color:
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"color channel {name} must be an integer, got {value!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"color channel {name} must be in [0, 255], got {value}")

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


WHITE = Color(255, 255, 255, 255)


@dataclass(frozen=True)
class Stroke:
    """Outline request; a stroke with ``color=None`` draws nothing."""

    color: Color | None = field(default_factory=Color)
    width: float = 2.0


@dataclass(frozen=True)
class Circle:
    position: Point
    radius: float
    fill: Color | None = None
    stroke: Stroke | None = None


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    stroke: Stroke | None = None


@dataclass(frozen=True)
class Rectangle:
    position: Point
    width: float
    height: float
    fill: Color | None = None
    stroke: Stroke | None = None


@dataclass(frozen=True)
class Polygon:
    points: tuple[Point, ...]
    fill: Color | None = None
    stroke: Stroke | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))


@dataclass(frozen=True)
class Text:
    """Accepted by the renderer but never rasterized."""

    position: Point
    content: str
    font_size: float = 16.0
    color: Color | None = None


Shape: TypeAlias = Circle | Line | Rectangle | Polygon
DrawCommand: TypeAlias = Circle | Line | Rectangle | Polygon | Text
