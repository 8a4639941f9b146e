from __future__ import annotations

from dataclasses import dataclass
import math

from drawraster.errors import StrokeConstructionError
from drawraster.primitives import Color, Stroke


# Zero-width strokes are drawn as one pixel wide hairlines.
HAIRLINE_WIDTH = 1.0
MITER_LIMIT = 4.0


@dataclass(frozen=True)
class Paint:
    color: Color
    anti_alias: bool = True


@dataclass(frozen=True)
class StrokeStyle:
    width: float
    miter_limit: float = MITER_LIMIT

    @property
    def effective_width(self) -> float:
        return self.width if self.width > 0.0 else HAIRLINE_WIDTH


def create_paint(color: Color) -> Paint:
    return Paint(color=color, anti_alias=True)


def resolve_fill(fill: Color | None) -> Paint | None:
    if fill is None:
        return None
    return create_paint(fill)


def resolve_stroke(stroke: Stroke | None) -> tuple[Paint, StrokeStyle] | None:
    """Paint and stroke style for an outline, or ``None`` when nothing is drawn.

    Colour presence gates stroking: a stroke without a colour is skipped even
    when it carries a width.
    """
    if stroke is None or stroke.color is None:
        return None
    width = float(stroke.width)
    if not math.isfinite(width):
        raise StrokeConstructionError(f"stroke width must be finite, got {stroke.width}")
    if width < 0.0:
        raise StrokeConstructionError(f"stroke width must be >= 0, got {stroke.width}")
    return create_paint(stroke.color), StrokeStyle(width=width)
