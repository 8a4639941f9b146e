from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterator, TypeAlias, assert_never

from drawraster.errors import PathConstructionError
from drawraster.primitives import Circle, Line, Point, Polygon, Rectangle, Shape


# Control-point offset, as a fraction of the radius, for a quarter circle cubic.
CIRCLE_KAPPA = 0.5522847498


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class CubicTo:
    control1: Point
    control2: Point
    point: Point


@dataclass(frozen=True)
class Close:
    pass


PathSegment: TypeAlias = MoveTo | LineTo | CubicTo | Close


@dataclass(frozen=True)
class Path:
    segments: tuple[PathSegment, ...]

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def points(self) -> list[Point]:
        """All on-curve and control points in segment order."""
        out: list[Point] = []
        for seg in self.segments:
            if isinstance(seg, CubicTo):
                out.extend((seg.control1, seg.control2, seg.point))
            elif isinstance(seg, (MoveTo, LineTo)):
                out.append(seg.point)
        return out

    def is_closed(self) -> bool:
        return bool(self.segments) and isinstance(self.segments[-1], Close)

    def bounds(self) -> tuple[float, float, float, float]:
        pts = self.points()
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return (min(xs), min(ys), max(xs), max(ys))


class PathBuilder:
    def __init__(self) -> None:
        self._segments: list[PathSegment] = []
        self._subpath_start: Point | None = None

    def move_to(self, x: float, y: float) -> PathBuilder:
        point = Point(float(x), float(y))
        if self._segments and isinstance(self._segments[-1], MoveTo):
            self._segments[-1] = MoveTo(point)
        else:
            self._segments.append(MoveTo(point))
        self._subpath_start = point
        return self

    def line_to(self, x: float, y: float) -> PathBuilder:
        self._inject_move()
        self._segments.append(LineTo(Point(float(x), float(y))))
        return self

    def cubic_to(
        self, x1: float, y1: float, x2: float, y2: float, x: float, y: float
    ) -> PathBuilder:
        self._inject_move()
        self._segments.append(
            CubicTo(Point(float(x1), float(y1)), Point(float(x2), float(y2)), Point(float(x), float(y)))
        )
        return self

    def close(self) -> PathBuilder:
        if self._segments and not isinstance(self._segments[-1], Close):
            self._segments.append(Close())
        return self

    def finish(self) -> Path:
        if not self._segments:
            raise PathConstructionError("path is empty")
        if len(self._segments) == 1:
            raise PathConstructionError("path holds a lone move")
        path = Path(tuple(self._segments))
        for point in path.points():
            if not (math.isfinite(point.x) and math.isfinite(point.y)):
                raise PathConstructionError(f"path has non-finite coordinate ({point.x}, {point.y})")
        return path

    def _inject_move(self) -> None:
        if not self._segments:
            self.move_to(0.0, 0.0)
        elif isinstance(self._segments[-1], Close):
            start = self._subpath_start or Point()
            self._segments.append(MoveTo(start))


def circle_path(center: Point, radius: float) -> Path:
    r = float(radius)
    cx = float(center.x)
    cy = float(center.y)
    kr = CIRCLE_KAPPA * r
    builder = PathBuilder()
    builder.move_to(cx - r, cy)
    builder.cubic_to(cx - r, cy - kr, cx - kr, cy - r, cx, cy - r)
    builder.cubic_to(cx + kr, cy - r, cx + r, cy - kr, cx + r, cy)
    builder.cubic_to(cx + r, cy + kr, cx + kr, cy + r, cx, cy + r)
    builder.cubic_to(cx - kr, cy + r, cx - r, cy + kr, cx - r, cy)
    builder.close()
    try:
        return builder.finish()
    except PathConstructionError as exc:
        raise PathConstructionError(f"failed to build circle path: {exc}") from exc


def line_path(start: Point, end: Point) -> Path:
    builder = PathBuilder()
    builder.move_to(start.x, start.y)
    builder.line_to(end.x, end.y)
    try:
        return builder.finish()
    except PathConstructionError as exc:
        raise PathConstructionError(f"failed to build line path: {exc}") from exc


def rectangle_path(position: Point, width: float, height: float) -> Path:
    x = float(position.x)
    y = float(position.y)
    w = float(width)
    h = float(height)
    builder = PathBuilder()
    builder.move_to(x, y)
    builder.line_to(x + w, y)
    builder.line_to(x + w, y + h)
    builder.line_to(x, y + h)
    builder.close()
    try:
        return builder.finish()
    except PathConstructionError as exc:
        raise PathConstructionError(f"failed to build rectangle path: {exc}") from exc


def polygon_path(points: tuple[Point, ...]) -> Path | None:
    if not points:
        return None
    first, rest = points[0], points[1:]
    builder = PathBuilder()
    builder.move_to(first.x, first.y)
    for point in rest:
        builder.line_to(point.x, point.y)
    builder.close()
    try:
        return builder.finish()
    except PathConstructionError as exc:
        raise PathConstructionError(f"failed to build polygon path: {exc}") from exc


def build_path(shape: Shape) -> Path | None:
    """Geometric outline of ``shape``; ``None`` only for a polygon without points."""
    match shape:
        case Circle(position=position, radius=radius):
            return circle_path(position, radius)
        case Line(start=start, end=end):
            return line_path(start, end)
        case Rectangle(position=position, width=width, height=height):
            return rectangle_path(position, width, height)
        case Polygon(points=points):
            return polygon_path(points)
        case _:
            assert_never(shape)
