from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable

import numpy as np

from .path import Close, CubicTo, LineTo, MoveTo, Path
from .style import StrokeStyle


# Maximum distance in pixels between a flattened cubic and its polyline.
FLATNESS_PX = 0.1
MAX_SUBDIVISION_DEPTH = 16
_EPSILON = 1e-9

BEZIER3_SPLIT = np.array(
    [
        [1, 0, 0, 0],
        [0.5, 0.5, 0, 0],
        [0.25, 0.5, 0.25, 0],
        [0.125, 0.375, 0.375, 0.125],
        [0.125, 0.375, 0.375, 0.125],
        [0, 0.25, 0.5, 0.25],
        [0, 0, 0.5, 0.5],
        [0, 0, 0, 1],
    ],
    dtype=np.float64,
)


@dataclass(frozen=True)
class Polyline:
    points: np.ndarray
    closed: bool


@dataclass(frozen=True)
class CoverageMask:
    """Per-pixel coverage in [0, 1] placed at canvas offset (x, y)."""

    x: int
    y: int
    alpha: np.ndarray

    @property
    def width(self) -> int:
        return int(self.alpha.shape[1])

    @property
    def height(self) -> int:
        return int(self.alpha.shape[0])


def flatten_path(path: Path, tolerance: float = FLATNESS_PX) -> list[Polyline]:
    polylines: list[Polyline] = []
    current: list[tuple[float, float]] = []
    for seg in path:
        if isinstance(seg, MoveTo):
            _emit(polylines, current, closed=False)
            current = [(seg.point.x, seg.point.y)]
        elif isinstance(seg, LineTo):
            current.append((seg.point.x, seg.point.y))
        elif isinstance(seg, CubicTo):
            curve = np.array(
                [
                    current[-1],
                    (seg.control1.x, seg.control1.y),
                    (seg.control2.x, seg.control2.y),
                    (seg.point.x, seg.point.y),
                ],
                dtype=np.float64,
            )
            current.extend((float(x), float(y)) for x, y in flatten_cubic(curve, tolerance))
        elif isinstance(seg, Close):
            _emit(polylines, current, closed=True)
            current = []
    _emit(polylines, current, closed=False)
    return polylines


def _emit(polylines: list[Polyline], current: list[tuple[float, float]], *, closed: bool) -> None:
    if current:
        polylines.append(Polyline(np.asarray(current, dtype=np.float64).reshape(-1, 2), closed))


def flatten_cubic(curve: np.ndarray, tolerance: float = FLATNESS_PX) -> np.ndarray:
    """Points after ``curve[0]`` of a polyline within ``tolerance`` of the cubic.

    Flatness bound from "Linear Approximation of Bezier Curve":
    ``f^2 <= 1/16 (max(ux^2, vx^2) + max(uy^2, vy^2))``.
    """
    limit = 16.0 * tolerance * tolerance
    out: list[np.ndarray] = []
    stack = [(curve, 0)]
    while stack:
        piece, depth = stack.pop()
        if depth >= MAX_SUBDIVISION_DEPTH or _cubic_flatness(piece) <= limit:
            out.append(piece[3])
            continue
        left, right = (BEZIER3_SPLIT @ piece).reshape(2, 4, 2)
        stack.append((right, depth + 1))
        stack.append((left, depth + 1))
    return np.asarray(out, dtype=np.float64).reshape(-1, 2)


def _cubic_flatness(curve: np.ndarray) -> float:
    u = 3.0 * curve[1] - 2.0 * curve[0] - curve[3]
    v = 3.0 * curve[2] - curve[0] - 2.0 * curve[3]
    return float(np.maximum(u * u, v * v).sum())


def rasterize_fill(polylines: Iterable[Polyline], width: int, height: int) -> CoverageMask | None:
    """Anti-aliased non-zero coverage of the closed rings, clipped to the canvas.

    Signed area accumulation per scanline, after font-rs' rasterizer. Open
    polylines are closed implicitly.
    """
    rings = [line.points for line in polylines if len(line.points) >= 2]
    if not rings:
        return None
    stacked = np.concatenate(rings)
    min_x = max(0, math.floor(float(stacked[:, 0].min())))
    min_y = max(0, math.floor(float(stacked[:, 1].min())))
    max_x = min(width, math.ceil(float(stacked[:, 0].max())) + 1)
    max_y = min(height, math.ceil(float(stacked[:, 1].max())))
    if max_x <= min_x or max_y <= min_y:
        return None

    trace = np.zeros((max_y - min_y, max_x - min_x), dtype=np.float64)
    offset = np.array([min_x, min_y], dtype=np.float64)
    for ring in rings:
        shifted = ring - offset
        pts = np.vstack([shifted, shifted[:1]]).tolist()
        for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
            _accumulate_edge(trace, x0, y0, x1, y1)

    alpha = np.abs(np.cumsum(trace, axis=1))
    np.clip(alpha, 0.0, 1.0, out=alpha)
    alpha[alpha < 1e-6] = 0.0
    if not alpha.any():
        return None
    return CoverageMask(x=min_x, y=min_y, alpha=alpha)


def _accumulate_edge(trace: np.ndarray, x0: float, y0: float, x1: float, y1: float) -> None:
    height = trace.shape[0]
    if y0 == y1:
        return
    if y0 < y1:
        direction = 1.0
    else:
        direction = -1.0
        x0, y0, x1, y1 = x1, y1, x0, y0
    dxdy = (x1 - x0) / (y1 - y0)
    x_next = x0
    if y0 < 0.0:
        x_next -= y0 * dxdy
    for row in range(int(max(0.0, y0)), min(height, math.ceil(y1))):
        x = x_next
        dy = min(row + 1.0, y1) - max(float(row), y0)
        d = direction * dy
        x_next = x + dxdy * dy
        lo, hi = (x, x_next) if x < x_next else (x_next, x)
        lo_floor = math.floor(lo)
        lo_i = int(lo_floor)
        hi_i = int(math.ceil(hi))
        cells = trace[row]
        if hi_i <= lo_i + 1:
            mid = 0.5 * (x + x_next) - lo_floor
            _deposit(cells, lo_i, d * (1.0 - mid))
            _deposit(cells, lo_i + 1, d * mid)
            continue
        s = 1.0 / (hi - lo)
        lo_frac = lo - lo_floor
        hi_frac = hi - hi_i + 1.0
        a0 = 0.5 * s * (1.0 - lo_frac) ** 2
        am = 0.5 * s * hi_frac**2
        _deposit(cells, lo_i, d * a0)
        if hi_i == lo_i + 2:
            _deposit(cells, lo_i + 1, d * (1.0 - a0 - am))
        else:
            a1 = s * (1.5 - lo_frac)
            _deposit(cells, lo_i + 1, d * (a1 - a0))
            _deposit_span(cells, lo_i + 2, hi_i - 1, d * s)
            a2 = a1 + (hi_i - lo_i - 3) * s
            _deposit(cells, hi_i - 1, d * (1.0 - a2 - am))
        _deposit(cells, hi_i, d * am)


def _deposit(cells: np.ndarray, index: int, value: float) -> None:
    # Coverage left of the clip region still counts toward the winding of column 0.
    if index >= cells.shape[0]:
        return
    cells[index if index > 0 else 0] += value


def _deposit_span(cells: np.ndarray, start: int, stop: int, value: float) -> None:
    if stop <= start:
        return
    if start < 0:
        cells[0] += value * (min(stop, 0) - start)
        start = 0
    stop = min(stop, cells.shape[0])
    if stop > start:
        cells[start:stop] += value


def stroke_outline(polylines: Iterable[Polyline], style: StrokeStyle) -> list[Polyline]:
    """Rings covering the stroke band: one quad per segment plus a join per vertex.

    Butt caps, miter joins falling back to bevel past the miter limit. Every
    ring is wound the same way so that non-zero filling yields their union.
    """
    half = style.effective_width / 2.0
    rings: list[np.ndarray] = []
    for line in polylines:
        pts = _distinct_points(line.points, closed=line.closed)
        if len(pts) < 2:
            continue
        segments = list(zip(pts[:-1], pts[1:]))
        if line.closed and len(pts) > 2:
            segments.append((pts[-1], pts[0]))
        for p0, p1 in segments:
            rings.append(_segment_quad(p0, p1, half))
        if line.closed and len(pts) > 2:
            pairs = [(segments[i], segments[(i + 1) % len(segments)]) for i in range(len(segments))]
        else:
            pairs = list(zip(segments[:-1], segments[1:]))
        for incoming, outgoing in pairs:
            join = _join(incoming, outgoing, half, style.miter_limit)
            if join is not None:
                rings.append(join)
    out: list[Polyline] = []
    for ring in rings:
        oriented = _orient(ring)
        if oriented is not None:
            out.append(Polyline(oriented, True))
    return out


def _distinct_points(points: np.ndarray, *, closed: bool) -> np.ndarray:
    if len(points) == 0:
        return points
    keep = [points[0]]
    for point in points[1:]:
        if math.hypot(point[0] - keep[-1][0], point[1] - keep[-1][1]) > _EPSILON:
            keep.append(point)
    if closed and len(keep) > 1:
        if math.hypot(keep[-1][0] - keep[0][0], keep[-1][1] - keep[0][1]) <= _EPSILON:
            keep.pop()
    return np.asarray(keep, dtype=np.float64).reshape(-1, 2)


def _unit_normal(p0: np.ndarray, p1: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    delta = p1 - p0
    direction = delta / math.hypot(delta[0], delta[1])
    normal = np.array([-direction[1], direction[0]])
    return direction, normal


def _segment_quad(p0: np.ndarray, p1: np.ndarray, half: float) -> np.ndarray:
    _, normal = _unit_normal(p0, p1)
    offset = normal * half
    return np.array([p0 + offset, p1 + offset, p1 - offset, p0 - offset])


def _join(
    incoming: tuple[np.ndarray, np.ndarray],
    outgoing: tuple[np.ndarray, np.ndarray],
    half: float,
    miter_limit: float,
) -> np.ndarray | None:
    vertex = incoming[1]
    d0, n0 = _unit_normal(*incoming)
    d1, n1 = _unit_normal(*outgoing)
    cross = d0[0] * d1[1] - d0[1] * d1[0]
    dot = float(d0 @ d1)
    if abs(cross) < _EPSILON and dot > 0.0:
        return None
    side = -1.0 if cross > 0.0 else 1.0
    a = vertex + side * half * n0
    b = vertex + side * half * n1
    if dot > -1.0 + _EPSILON:
        # miter length / stroke width = 1 / sin(interior / 2)
        ratio = 1.0 / math.sqrt((1.0 + dot) / 2.0)
        if ratio <= miter_limit:
            tip = vertex + side * half * (n0 + n1) / (1.0 + dot)
            return np.array([vertex, a, tip, b])
    return np.array([vertex, a, b])


def _orient(ring: np.ndarray) -> np.ndarray | None:
    x = ring[:, 0]
    y = ring[:, 1]
    area = 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))
    if abs(area) < 1e-12:
        return None
    return ring if area > 0.0 else ring[::-1].copy()
