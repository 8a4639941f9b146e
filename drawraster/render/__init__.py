from .canvas import BACKGROUND, Canvas, CanvasState, RasterFrame
from .compositor import apply_command
from .path import (
    CIRCLE_KAPPA,
    Close,
    CubicTo,
    LineTo,
    MoveTo,
    Path,
    PathBuilder,
    PathSegment,
    build_path,
)
from .raster import CoverageMask, Polyline, flatten_path, rasterize_fill, stroke_outline
from .style import Paint, StrokeStyle, resolve_fill, resolve_stroke

__all__ = [
    "BACKGROUND",
    "CIRCLE_KAPPA",
    "Canvas",
    "CanvasState",
    "Close",
    "CoverageMask",
    "CubicTo",
    "LineTo",
    "MoveTo",
    "Paint",
    "Path",
    "PathBuilder",
    "PathSegment",
    "Polyline",
    "RasterFrame",
    "StrokeStyle",
    "apply_command",
    "build_path",
    "flatten_path",
    "rasterize_fill",
    "resolve_fill",
    "resolve_stroke",
    "stroke_outline",
]
