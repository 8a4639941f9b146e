from .errors import (
    CanvasAllocationError,
    OutputEncodingError,
    PathConstructionError,
    RenderError,
    SceneValidationError,
    StrokeConstructionError,
)
from .primitives import Circle, Color, DrawCommand, Line, Point, Polygon, Rectangle, Shape, Stroke, Text
from .renderer import RasterRenderer, Renderer
from .scene import Scene, load_scene, parse_scene

__all__ = [
    "CanvasAllocationError",
    "Circle",
    "Color",
    "DrawCommand",
    "Line",
    "OutputEncodingError",
    "PathConstructionError",
    "Point",
    "Polygon",
    "RasterRenderer",
    "Rectangle",
    "RenderError",
    "Renderer",
    "Scene",
    "SceneValidationError",
    "Shape",
    "Stroke",
    "StrokeConstructionError",
    "Text",
    "load_scene",
    "parse_scene",
]
