from __future__ import annotations


class RenderError(RuntimeError):
    pass


class CanvasAllocationError(RenderError):
    pass


class PathConstructionError(RenderError):
    pass


class StrokeConstructionError(RenderError):
    pass


class OutputEncodingError(RenderError):
    pass


class SceneValidationError(ValueError):
    pass
