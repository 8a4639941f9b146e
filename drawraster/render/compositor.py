from __future__ import annotations

import logging
from typing import assert_never

from drawraster.primitives import Circle, Color, DrawCommand, Line, Polygon, Rectangle, Shape, Stroke, Text

from .canvas import Canvas
from .path import build_path
from .style import resolve_fill, resolve_stroke

LOGGER = logging.getLogger(__name__)


def apply_command(canvas: Canvas, command: DrawCommand) -> None:
    match command:
        case Circle():
            _apply_shape(canvas, command, command.fill, command.stroke)
        case Line():
            _apply_shape(canvas, command, None, command.stroke)
        case Rectangle():
            _apply_shape(canvas, command, command.fill, command.stroke)
        case Polygon():
            _apply_shape(canvas, command, command.fill, command.stroke)
        case Text():
            _report_text(command)
        case _:
            assert_never(command)


def _apply_shape(canvas: Canvas, shape: Shape, fill: Color | None, stroke: Stroke | None) -> None:
    path = build_path(shape)
    if path is None:
        LOGGER.debug("skipping %s without points", type(shape).__name__)
        return
    fill_paint = resolve_fill(fill)
    resolved_stroke = resolve_stroke(stroke)
    if fill_paint is not None:
        canvas.fill_path(path, fill_paint)
    if resolved_stroke is not None:
        paint, style = resolved_stroke
        canvas.stroke_path(path, paint, style)


def _report_text(text: Text) -> None:
    LOGGER.warning(
        "text rendering not implemented: %r at (%s, %s)",
        text.content,
        text.position.x,
        text.position.y,
    )
