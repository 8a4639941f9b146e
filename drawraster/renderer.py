from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from pathlib import Path
from typing import Sequence

from drawraster.errors import OutputEncodingError
from drawraster.output import ImageFileSink, OutputSink
from drawraster.primitives import DrawCommand
from drawraster.render.canvas import Canvas, RasterFrame
from drawraster.render.compositor import apply_command

LOGGER = logging.getLogger(__name__)


class Renderer(ABC):
    @abstractmethod
    def render(self, commands: Sequence[DrawCommand]) -> None:
        raise NotImplementedError


class RasterRenderer(Renderer):
    """Rasterizes draw commands onto a white canvas and writes one image per call."""

    def __init__(
        self,
        width: int,
        height: int,
        destination: str | Path,
        *,
        sink: OutputSink | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.destination = destination
        self._sink = sink or ImageFileSink()

    def compose(self, commands: Sequence[DrawCommand]) -> RasterFrame:
        canvas = Canvas(self.width, self.height)
        for index, command in enumerate(commands):
            LOGGER.debug("command %d: %s", index, type(command).__name__)
            apply_command(canvas, command)
        return canvas.finalize()

    def render(self, commands: Sequence[DrawCommand]) -> None:
        LOGGER.debug(
            "rendering %d commands at %dx%d to %s", len(commands), self.width, self.height, self.destination
        )
        frame = self.compose(commands)
        try:
            self._sink.write(frame, self.destination)
        except Exception as exc:  # noqa: BLE001
            raise OutputEncodingError(str(exc) or type(exc).__name__) from exc
        LOGGER.debug("rendered %s", self.destination)
