from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import numbers

import numpy as np

from drawraster.errors import CanvasAllocationError
from drawraster.primitives import WHITE

from .path import Path
from .raster import CoverageMask, flatten_path, rasterize_fill, stroke_outline
from .style import Paint, StrokeStyle


BACKGROUND = WHITE


class CanvasState(Enum):
    CREATED = "created"
    COMPOSITING = "compositing"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class RasterFrame:
    width: int
    height: int
    rgba: np.ndarray


class Canvas:
    """Single-pass RGBA8 pixmap: opaque white, composited in call order, then finalized."""

    def __init__(self, width: int, height: int) -> None:
        if not _is_positive_int(width) or not _is_positive_int(height):
            raise CanvasAllocationError(f"canvas size must be positive integers, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        try:
            pixels = np.empty((self.height, self.width, 4), dtype=np.uint8)
        except (MemoryError, ValueError) as exc:
            raise CanvasAllocationError(
                f"failed to allocate {self.width}x{self.height} canvas: {exc}"
            ) from exc
        pixels[:, :] = BACKGROUND.as_tuple()
        self._pixels = pixels
        self._state = CanvasState.CREATED

    @property
    def state(self) -> CanvasState:
        return self._state

    def read_snapshot(self) -> np.ndarray:
        return self._pixels.copy()

    def fill_path(self, path: Path, paint: Paint) -> None:
        self._begin_compositing()
        mask = rasterize_fill(flatten_path(path), self.width, self.height)
        if mask is not None:
            self._composite(mask, paint)

    def stroke_path(self, path: Path, paint: Paint, style: StrokeStyle) -> None:
        self._begin_compositing()
        outline = stroke_outline(flatten_path(path), style)
        mask = rasterize_fill(outline, self.width, self.height)
        if mask is not None:
            self._composite(mask, paint)

    def finalize(self) -> RasterFrame:
        if self._state is CanvasState.FINALIZED:
            raise RuntimeError("canvas already finalized")
        self._state = CanvasState.FINALIZED
        rgba = self._pixels
        rgba.flags.writeable = False
        return RasterFrame(width=self.width, height=self.height, rgba=rgba)

    def _begin_compositing(self) -> None:
        if self._state is CanvasState.FINALIZED:
            raise RuntimeError("canvas is finalized and can no longer be drawn on")
        self._state = CanvasState.COMPOSITING

    def _composite(self, mask: CoverageMask, paint: Paint) -> None:
        r, g, b, a = paint.color.as_tuple()
        if a == 0:
            return
        coverage = mask.alpha if paint.anti_alias else (mask.alpha >= 0.5).astype(np.float64)
        region = self._pixels[mask.y : mask.y + mask.height, mask.x : mask.x + mask.width]
        dst = region.astype(np.float64) / 255.0
        src_a = coverage * (a / 255.0)
        dst_a = dst[:, :, 3]
        keep = dst_a * (1.0 - src_a)
        out_a = src_a + keep
        safe_a = np.where(out_a > 0.0, out_a, 1.0)
        src_rgb = np.array([r, g, b], dtype=np.float64) / 255.0
        out_rgb = (src_rgb * src_a[:, :, None] + dst[:, :, :3] * keep[:, :, None]) / safe_a[:, :, None]
        region[:, :, :3] = np.clip(np.rint(out_rgb * 255.0), 0, 255).astype(np.uint8)
        region[:, :, 3] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)


def _is_positive_int(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and int(value) > 0
