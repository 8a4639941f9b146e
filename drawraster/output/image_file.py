from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
import tempfile

from PIL import Image

from drawraster.render.canvas import RasterFrame

from .base import OutputSink

LOGGER = logging.getLogger(__name__)
DEFAULT_FORMAT = "PNG"


class ImageFileSink(OutputSink):
    """Encodes frames with Pillow, format chosen by the destination suffix.

    The image is written next to the destination and moved into place once
    fully encoded, so a failed write never leaves a truncated file behind.
    """

    def write(self, frame: RasterFrame, destination: str | Path) -> None:
        path = Path(destination)
        fmt = resolve_format(path)
        image = Image.fromarray(frame.rgba)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                image.save(fh, format=fmt)
            os.chmod(tmp_name, _default_file_mode())
            os.replace(tmp_name, path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        LOGGER.debug("wrote %dx%d %s image to %s", frame.width, frame.height, fmt, path)


def resolve_format(path: Path) -> str:
    suffix = path.suffix.lower()
    if not suffix:
        return DEFAULT_FORMAT
    fmt = Image.registered_extensions().get(suffix)
    if fmt is None:
        raise ValueError(f"unsupported image format: {suffix!r}")
    return fmt


def _default_file_mode() -> int:
    # mkstemp creates 0600 files; give the image the mode a plain open() would.
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
