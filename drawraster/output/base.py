from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from drawraster.render.canvas import RasterFrame


class OutputSink(ABC):
    @abstractmethod
    def write(self, frame: RasterFrame, destination: str | Path) -> None:
        """Persist a finalized frame; raise on failure."""
        raise NotImplementedError
