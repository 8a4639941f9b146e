from .base import OutputSink
from .image_file import ImageFileSink, resolve_format

__all__ = ["ImageFileSink", "OutputSink", "resolve_format"]
