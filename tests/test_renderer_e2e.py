from __future__ import annotations

import math
from pathlib import Path
import unittest

import numpy as np

from drawraster.demo import DEMO_HEIGHT, DEMO_WIDTH, demo_commands
from drawraster.errors import (
    CanvasAllocationError,
    OutputEncodingError,
    PathConstructionError,
    StrokeConstructionError,
)
from drawraster.output.base import OutputSink
from drawraster.primitives import Circle, Color, Line, Point, Polygon, Rectangle, Stroke, Text
from drawraster.render.canvas import Canvas, RasterFrame
from drawraster.render.compositor import apply_command
from drawraster.renderer import RasterRenderer

RED = Color(255, 0, 0, 255)
BLUE = Color(0, 0, 255, 255)
GREEN = Color(0, 255, 0, 255)
BLACK = Color(0, 0, 0, 255)


class _RecordingSink(OutputSink):
    def __init__(self) -> None:
        self.written: list[tuple[RasterFrame, str | Path]] = []

    def write(self, frame: RasterFrame, destination: str | Path) -> None:
        self.written.append((frame, destination))


class _FailingSink(OutputSink):
    def write(self, frame: RasterFrame, destination: str | Path) -> None:
        raise OSError(f"cannot write {destination}")


def _render(commands, width: int = 10, height: int = 10) -> np.ndarray:
    sink = _RecordingSink()
    RasterRenderer(width, height, "out.png", sink=sink).render(commands)
    return sink.written[0][0].rgba


def _blank(width: int = 10, height: int = 10) -> np.ndarray:
    return np.full((height, width, 4), 255, dtype=np.uint8)


class RendererE2ETests(unittest.TestCase):
    def test_full_red_rectangle_overwrites_background(self) -> None:
        pixels = _render([Rectangle(position=Point(0.0, 0.0), width=10.0, height=10.0, fill=RED)])
        self.assertTrue(np.all(pixels == [255, 0, 0, 255]))

    def test_later_commands_draw_on_top(self) -> None:
        pixels = _render(
            [
                Rectangle(position=Point(0.0, 0.0), width=10.0, height=10.0, fill=BLUE),
                Rectangle(position=Point(0.0, 0.0), width=5.0, height=5.0, fill=RED),
            ]
        )
        self.assertEqual(pixels[0, 0].tolist(), [255, 0, 0, 255])
        self.assertEqual(pixels[7, 7].tolist(), [0, 0, 255, 255])

    def test_overlap_shows_second_rectangle(self) -> None:
        pixels = _render(
            [
                Rectangle(position=Point(0.0, 0.0), width=6.0, height=6.0, fill=GREEN),
                Rectangle(position=Point(3.0, 3.0), width=6.0, height=6.0, fill=BLUE),
            ]
        )
        self.assertTrue(np.all(pixels[3:6, 3:6] == [0, 0, 255, 255]))
        self.assertEqual(pixels[1, 1].tolist(), [0, 255, 0, 255])

    def test_text_alone_leaves_canvas_white(self) -> None:
        with self.assertLogs("drawraster.render.compositor", level="WARNING") as logs:
            pixels = _render([Text(position=Point(2.0, 3.0), content="hello", font_size=12.0, color=BLACK)])
        np.testing.assert_array_equal(pixels, _blank())
        self.assertIn("'hello'", logs.output[0])
        self.assertIn("(2.0, 3.0)", logs.output[0])

    def test_unstyled_commands_are_no_ops(self) -> None:
        commands = [
            Circle(position=Point(5.0, 5.0), radius=3.0),
            Line(start=Point(0.0, 0.0), end=Point(9.0, 9.0)),
            Rectangle(position=Point(1.0, 1.0), width=4.0, height=4.0),
            Polygon(points=(Point(0.0, 0.0), Point(9.0, 0.0), Point(0.0, 9.0))),
        ]
        np.testing.assert_array_equal(_render(commands), _blank())

    def test_empty_polygon_is_a_no_op(self) -> None:
        pixels = _render([Polygon(points=(), fill=RED, stroke=Stroke())])
        np.testing.assert_array_equal(pixels, _blank())

    def test_colourless_stroke_matches_missing_stroke(self) -> None:
        circle = dict(position=Point(5.0, 5.0), radius=3.0, fill=RED)
        with_colourless = _render([Circle(**circle, stroke=Stroke(color=None, width=5.0))])
        without = _render([Circle(**circle, stroke=None)])
        np.testing.assert_array_equal(with_colourless, without)

    def test_stroke_is_drawn_over_fill(self) -> None:
        pixels = _render(
            [
                Rectangle(
                    position=Point(2.0, 2.0),
                    width=6.0,
                    height=6.0,
                    fill=RED,
                    stroke=Stroke(color=BLACK, width=2.0),
                )
            ]
        )
        self.assertEqual(pixels[4, 2].tolist(), [0, 0, 0, 255])
        self.assertEqual(pixels[5, 5].tolist(), [255, 0, 0, 255])

    def test_line_stroke_covers_its_band(self) -> None:
        pixels = _render([Line(start=Point(0.0, 5.0), end=Point(10.0, 5.0), stroke=Stroke(color=BLACK, width=2.0))])
        self.assertTrue(np.all(pixels[4:6] == [0, 0, 0, 255]))
        self.assertTrue(np.all(pixels[3] == 255))
        self.assertTrue(np.all(pixels[6] == 255))

    def test_circle_stroke_reaches_cardinal_points(self) -> None:
        pixels = _render(
            [Circle(position=Point(10.0, 10.0), radius=6.0, fill=RED, stroke=Stroke(color=BLACK, width=2.0))],
            width=20,
            height=20,
        )
        for x, y in ((4, 10), (15, 10), (10, 4), (10, 15)):
            with self.subTest(x=x, y=y):
                self.assertLess(int(pixels[y, x, 0]), 64)
        self.assertEqual(pixels[10, 10].tolist(), [255, 0, 0, 255])
        self.assertEqual(pixels[0, 0].tolist(), [255, 255, 255, 255])

    def test_rendering_is_deterministic(self) -> None:
        renderer = RasterRenderer(DEMO_WIDTH, DEMO_HEIGHT, "unused.png", sink=_RecordingSink())
        first = renderer.compose(demo_commands())
        second = renderer.compose(demo_commands())
        np.testing.assert_array_equal(first.rgba, second.rgba)
        self.assertFalse(np.all(first.rgba == 255))

    def test_sink_receives_frame_and_destination(self) -> None:
        sink = _RecordingSink()
        RasterRenderer(3, 2, "target.png", sink=sink).render([])
        self.assertEqual(len(sink.written), 1)
        frame, destination = sink.written[0]
        self.assertEqual(destination, "target.png")
        self.assertEqual((frame.width, frame.height), (3, 2))
        np.testing.assert_array_equal(frame.rgba, _blank(3, 2))


class RendererFailureTests(unittest.TestCase):
    def test_sink_failure_is_output_encoding_error(self) -> None:
        renderer = RasterRenderer(4, 4, "nowhere/out.png", sink=_FailingSink())
        with self.assertRaises(OutputEncodingError) as ctx:
            renderer.render([])
        self.assertIn("cannot write nowhere/out.png", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_invalid_canvas_size_aborts_before_commands(self) -> None:
        sink = _RecordingSink()
        with self.assertRaises(CanvasAllocationError):
            RasterRenderer(0, 10, "out.png", sink=sink).render([Text(position=Point(), content="x")])
        self.assertEqual(sink.written, [])

    def test_path_failure_aborts_without_output(self) -> None:
        sink = _RecordingSink()
        commands = [
            Rectangle(position=Point(0.0, 0.0), width=10.0, height=10.0, fill=RED),
            Circle(position=Point(math.nan, 0.0), radius=2.0, fill=RED),
        ]
        with self.assertRaises(PathConstructionError):
            RasterRenderer(10, 10, "out.png", sink=sink).render(commands)
        self.assertEqual(sink.written, [])

    def test_stroke_failure_aborts_without_output(self) -> None:
        sink = _RecordingSink()
        commands = [Line(start=Point(0.0, 0.0), end=Point(5.0, 5.0), stroke=Stroke(color=BLACK, width=-2.0))]
        with self.assertRaises(StrokeConstructionError):
            RasterRenderer(10, 10, "out.png", sink=sink).render(commands)
        self.assertEqual(sink.written, [])

    def test_unknown_command_is_rejected(self) -> None:
        with self.assertRaises(AssertionError):
            apply_command(Canvas(2, 2), object())  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
