from __future__ import annotations

from drawraster.primitives import Circle, Color, DrawCommand, Line, Point, Polygon, Rectangle, Stroke


DEMO_WIDTH = 500
DEMO_HEIGHT = 250


def demo_commands() -> list[DrawCommand]:
    return [
        Circle(
            position=Point(100.0, 100.0),
            radius=50.0,
            fill=Color(255, 0, 0, 255),
            stroke=Stroke(color=Color(0, 0, 0, 255), width=2.0),
        ),
        Rectangle(
            position=Point(200.0, 50.0),
            width=100.0,
            height=80.0,
            fill=Color(0, 0, 255, 255),
        ),
        Polygon(
            points=(Point(350.0, 150.0), Point(400.0, 50.0), Point(450.0, 150.0)),
            fill=Color(0, 255, 0, 200),
            stroke=Stroke(color=Color(0, 128, 0, 255), width=3.0),
        ),
        Line(
            start=Point(50.0, 200.0),
            end=Point(450.0, 200.0),
            stroke=Stroke(color=Color(0, 0, 0, 255), width=4.0),
        ),
    ]
