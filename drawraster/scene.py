from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib
from typing import Any, Callable, Mapping

from drawraster.errors import SceneValidationError
from drawraster.primitives import Circle, Color, DrawCommand, Line, Point, Polygon, Rectangle, Stroke, Text


@dataclass(frozen=True)
class Scene:
    width: int
    height: int
    commands: tuple[DrawCommand, ...]
    output: Path | None = None


def load_scene(path: str | Path) -> Scene:
    scene_path = Path(path)
    if not scene_path.exists():
        raise FileNotFoundError(f"scene file not found: {scene_path}")
    with scene_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise SceneValidationError(f"invalid scene file {scene_path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise SceneValidationError(f"scene file {scene_path} is not valid UTF-8: {exc}") from exc
    return parse_scene(raw, base_dir=scene_path.parent)


def parse_scene(raw: Mapping[str, Any], base_dir: Path | None = None) -> Scene:
    canvas = raw.get("canvas")
    if not isinstance(canvas, Mapping):
        raise SceneValidationError("scene requires a [canvas] table")
    width = _require_size(canvas.get("width"), "canvas.width")
    height = _require_size(canvas.get("height"), "canvas.height")
    output = _optional_output(canvas.get("output"), base_dir)
    commands_raw = raw.get("commands", [])
    if not isinstance(commands_raw, list):
        raise SceneValidationError("commands must be an array of tables")
    commands = tuple(
        parse_command(item, f"commands[{index}]") for index, item in enumerate(commands_raw)
    )
    return Scene(width=width, height=height, commands=commands, output=output)


def parse_command(raw: Any, where: str) -> DrawCommand:
    if not isinstance(raw, Mapping):
        raise SceneValidationError(f"{where} must be a table")
    kind = raw.get("type")
    if not isinstance(kind, str):
        raise SceneValidationError(f"{where}.type is required")
    parser = _COMMAND_PARSERS.get(kind.strip().lower())
    if parser is None:
        known = ", ".join(sorted(_COMMAND_PARSERS))
        raise SceneValidationError(f"{where}.type {kind!r} is not one of: {known}")
    return parser(raw, where)


def _parse_circle(raw: Mapping[str, Any], where: str) -> Circle:
    return Circle(
        position=parse_point(_require(raw, "position", where), f"{where}.position"),
        radius=_require_number(_require(raw, "radius", where), f"{where}.radius"),
        fill=parse_color(raw.get("fill"), f"{where}.fill"),
        stroke=parse_stroke(raw.get("stroke"), f"{where}.stroke"),
    )


def _parse_line(raw: Mapping[str, Any], where: str) -> Line:
    return Line(
        start=parse_point(_require(raw, "start", where), f"{where}.start"),
        end=parse_point(_require(raw, "end", where), f"{where}.end"),
        stroke=parse_stroke(raw.get("stroke"), f"{where}.stroke"),
    )


def _parse_rectangle(raw: Mapping[str, Any], where: str) -> Rectangle:
    return Rectangle(
        position=parse_point(_require(raw, "position", where), f"{where}.position"),
        width=_require_number(_require(raw, "width", where), f"{where}.width"),
        height=_require_number(_require(raw, "height", where), f"{where}.height"),
        fill=parse_color(raw.get("fill"), f"{where}.fill"),
        stroke=parse_stroke(raw.get("stroke"), f"{where}.stroke"),
    )


def _parse_polygon(raw: Mapping[str, Any], where: str) -> Polygon:
    points_raw = raw.get("points", [])
    if not isinstance(points_raw, list):
        raise SceneValidationError(f"{where}.points must be an array")
    return Polygon(
        points=tuple(parse_point(p, f"{where}.points[{i}]") for i, p in enumerate(points_raw)),
        fill=parse_color(raw.get("fill"), f"{where}.fill"),
        stroke=parse_stroke(raw.get("stroke"), f"{where}.stroke"),
    )


def _parse_text(raw: Mapping[str, Any], where: str) -> Text:
    content = _require(raw, "content", where)
    if not isinstance(content, str):
        raise SceneValidationError(f"{where}.content must be a string")
    return Text(
        position=parse_point(_require(raw, "position", where), f"{where}.position"),
        content=content,
        font_size=_require_number(raw.get("font_size", 16.0), f"{where}.font_size"),
        color=parse_color(raw.get("color"), f"{where}.color"),
    )


_COMMAND_PARSERS: dict[str, Callable[[Mapping[str, Any], str], DrawCommand]] = {
    "circle": _parse_circle,
    "line": _parse_line,
    "polygon": _parse_polygon,
    "rectangle": _parse_rectangle,
    "text": _parse_text,
}


def parse_point(value: Any, where: str) -> Point:
    if isinstance(value, Mapping):
        return Point(
            x=_require_number(value.get("x"), f"{where}.x"),
            y=_require_number(value.get("y"), f"{where}.y"),
        )
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return Point(x=_require_number(value[0], f"{where}[0]"), y=_require_number(value[1], f"{where}[1]"))
    raise SceneValidationError(f"{where} must be [x, y] or {{x, y}}")


def parse_stroke(value: Any, where: str) -> Stroke | None:
    """``true`` is the default stroke; a table may set ``color = "none"`` for a colourless stroke."""
    if value is None or value is False:
        return None
    if value is True:
        return Stroke()
    if not isinstance(value, Mapping):
        raise SceneValidationError(f"{where} must be a table or boolean")
    color = parse_color(value["color"], f"{where}.color") if "color" in value else Color()
    width = _require_number(value.get("width", 2.0), f"{where}.width")
    return Stroke(color=color, width=width)


def parse_color(value: Any, where: str) -> Color | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return _color_from_channels(list(value), where)
    if not isinstance(value, str):
        raise SceneValidationError(f"{where} must be a colour string or channel array")
    text = value.strip().lower()
    if text == "none":
        return None
    if text.startswith("#"):
        return _color_from_hex(text[1:], where)
    if text.startswith("rgb"):
        open_at = text.find("(")
        close_at = text.find(")")
        if open_at < 0 or close_at < open_at:
            raise SceneValidationError(f"{where} has malformed colour {value!r}")
        parts = [p.strip() for p in text[open_at + 1 : close_at].split(",")]
        try:
            channels = [int(p) for p in parts]
        except ValueError as exc:
            raise SceneValidationError(f"{where} has malformed colour {value!r}") from exc
        return _color_from_channels(channels, where)
    raise SceneValidationError(f"{where} has unsupported colour {value!r}")


def _color_from_hex(hex_value: str, where: str) -> Color:
    if len(hex_value) in (3, 4):
        hex_value = "".join(ch * 2 for ch in hex_value)
    if len(hex_value) not in (6, 8):
        raise SceneValidationError(f"{where} has malformed hex colour '#{hex_value}'")
    try:
        channels = [int(hex_value[i : i + 2], 16) for i in range(0, len(hex_value), 2)]
    except ValueError as exc:
        raise SceneValidationError(f"{where} has malformed hex colour '#{hex_value}'") from exc
    return _color_from_channels(channels, where)


def _color_from_channels(channels: list[Any], where: str) -> Color:
    if len(channels) not in (3, 4):
        raise SceneValidationError(f"{where} must have 3 or 4 channels")
    for channel in channels:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise SceneValidationError(f"{where} channels must be integers in [0, 255]")
    if len(channels) == 3:
        channels = [*channels, 255]
    return Color(*channels)


def _require(raw: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return raw[key]
    except KeyError as exc:
        raise SceneValidationError(f"{where}.{key} is required") from exc


def _require_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneValidationError(f"{where} must be a number")
    return float(value)


def _require_size(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise SceneValidationError(f"{where} must be a positive integer")
    return value


def _optional_output(value: Any, base_dir: Path | None) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise SceneValidationError("canvas.output must be a non-empty string")
    output = Path(value)
    if not output.is_absolute() and base_dir is not None:
        output = base_dir / output
    return output
