from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

from drawraster.demo import DEMO_HEIGHT, DEMO_WIDTH, demo_commands
from drawraster.errors import RenderError, SceneValidationError
from drawraster.renderer import RasterRenderer
from drawraster.scene import load_scene


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="drawraster")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a scene file (TOML) to an image.")
    render.add_argument("scene", type=Path)
    render.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Image path. Default: the scene's canvas.output, else the scene path with a .png suffix.",
    )

    demo = sub.add_parser("demo", help="Render the built-in demo scene.")
    demo.add_argument("--output", type=Path, default=Path("demo_output.png"))
    demo.add_argument("--width", type=int, default=DEMO_WIDTH)
    demo.add_argument("--height", type=int, default=DEMO_HEIGHT)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "render":
            scene = load_scene(args.scene)
            output = args.output or scene.output or args.scene.with_suffix(".png")
            RasterRenderer(scene.width, scene.height, output).render(scene.commands)
        else:
            output = args.output
            RasterRenderer(args.width, args.height, output).render(demo_commands())
    except (RenderError, SceneValidationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"rendered {output}")
    return 0
