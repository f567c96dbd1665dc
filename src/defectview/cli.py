"""
CLI entry point for the defect annotation viewer.

Usage:
    python -m defectview.cli view --annotations ann.json --image bridge.jpg
    python -m defectview.cli view --url http://localhost:5000
    python -m defectview.cli render --annotations ann.json --image bridge.jpg --out out.png --width 1296
    python -m defectview.cli probe 30 30 --annotations ann.json --image bridge.jpg --width 1296 --height 972
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import cv2

from .annotations.parse import frame_from_payload, frame_to_payload
from .annotations.types import AnnotationFrame, DamageHover, HoveredAnnotation, OpenWorldHover
from .config import ViewerConfig, load_config
from .errors import DefectViewError
from .io.source import AnnotationSource
from .overlay.controller import AnnotationOverlay, PointerEvent
from .overlay.renderer import RenderStyle
from .tooltip import format_tooltip
from .utils.logging import setup_logging
from .viewer import OverlayWindow, compose_view

logger = logging.getLogger(__name__)


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--url", type=str, default=None,
                   help="Base URL serving /api/annotations and /api/image. Overrides local files.")
    p.add_argument("--annotations", type=str, default=None, help="Annotation payload JSON file.")
    p.add_argument("--image", type=str, default=None, help="Image file.")
    p.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds. Default: 10")
    p.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level. Default: INFO",
    )


def _add_size_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--width", type=int, default=None,
                   help="Displayed width in pixels. Default: image width, or scaled by --height.")
    p.add_argument("--height", type=int, default=None,
                   help="Displayed height in pixels. Default: image height, or scaled by --width.")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="defectview",
        description="Overlay defect annotations on an inspection image and inspect them by hover",
    )
    sub = p.add_subparsers(dest="command", required=True)

    view = sub.add_parser("view", help="Open an interactive window (hover for tooltips, q/ESC to quit).")
    _add_source_args(view)

    render = sub.add_parser("render", help="Render the overlay onto the image and save it.")
    _add_source_args(render)
    _add_size_args(render)
    render.add_argument("--out", type=str, required=True, help="Output image path (e.g. overlay.png).")
    render.add_argument("--hover", type=float, nargs=2, metavar=("X", "Y"), default=None,
                        help="Apply a pointer move at this display point before rendering.")
    render.add_argument("--save-payload", type=str, default=None,
                        help="Also write the parsed annotation payload (normalized JSON) to this path.")

    probe = sub.add_parser("probe", help="Hit-test one display point and print the hovered annotation.")
    _add_source_args(probe)
    _add_size_args(probe)
    probe.add_argument("x", type=float)
    probe.add_argument("y", type=float)

    return p.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> ViewerConfig:
    return load_config(
        source_url=args.url,
        annotations_path=args.annotations,
        image_path=args.image,
        request_timeout_s=args.timeout,
        log_level=args.log_level,
    )


def display_size(image_shape: tuple[int, ...], width: int | None, height: int | None) -> tuple[int, int]:
    """Resolve the displayed size, keeping the image aspect ratio when only one side is given."""
    h, w = image_shape[:2]
    if width is not None and height is not None:
        return width, height
    if width is not None:
        return width, round(h * width / w) if w else 0
    if height is not None:
        return round(w * height / h) if h else 0, height
    return w, h


def hover_to_dict(hovered: HoveredAnnotation) -> dict[str, Any] | None:
    """JSON-friendly descriptor (mask identity omitted)."""
    if isinstance(hovered, OpenWorldHover):
        return {"type": "open_world", "label": hovered.label}
    if isinstance(hovered, DamageHover):
        return {
            "type": "damage",
            "damage_class": hovered.damage_class,
            "severity": hovered.severity,
            "confidence_score": hovered.confidence_score,
            "structural_class": hovered.structural_class,
        }
    return None


def _style(config: ViewerConfig) -> RenderStyle:
    return RenderStyle(damage_opacity=config.normal_opacity, damage_hover_opacity=config.hover_opacity)


def _overlay(frame: AnnotationFrame, config: ViewerConfig) -> AnnotationOverlay:
    return AnnotationOverlay(frame, style=_style(config))


def cmd_view(config: ViewerConfig) -> int:
    image, payload = AnnotationSource.from_config(config).load()
    frame = frame_from_payload(payload)
    OverlayWindow(image, frame, window_name=config.window_name, style=_style(config)).run()
    return 0


def cmd_render(config: ViewerConfig, args: argparse.Namespace) -> int:
    image, payload = AnnotationSource.from_config(config).load()
    frame = frame_from_payload(payload)
    if args.save_payload:
        payload_path = Path(args.save_payload)
        payload_path.parent.mkdir(parents=True, exist_ok=True)
        payload_path.write_text(json.dumps(frame_to_payload(frame), indent=2), encoding="utf-8")
        logger.info("Saved normalized payload to %s", payload_path)
    overlay = _overlay(frame, config)
    overlay.on_load(*display_size(image.shape, args.width, args.height))
    if args.hover is not None:
        overlay.on_pointer_move(PointerEvent(*args.hover))
    out = compose_view(image, overlay)
    path = Path(args.out)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), out):
        logger.error("Failed to write %s", path)
        return 1
    logger.info("Wrote %s (%dx%d)", path, out.shape[1], out.shape[0])
    print(path)
    return 0


def cmd_probe(config: ViewerConfig, args: argparse.Namespace) -> int:
    image, payload = AnnotationSource.from_config(config).load()
    overlay = _overlay(frame_from_payload(payload), config)
    overlay.on_load(*display_size(image.shape, args.width, args.height))
    hovered = overlay.on_pointer_move(PointerEvent(args.x, args.y))
    print(json.dumps({"hovered": hover_to_dict(hovered), "tooltip": format_tooltip(hovered)}, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = _config_from_args(args)
    setup_logging(config.log_level)

    try:
        if args.command == "view":
            return cmd_view(config)
        if args.command == "render":
            return cmd_render(config, args)
        return cmd_probe(config, args)
    except DefectViewError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
