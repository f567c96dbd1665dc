"""Viewer configuration - dataclass, env vars, and CLI overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_dotenv() -> None:
    # config.py lives in src/defectview/ -> 2 levels up = project root
    base = Path(__file__).resolve().parent.parent.parent
    load_dotenv(base / ".env")
    load_dotenv(Path.cwd() / ".env")


_load_dotenv()


def _env(key: str, default: str) -> str:
    """Read env var with default."""
    return os.environ.get(key, default)


@dataclass(frozen=True)
class ViewerConfig:
    """Configuration for loading and displaying one annotated image."""

    # Base URL serving /api/annotations and /api/image (empty = local files)
    source_url: str = ""

    # Local files (used when source_url is empty)
    annotations_path: str = ""
    image_path: str = ""

    # HTTP timeout for source_url requests
    request_timeout_s: float = 10.0

    # OpenCV window title for `defectview view`
    window_name: str = "Annotated Image Viewer"

    # Damage polygon fill opacity, normal and hovered
    normal_opacity: float = 0.4
    hover_opacity: float = 0.7

    log_level: str = "INFO"


def load_config(
    *,
    source_url: str | None = None,
    annotations_path: str | None = None,
    image_path: str | None = None,
    request_timeout_s: float | None = None,
    window_name: str | None = None,
    normal_opacity: float | None = None,
    hover_opacity: float | None = None,
    log_level: str | None = None,
) -> ViewerConfig:
    """Load config. CLI/args override env vars."""
    def _str(k: str, d: str, override: str | None) -> str:
        return override if override is not None else _env(k, d)

    def _float(k: str, d: float, override: float | None) -> float:
        if override is not None:
            return override
        return float(_env(k, str(d)))

    return ViewerConfig(
        source_url=_str("DEFECTVIEW_SOURCE_URL", "", source_url).rstrip("/"),
        annotations_path=_str("DEFECTVIEW_ANNOTATIONS", "", annotations_path),
        image_path=_str("DEFECTVIEW_IMAGE", "", image_path),
        request_timeout_s=_float("DEFECTVIEW_REQUEST_TIMEOUT_S", 10.0, request_timeout_s),
        window_name=_str("DEFECTVIEW_WINDOW_NAME", "Annotated Image Viewer", window_name),
        normal_opacity=_float("DEFECTVIEW_NORMAL_OPACITY", 0.4, normal_opacity),
        hover_opacity=_float("DEFECTVIEW_HOVER_OPACITY", 0.7, hover_opacity),
        log_level=_str("DEFECTVIEW_LOG_LEVEL", "INFO", log_level),
    )
