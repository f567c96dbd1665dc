"""Annotation payload + image source: local files or an HTTP server (/api/annotations, /api/image)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import cv2
import numpy as np
import requests

from ..config import ViewerConfig
from ..errors import SourceError

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes to a BGR uint8 array."""
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
    if image is None:
        raise SourceError("Failed to decode image")
    return image


class AnnotationSource:
    """Fetch one image and its annotation payload. Any failure raises SourceError."""

    def __init__(
        self,
        base_url: str | None = None,
        annotations_path: str | Path | None = None,
        image_path: str | Path | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._annotations_path = Path(annotations_path) if annotations_path else None
        self._image_path = Path(image_path) if image_path else None
        self._timeout = timeout

    @classmethod
    def from_config(cls, config: ViewerConfig) -> "AnnotationSource":
        return cls(
            base_url=config.source_url,
            annotations_path=config.annotations_path or None,
            image_path=config.image_path or None,
            timeout=config.request_timeout_s,
        )

    @property
    def remote(self) -> bool:
        return bool(self._base_url)

    def load(self) -> tuple[np.ndarray, Any]:
        """Return (image_bgr, payload). Annotations are fetched first, as the page shell does."""
        payload = self.load_payload()
        image = self.load_image()
        return image, payload

    def load_payload(self) -> Any:
        if self.remote:
            resp = self._get("/api/annotations")
            try:
                return resp.json()
            except ValueError as e:
                raise SourceError(f"Annotation response is not JSON: {e}") from e
        if self._annotations_path is None:
            raise SourceError("No annotation source: set a URL or an annotations file")
        try:
            with open(self._annotations_path, encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read annotations %s: %s", self._annotations_path, e)
            raise SourceError(f"Failed to read annotation data: {e}") from e
        logger.info("Loaded annotations from %s", self._annotations_path)
        return payload

    def load_image(self) -> np.ndarray:
        if self.remote:
            return decode_image(self._get("/api/image").content)
        if self._image_path is None:
            raise SourceError("No image source: set a URL or an image file")
        try:
            data = self._image_path.read_bytes()
        except OSError as e:
            logger.error("Failed to read image %s: %s", self._image_path, e)
            raise SourceError(f"Failed to read image: {e}") from e
        image = decode_image(data)
        logger.info("Loaded image %s (%dx%d)", self._image_path, image.shape[1], image.shape[0])
        return image

    def _get(self, path: str) -> requests.Response:
        url = f"{self._base_url}{path}"
        try:
            resp = requests.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error("GET %s failed: %s", url, e)
            raise SourceError(f"Failed to fetch {url}: {e}") from e
        if not resp.ok:
            logger.error("GET %s -> %s", url, resp.status_code)
            raise SourceError(f"Failed to fetch {url}: HTTP {resp.status_code}")
        logger.debug("GET %s -> %s (%d bytes)", url, resp.status_code, len(resp.content))
        return resp
