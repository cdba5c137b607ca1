"""Image processing utilities for livesense.

Thumbnail extraction for change detection and preview encoding for
screenshots held in the capture queues.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def load_bgr(path: Path | str) -> np.ndarray:
    """Read an image from disk as a 3-channel BGR array.

    ``IMREAD_COLOR`` drops any alpha channel, so RGBA screenshots and
    their RGB equivalents decode to the same pixels.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Failed to decode image {path}")
    return image


def downsample(image: np.ndarray, width: int) -> np.ndarray:
    """Resize ``image`` to ``width`` pixels wide, preserving aspect ratio."""
    h, w = image.shape[:2]
    height = max(1, round(h * width / w))
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)


def downsample_to_thumbnail(path: Path | str, width: int = 32) -> bytes:
    """Produce the raw pixel bytes used to compare consecutive captures."""
    thumb = downsample(load_bgr(path), width)
    return np.ascontiguousarray(thumb).tobytes()


def image_preview(path: Path | str) -> str:
    """Encode an image file as a ``data:image/png;base64`` URL."""
    data = Path(path).read_bytes()
    return f"data:image/png;base64,{base64.b64encode(data).decode('utf-8')}"
