"""Image loading through OpenCV.

Both loaders return a BGR `uint8` raster or raise `ImageLoadError`; an empty
result is never passed on to preprocessing.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from poseview.core.errors import ImageLoadError
from poseview.core.types import Frame

logger = logging.getLogger(__name__)


def _check_loaded(image: Frame | None, what: str) -> Frame:
    if image is None or image.size == 0:
        raise ImageLoadError(f"Cannot read image: {what}")
    return image


def load_image(path: str | Path) -> Frame:
    """Read a color image from disk."""

    p = Path(path)
    if not p.is_file():
        raise ImageLoadError(f"Image file not found: {p}")
    image = _check_loaded(cv2.imread(str(p), cv2.IMREAD_COLOR), str(p))
    logger.debug("Loaded %s (%dx%d)", p, image.shape[1], image.shape[0])
    return image


def decode_image(data: bytes) -> Frame:
    """Decode an encoded image (JPEG, PNG, ...) held in memory."""

    if not data:
        raise ImageLoadError("Empty image payload")
    buf = np.frombuffer(data, dtype=np.uint8)
    return _check_loaded(cv2.imdecode(buf, cv2.IMREAD_COLOR), f"<{len(data)} bytes>")
