"""Letterbox preprocessing into a channel-first model input tensor.

The source image is scaled uniformly and anchored at the top-left corner of the
input tensor (no centering, no padding offset), so mapping model coordinates
back to the image only needs the single `inverse_scale` factor.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from poseview.core.errors import ShapeError
from poseview.core.types import Frame, LetterboxTransform

logger = logging.getLogger(__name__)

INPUT_CHANNELS = 3


def compute_letterbox(rows: int, cols: int, height: int, width: int) -> LetterboxTransform:
    """Return the uniform scale that fits a `rows x cols` image into `height x width`.

    Raises:
        ShapeError: if any dimension is not positive.
    """

    if rows <= 0 or cols <= 0:
        raise ShapeError(f"image must have non-zero rows/cols, got {rows}x{cols}")
    if height <= 0 or width <= 0:
        raise ShapeError(f"tensor must have non-zero height/width, got {height}x{width}")
    scale = min(height / float(rows), width / float(cols))
    return LetterboxTransform(scale=scale, inverse_scale=1.0 / scale)


def letterbox_image(image: Frame, height: int, width: int) -> tuple[np.ndarray, LetterboxTransform]:
    """Scale `image` into a `height x width` float RGB canvas normalized to [0, 1].

    Canvas area outside the scaled image is left as the warp produced it;
    callers must not rely on its contents.
    """

    _check_image(image)
    rows, cols = image.shape[:2]
    transform = compute_letterbox(rows, cols, height, width)
    s = transform.scale
    matrix = np.array([[s, 0.0, 0.0], [0.0, s, 0.0]], dtype=np.float32)

    # Resize first, then normalize and swap channels. Doing the float
    # conversion before upscaling gives the same values up to interpolation.
    warped = cv2.warpAffine(image, matrix, (width, height))
    blob = warped.astype(np.float32) / 255.0
    blob = cv2.cvtColor(blob, cv2.COLOR_BGR2RGB)
    return blob, transform


def fill_input_tensor(tensor: np.ndarray, image: Frame) -> float:
    """Letterbox `image` into `tensor` (shape `[1, C, H, W]`) in place.

    Returns:
        The inverse scale factor mapping model coordinates back to image pixels.

    Raises:
        ShapeError: on a non `[1, 3, H, W]` tensor or an empty/non 3-channel image.
    """

    if tensor.ndim != 4 or tensor.shape[0] != 1:
        raise ShapeError(f"input tensor must be shaped [1, C, H, W], got {tensor.shape}")
    _, channels, height, width = tensor.shape
    if channels != INPUT_CHANNELS:
        raise ShapeError(f"input tensor must have {INPUT_CHANNELS} channels, got {channels}")

    blob, transform = letterbox_image(image, int(height), int(width))
    # HWC -> CHW
    tensor[0] = blob.transpose(2, 0, 1)
    logger.debug(
        "Letterboxed %dx%d image into %dx%d tensor (scale=%.4f)",
        image.shape[1],
        image.shape[0],
        width,
        height,
        transform.scale,
    )
    return transform.inverse_scale


def _check_image(image: Frame | None) -> None:
    if image is None or image.size == 0:
        raise ShapeError("image is empty")
    if image.ndim != 3 or image.shape[2] != INPUT_CHANNELS:
        raise ShapeError(f"image must be a 3-channel raster, got shape {image.shape}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ShapeError("image must have non-zero rows/cols")
