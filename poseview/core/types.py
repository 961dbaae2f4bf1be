"""Shared type definitions used across the decode pipeline.

Small, stable types (boxes, letterbox transforms, detections) live here so the
preprocessor, decoder, suppressor and renderer can stay strongly typed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

Frame = np.ndarray

# (x, y, width, height) in integer image-space pixels.
Box = tuple[int, int, int, int]


@dataclass(frozen=True)
class LetterboxTransform:
    """Uniform scale used to fit an image into the model input (top-left anchored)."""

    scale: float
    inverse_scale: float


@dataclass(frozen=True)
class Detection:
    """Decoded pose candidate in image-space coordinates."""

    box: Box
    confidence: float
    keypoints: np.ndarray = field(repr=False)  # shape: (K, 3) -> x, y, visibility


@dataclass
class PoseResult:
    """Output of one pipeline run over a single image."""

    detections: list[Detection]
    kept: list[int]
    inverse_scale: float
    image_size: tuple[int, int] = (0, 0)
    elapsed_s: float = 0.0
    profile: dict[str, float] | None = None

    def kept_detections(self) -> list[Detection]:
        return [self.detections[i] for i in self.kept]
