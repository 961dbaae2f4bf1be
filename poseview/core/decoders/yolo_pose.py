"""Decoder for the packed YOLOv8-pose output tensor."""

from __future__ import annotations

import logging

import numpy as np

from poseview.core.contract import COCO17_CONTRACT, ModelContract
from poseview.core.errors import ShapeError
from poseview.core.types import Detection

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.3


def _as_rows(buffer: np.ndarray, contract: ModelContract) -> np.ndarray:
    """Return a `[rows, N]` view of a `[1, rows, N]` (or `[rows, N]`) buffer."""

    out = np.asarray(buffer)
    if out.ndim == 3:
        if out.shape[0] != 1:
            raise ShapeError(f"expected a batch of 1, got {out.shape[0]}")
        out = out[0]
    if out.ndim != 2:
        raise ShapeError(f"output buffer must be [1, {contract.num_rows}, N], got {np.shape(buffer)}")
    if out.shape[0] != contract.num_rows:
        raise ShapeError(
            f"output buffer has {out.shape[0]} rows, model contract expects {contract.num_rows}"
        )
    return out


def decode_output(
    buffer: np.ndarray,
    inverse_scale: float,
    contract: ModelContract = COCO17_CONTRACT,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> list[Detection]:
    """Decode raw network output into image-space detections.

    Args:
        buffer: Raw output shaped `[1, rows, N]`; each column is one candidate.
        inverse_scale: Factor mapping model-input pixels back to image pixels.
        contract: Row layout of the output tensor.
        confidence_threshold: Columns with `score <= confidence_threshold` are skipped.

    Returns:
        One `Detection` per surviving column, in column order. Boxes are
        `(x, y, width, height)` truncated toward zero; keypoint coordinates are
        rescaled but their visibility scores are not.
    """

    out = _as_rows(buffer, contract)
    scores = out[contract.score_row]
    # Compare at the buffer's own precision (float32 scores vs a float32 cutoff).
    cutoff = np.asarray(confidence_threshold, dtype=scores.dtype)
    cols = np.flatnonzero(scores > cutoff)
    if cols.size == 0:
        return []

    inv = float(inverse_scale)
    sel = out[:, cols].astype(np.float64)
    cx, cy, w, h = sel[0], sel[1], sel[2], sel[3]
    # astype(int) truncates toward zero.
    xs = ((cx - 0.5 * w) * inv).astype(np.int64)
    ys = ((cy - 0.5 * h) * inv).astype(np.int64)
    ws = (w * inv).astype(np.int64)
    hs = (h * inv).astype(np.int64)

    k = contract.num_keypoints
    kpts = sel[contract.keypoint_row : contract.num_rows].reshape(k, contract.values_per_keypoint, -1)
    kpts = kpts.transpose(2, 0, 1).copy()  # (n, K, 3)
    kpts[:, :, :2] *= inv

    detections: list[Detection] = []
    for n in range(cols.size):
        keypoints = kpts[n]
        keypoints.flags.writeable = False
        detections.append(
            Detection(
                box=(int(xs[n]), int(ys[n]), int(ws[n]), int(hs[n])),
                confidence=float(sel[contract.score_row, n]),
                keypoints=keypoints,
            )
        )
    logger.debug("Decoded %d/%d candidates above %.2f", len(detections), out.shape[1], confidence_threshold)
    return detections
