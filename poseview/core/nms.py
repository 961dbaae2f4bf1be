"""Greedy non-maximum suppression over `(x, y, width, height)` boxes."""

from __future__ import annotations

from collections.abc import Sequence

from poseview.core.types import Box

DEFAULT_SCORE_THRESHOLD = 0.25
DEFAULT_IOU_THRESHOLD = 0.45


def box_area(box: Box) -> float:
    _x, _y, w, h = box
    return max(0.0, float(w)) * max(0.0, float(h))


def box_iou(a: Box, b: Box) -> float:
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    x1 = max(ax, bx)
    y1 = max(ay, by)
    x2 = min(ax + aw, bx + bw)
    y2 = min(ay + ah, by + bh)
    inter = max(0.0, float(x2 - x1)) * max(0.0, float(y2 - y1))
    if inter <= 0.0:
        return 0.0
    union = box_area(a) + box_area(b) - inter
    if union <= 0.0:  # pragma: no cover
        return 0.0  # pragma: no cover
    return inter / union


def nms_boxes(
    boxes: Sequence[Box],
    confidences: Sequence[float],
    score_threshold: float = DEFAULT_SCORE_THRESHOLD,
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> list[int]:
    """Return indices of boxes surviving NMS, ordered by descending confidence.

    Candidates below `score_threshold` are dropped before sorting. A candidate is
    suppressed when its IoU with an already kept box exceeds `iou_threshold`.
    Equal confidences keep their input order.
    """

    if len(boxes) != len(confidences):
        raise ValueError("boxes and confidences must have the same length")
    if not boxes:
        return []

    thr = float(iou_threshold)
    candidates = [i for i, c in enumerate(confidences) if float(c) >= score_threshold]
    # sorted() is stable, so ties stay in insertion order
    order = sorted(candidates, key=lambda i: float(confidences[i]), reverse=True)
    kept: list[int] = []
    for i in order:
        suppress = False
        for k in kept:
            if box_iou(boxes[i], boxes[k]) > thr:
                suppress = True
                break
        if not suppress:
            kept.append(i)
    return kept
