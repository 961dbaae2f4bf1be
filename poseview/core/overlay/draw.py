"""Overlay drawing helpers (OpenCV).

All drawing happens in place on the original-resolution image.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import cv2
import numpy as np

from poseview.core.contract import COCO17_CONTRACT, Color, ModelContract
from poseview.core.types import Box, Detection

BOX_COLOR: Color = (0, 0, 255)  # red
LABEL_BG_COLOR: Color = (0, 255, 255)  # yellow
LABEL_TEXT_COLOR: Color = (0, 0, 0)
FPS_COLOR: Color = (255, 0, 0)  # blue


@dataclass(frozen=True)
class RenderStyle:
    visibility_threshold: float = 0.5
    keypoint_radius: int = 5
    box_thickness: int = 2
    limb_thickness: int = 2
    # False keeps the modulo-based frame test (a coordinate on 0 or on any
    # multiple of the frame size counts as out of frame). True uses a real
    # 0 <= v < size range check.
    strict_bounds: bool = False


DEFAULT_STYLE = RenderStyle()


def format_label(label: str, confidence: float) -> str:
    """Return e.g. `Person:0.87`; the confidence is cut to 4 characters, not rounded."""

    return f"{label}:{f'{confidence:f}'[:4]}"


def _draw_rect(image: np.ndarray, box: Box, color: Color, thickness: int, line_type: int = cv2.LINE_8) -> None:
    """Stroke or fill `box` the way OpenCV draws a `cv::Rect`; empty boxes draw nothing."""

    x, y, w, h = box
    if w <= 0 or h <= 0:
        return
    cv2.rectangle(image, (x, y), (x + w - 1, y + h - 1), color, thickness, line_type)


def _keypoint_in_frame(x: int, y: int, frame_w: int, frame_h: int, strict: bool) -> bool:
    if strict:
        return 0 <= x < frame_w and 0 <= y < frame_h
    return x % frame_w != 0 and y % frame_h != 0


def _limb_end_in_frame(x: int, y: int, frame_w: int, frame_h: int, strict: bool) -> bool:
    if strict:
        return 0 <= x < frame_w and 0 <= y < frame_h
    return not (x % frame_w == 0 or y % frame_h == 0 or x < 0 or y < 0)


def draw_label(image: np.ndarray, box: Box, text: str) -> None:
    x, y = box[0], box[1]
    (tw, th), _baseline = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
    text_box: Box = (x, y - 15, tw, th + 5)
    _draw_rect(image, text_box, LABEL_BG_COLOR, cv2.FILLED)
    cv2.putText(image, text, (x, y - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.5, LABEL_TEXT_COLOR)


def draw_keypoints(
    image: np.ndarray,
    keypoints: np.ndarray,
    contract: ModelContract = COCO17_CONTRACT,
    style: RenderStyle = DEFAULT_STYLE,
) -> int:
    """Draw joint markers for one pose. Returns the number of circles drawn."""

    frame_h, frame_w = image.shape[:2]
    colors = contract.kpt_colors()
    drawn = 0
    for j in range(contract.num_keypoints):
        x = int(keypoints[j, 0])
        y = int(keypoints[j, 1])
        if not _keypoint_in_frame(x, y, frame_w, frame_h, style.strict_bounds):
            continue
        if keypoints[j, 2] < style.visibility_threshold:
            continue
        cv2.circle(image, (x, y), style.keypoint_radius, colors[j], -1, cv2.LINE_AA)
        drawn += 1
    return drawn


def draw_skeleton(
    image: np.ndarray,
    keypoints: np.ndarray,
    contract: ModelContract = COCO17_CONTRACT,
    style: RenderStyle = DEFAULT_STYLE,
) -> int:
    """Draw limbs for one pose. Returns the number of lines drawn."""

    frame_h, frame_w = image.shape[:2]
    colors = contract.limb_colors()
    drawn = 0
    for i, (a, b) in enumerate(contract.skeleton):
        p1 = keypoints[a - 1]
        p2 = keypoints[b - 1]
        if p1[2] < style.visibility_threshold or p2[2] < style.visibility_threshold:
            continue
        x1, y1 = int(p1[0]), int(p1[1])
        x2, y2 = int(p2[0]), int(p2[1])
        if not (
            _limb_end_in_frame(x1, y1, frame_w, frame_h, style.strict_bounds)
            and _limb_end_in_frame(x2, y2, frame_w, frame_h, style.strict_bounds)
        ):
            continue
        cv2.line(image, (x1, y1), (x2, y2), colors[i], style.limb_thickness, cv2.LINE_AA)
        drawn += 1
    return drawn


def draw_detections(
    image: np.ndarray,
    detections: Sequence[Detection],
    indices: Sequence[int],
    contract: ModelContract = COCO17_CONTRACT,
    style: RenderStyle = DEFAULT_STYLE,
) -> np.ndarray:
    """Draw boxes, labels, keypoints and limbs for `detections[indices]` onto `image`."""

    for index in indices:
        det = detections[index]
        _draw_rect(image, det.box, BOX_COLOR, style.box_thickness)
        draw_label(image, det.box, format_label(contract.label, det.confidence))
        draw_keypoints(image, det.keypoints, contract, style)
        draw_skeleton(image, det.keypoints, contract, style)
    return image


def draw_fps(image: np.ndarray, elapsed_s: float) -> np.ndarray:
    """Draw the `FPS: x.xx` overlay for a pipeline run that took `elapsed_s` seconds."""

    fps = 1.0 / elapsed_s if elapsed_s > 0 else 0.0
    cv2.putText(
        image,
        f"FPS: {fps:.2f}",
        (20, 40),
        cv2.FONT_HERSHEY_PLAIN,
        2.0,
        FPS_COLOR,
        2,
        cv2.LINE_8,
    )
    return image
