from __future__ import annotations

import numpy as np
import pytest

import poseview.core.overlay.draw as draw_mod
from poseview.core.overlay.draw import (
    RenderStyle,
    draw_detections,
    draw_fps,
    draw_keypoints,
    draw_skeleton,
    format_label,
)
from poseview.core.types import Detection


def _keypoints(visible: dict[int, tuple[float, float, float]]) -> np.ndarray:
    """17 invisible joints, except the (0-based) ones given in `visible`."""

    kp = np.zeros((17, 3), dtype=np.float64)
    kp[:, 0] = 30.0
    kp[:, 1] = 30.0
    for j, (x, y, v) in visible.items():
        kp[j] = (x, y, v)
    return kp


@pytest.fixture
def circle_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    calls: list[tuple] = []

    def _circle(img, center, radius, color, thickness=None, line_type=None):
        calls.append((center, radius, color))
        return img

    monkeypatch.setattr(draw_mod.cv2, "circle", _circle)
    return calls


def test_low_visibility_keypoint_is_not_drawn(circle_calls):
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    draw_keypoints(img, _keypoints({0: (50.0, 40.0, 0.4)}))
    assert circle_calls == []


def test_visible_keypoint_is_drawn_with_palette_color(circle_calls):
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    drawn = draw_keypoints(img, _keypoints({0: (50.0, 40.0, 0.6)}))
    assert drawn == 1
    # Joint 0 (nose) uses palette entry 16.
    assert circle_calls == [((50, 40), 5, (0, 255, 0))]


def test_visible_keypoint_mutates_pixels():
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    draw_keypoints(img, _keypoints({0: (50.0, 40.0, 0.6)}))
    assert img[40, 50].tolist() == [0, 255, 0]

    untouched = np.zeros((80, 100, 3), dtype=np.uint8)
    draw_keypoints(untouched, _keypoints({0: (50.0, 40.0, 0.4)}))
    assert not untouched.any()


def test_keypoint_on_frame_multiple_is_skipped_by_default(circle_calls):
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    kp = _keypoints({0: (0.0, 40.0, 0.9), 1: (100.0, 40.0, 0.9), 2: (50.0, 0.0, 0.9)})
    assert draw_keypoints(img, kp) == 0


def test_strict_bounds_uses_range_check(circle_calls):
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    kp = _keypoints({0: (0.0, 40.0, 0.9), 1: (100.0, 40.0, 0.9), 2: (50.0, 0.0, 0.9)})
    assert draw_keypoints(img, kp, style=RenderStyle(strict_bounds=True)) == 2


def test_limb_requires_both_endpoints_visible():
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    # Joints 1 and 2 (one-based) form a single limb.
    both = _keypoints({0: (20.0, 20.0, 0.9), 1: (60.0, 20.0, 0.9)})
    assert draw_skeleton(img, both) == 1

    one = _keypoints({0: (20.0, 20.0, 0.9), 1: (60.0, 20.0, 0.3)})
    assert draw_skeleton(np.zeros_like(img), one) == 0


def test_limb_with_negative_endpoint_is_skipped():
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    kp = _keypoints({0: (-20.0, 20.0, 0.9), 1: (60.0, 20.0, 0.9)})
    assert draw_skeleton(img, kp) == 0
    assert not img.any()


@pytest.mark.parametrize(
    "conf,expected",
    [(0.876, "Person:0.87"), (0.9, "Person:0.90"), (1.0, "Person:1.00"), (0.30999, "Person:0.30")],
)
def test_format_label_truncates(conf, expected):
    assert format_label("Person", conf) == expected


def test_draw_detections_only_draws_selected_indices():
    img = np.zeros((100, 100, 3), dtype=np.uint8)
    dets = [
        Detection(box=(10, 30, 20, 20), confidence=0.9, keypoints=_keypoints({})),
        Detection(box=(60, 60, 20, 20), confidence=0.8, keypoints=_keypoints({})),
    ]
    draw_detections(img, dets, [0])
    # Bottom-left corner of box 0 (red); the label covers its top edge.
    assert img[49, 10].tolist() == [0, 0, 255]
    assert not img[60:80, 60:80].any()


def test_draw_detections_with_no_indices_leaves_image_untouched():
    img = np.zeros((50, 50, 3), dtype=np.uint8)
    dets = [Detection(box=(10, 10, 20, 20), confidence=0.9, keypoints=_keypoints({}))]
    out = draw_detections(img, dets, [])
    assert out is img
    assert not img.any()


def test_draw_fps_draws_text():
    img = np.zeros((60, 200, 3), dtype=np.uint8)
    draw_fps(img, 0.05)
    assert img.any()
    zero = np.zeros((60, 200, 3), dtype=np.uint8)
    draw_fps(zero, 0.0)
    assert zero.any()


@pytest.mark.parametrize("end", [(100.0, 20.0), (0.0, 20.0), (60.0, 80.0), (60.0, 0.0)])
def test_limb_endpoint_on_frame_multiple_is_skipped_by_default(end):
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    kp = _keypoints({0: (20.0, 20.0, 0.9), 1: (*end, 0.9)})
    assert draw_skeleton(img, kp) == 0
    assert not img.any()


def test_strict_bounds_limb_uses_range_check():
    style = RenderStyle(strict_bounds=True)
    img = np.zeros((80, 100, 3), dtype=np.uint8)
    assert draw_skeleton(img, _keypoints({0: (20.0, 20.0, 0.9), 1: (99.0, 20.0, 0.9)}), style=style) == 1
    assert draw_skeleton(img, _keypoints({0: (20.0, 20.0, 0.9), 1: (0.0, 20.0, 0.9)}), style=style) == 1
    assert draw_skeleton(img, _keypoints({0: (20.0, 20.0, 0.9), 1: (100.0, 20.0, 0.9)}), style=style) == 0
    assert draw_skeleton(img, _keypoints({0: (-1.0, 20.0, 0.9), 1: (60.0, 20.0, 0.9)}), style=style) == 0


def test_empty_box_draws_no_rectangle():
    img = np.zeros((100, 100, 3), dtype=np.uint8)
    dets = [Detection(box=(50, 50, 0, 0), confidence=0.9, keypoints=_keypoints({}))]
    draw_detections(img, dets, [0])
    # Only the label (which starts at column 50) is drawn.
    assert not img[40:60, 44:50].any()
    assert not img[60:, :].any()


@pytest.fixture
def text_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    calls: list[tuple] = []

    def _put_text(img, text, org, font, scale, color, thickness=None, line_type=None):
        calls.append((text, org, font, scale, color, thickness))
        return img

    monkeypatch.setattr(draw_mod.cv2, "putText", _put_text)
    return calls


@pytest.mark.parametrize("elapsed,text", [(0.05, "FPS: 20.00"), (0.3, "FPS: 3.33"), (0.0, "FPS: 0.00")])
def test_draw_fps_text_and_position(text_calls, elapsed, text):
    draw_fps(np.zeros((60, 200, 3), dtype=np.uint8), elapsed)
    assert text_calls == [(text, (20, 40), draw_mod.cv2.FONT_HERSHEY_PLAIN, 2.0, (255, 0, 0), 2)]
