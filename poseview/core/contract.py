"""Model output layout and skeleton topology.

A YOLOv8-pose export produces a `[1, 56, N]` tensor: each of the N columns is
one candidate laid out as `cx, cy, w, h, score` followed by `x, y, visibility`
for every keypoint. The renderer draws limbs between one-based joint pairs and
looks colors up through fixed palette-index tables.
"""

from __future__ import annotations

from dataclasses import dataclass

Color = tuple[int, int, int]

COCO17_SKELETON: tuple[tuple[int, int], ...] = (
    (16, 14), (14, 12), (17, 15), (15, 13), (12, 13),
    (6, 12), (7, 13), (6, 7), (6, 8), (7, 9),
    (8, 10), (9, 11), (2, 3), (1, 2), (1, 3),
    (2, 4), (3, 5), (4, 6), (5, 7),
)

# Passed to OpenCV as-is (OpenCV reads them as BGR).
POSE_PALETTE: tuple[Color, ...] = (
    (255, 128, 0), (255, 153, 51), (255, 178, 102), (230, 230, 0), (255, 153, 255),
    (153, 204, 255), (255, 102, 255), (255, 51, 255), (102, 178, 255), (51, 153, 255),
    (255, 153, 153), (255, 102, 102), (255, 51, 51), (153, 255, 153), (102, 255, 102),
    (51, 255, 51), (0, 255, 0), (0, 0, 255), (255, 0, 0), (255, 255, 255),
)

LIMB_COLOR_INDICES: tuple[int, ...] = (9, 9, 9, 9, 7, 7, 7, 0, 0, 0, 0, 0, 16, 16, 16, 16, 16, 16, 16)
KPT_COLOR_INDICES: tuple[int, ...] = (16, 16, 16, 16, 16, 0, 0, 0, 0, 0, 0, 9, 9, 9, 9, 9, 9)


@dataclass(frozen=True)
class ModelContract:
    """Output-tensor layout plus the drawing topology that goes with it."""

    num_keypoints: int
    skeleton: tuple[tuple[int, int], ...]
    palette: tuple[Color, ...]
    limb_color_indices: tuple[int, ...]
    kpt_color_indices: tuple[int, ...]
    score_row: int = 4
    keypoint_row: int = 5
    values_per_keypoint: int = 3
    label: str = "Person"

    def __post_init__(self) -> None:
        if len(self.limb_color_indices) != len(self.skeleton):
            raise ValueError("limb_color_indices must have one entry per skeleton limb")
        if len(self.kpt_color_indices) != self.num_keypoints:
            raise ValueError("kpt_color_indices must have one entry per keypoint")
        for idx in (*self.limb_color_indices, *self.kpt_color_indices):
            if not 0 <= idx < len(self.palette):
                raise ValueError(f"palette index {idx} out of range")
        for a, b in self.skeleton:
            if not (1 <= a <= self.num_keypoints and 1 <= b <= self.num_keypoints):
                raise ValueError(f"skeleton pair ({a}, {b}) references an unknown joint")

    @property
    def num_rows(self) -> int:
        """Attribute rows per candidate column (56 for COCO-17)."""

        return self.keypoint_row + self.num_keypoints * self.values_per_keypoint

    def limb_colors(self) -> list[Color]:
        return [self.palette[i] for i in self.limb_color_indices]

    def kpt_colors(self) -> list[Color]:
        return [self.palette[i] for i in self.kpt_color_indices]


COCO17_CONTRACT = ModelContract(
    num_keypoints=17,
    skeleton=COCO17_SKELETON,
    palette=POSE_PALETTE,
    limb_color_indices=LIMB_COLOR_INDICES,
    kpt_color_indices=KPT_COLOR_INDICES,
)
