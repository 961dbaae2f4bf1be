"""Single-image pose pipeline orchestration.

Ties together letterbox preprocessing, inference, decoding and NMS, then
optionally renders the kept poses back onto the source image.
"""

from __future__ import annotations

import logging
import time

import numpy as np

from poseview.core.contract import COCO17_CONTRACT, ModelContract
from poseview.core.decoders.yolo_pose import DEFAULT_CONFIDENCE_THRESHOLD, decode_output
from poseview.core.nms import DEFAULT_IOU_THRESHOLD, DEFAULT_SCORE_THRESHOLD, nms_boxes
from poseview.core.overlay.draw import DEFAULT_STYLE, RenderStyle, draw_detections, draw_fps
from poseview.core.preprocess.letterbox import fill_input_tensor
from poseview.core.runtime.base import InferenceRuntime
from poseview.core.types import Frame, PoseResult

logger = logging.getLogger(__name__)


class PosePipeline:
    """Preprocess -> infer -> decode -> suppress, for one image at a time.

    The pipeline owns a reusable input tensor, so one instance must not be
    shared between threads without external locking.
    """

    def __init__(
        self,
        runtime: InferenceRuntime,
        contract: ModelContract = COCO17_CONTRACT,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        score_threshold: float = DEFAULT_SCORE_THRESHOLD,
        iou_threshold: float = DEFAULT_IOU_THRESHOLD,
    ) -> None:
        self.runtime = runtime
        self.contract = contract
        self.confidence_threshold = confidence_threshold
        self.score_threshold = score_threshold
        self.iou_threshold = iou_threshold
        self.input_tensor = np.zeros(tuple(runtime.input_shape), dtype=np.float32)

    def _process_internal(self, image: Frame, profile: bool) -> PoseResult:
        timings: dict[str, float] = {}
        t0 = time.perf_counter()

        inverse_scale = fill_input_tensor(self.input_tensor, image)
        t1 = time.perf_counter()

        output = self.runtime.infer(self.input_tensor)
        t2 = time.perf_counter()

        detections = decode_output(
            output,
            inverse_scale,
            contract=self.contract,
            confidence_threshold=self.confidence_threshold,
        )
        t3 = time.perf_counter()

        kept = nms_boxes(
            [d.box for d in detections],
            [d.confidence for d in detections],
            score_threshold=self.score_threshold,
            iou_threshold=self.iou_threshold,
        )
        t4 = time.perf_counter()

        if profile:
            timings["preprocess_ms"] = (t1 - t0) * 1000.0
            timings["infer_ms"] = (t2 - t1) * 1000.0
            timings["decode_ms"] = (t3 - t2) * 1000.0
            timings["nms_ms"] = (t4 - t3) * 1000.0
            timings["pipeline_ms"] = (t4 - t0) * 1000.0

        logger.debug("%d candidates, %d kept after NMS", len(detections), len(kept))
        h, w = image.shape[:2]
        return PoseResult(
            detections=detections,
            kept=kept,
            inverse_scale=inverse_scale,
            image_size=(w, h),
            elapsed_s=t4 - t0,
            profile=timings if profile else None,
        )

    def process(self, image: Frame) -> PoseResult:
        """Run the pipeline on one BGR image and return decoded + kept detections."""

        return self._process_internal(image, profile=False)

    def process_with_profile(self, image: Frame) -> PoseResult:
        """Like `process`, but fills `PoseResult.profile` with per-stage durations (ms)."""

        return self._process_internal(image, profile=True)

    def render(
        self,
        image: Frame,
        result: PoseResult,
        style: RenderStyle = DEFAULT_STYLE,
        show_fps: bool = True,
    ) -> Frame:
        """Draw `result` onto `image` in place and return it."""

        draw_detections(image, result.detections, result.kept, self.contract, style)
        if show_fps:
            draw_fps(image, result.elapsed_s)
        return image
