from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path

import cv2
import numpy as np

from poseview.core.config.settings import PoseSettings, load_settings, render_style_from_settings
from poseview.core.image_sources.base import load_image
from poseview.core.pipeline import PosePipeline
from poseview.core.runtime.base import InferenceRuntime
from poseview.core.runtime.onnx import OnnxPoseRuntime
from poseview.core.runtime.static import StaticRuntime
from poseview.core.types import PoseResult

logger = logging.getLogger("poseview.tools.run_on_image")

WINDOW_NAME = "poseview"


def _to_jsonable(obj):
    if is_dataclass(obj):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(v) for v in obj]
    return obj


def _apply_overrides(settings: PoseSettings, args: argparse.Namespace) -> PoseSettings:
    patch = {
        "model_path": args.model,
        "image_path": args.image,
        "confidence_threshold": args.conf,
        "score_threshold": args.score,
        "iou_threshold": args.iou,
    }
    patch = {k: v for k, v in patch.items() if v is not None}
    if args.strict_bounds:
        patch["strict_bounds"] = True
    if args.no_show:
        patch["show_window"] = False
    return PoseSettings(**{**settings.model_dump(), **patch})


def summary_line(result: PoseResult) -> str:
    return f"Infer time(ms): {result.elapsed_s * 1000.0:.3f}ms; Detections: {len(result.kept)}"


def run(args: argparse.Namespace) -> PoseResult:
    settings = _apply_overrides(load_settings(), args)
    if not settings.image_path:
        raise SystemExit("No image given (use --image or PV_IMAGE_PATH)")

    runtime: InferenceRuntime
    if args.mock:
        size = settings.input_size
        runtime = StaticRuntime(input_shape=(1, 3, size, size))
    else:
        runtime = OnnxPoseRuntime(
            settings.model_path,
            providers=settings.providers,
            default_size=settings.input_size,
        )
    pipeline = PosePipeline(
        runtime,
        confidence_threshold=settings.confidence_threshold,
        score_threshold=settings.score_threshold,
        iou_threshold=settings.iou_threshold,
    )

    image = load_image(settings.image_path)
    result = pipeline.process(image)
    pipeline.render(image, result, style=render_style_from_settings(settings))
    print(summary_line(result))

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(out_path), image):
            logger.warning("Could not write annotated image to %s", out_path)
    if args.json:
        json_path = Path(args.json)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(_to_jsonable(result.kept_detections()), f, indent=2)

    if settings.show_window:
        cv2.imshow(WINDOW_NAME, image)
        cv2.waitKey(0)
        cv2.destroyAllWindows()
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run YOLOv8-pose decoding on a single image")
    parser.add_argument("--image", help="Path to the input image")
    parser.add_argument("--model", help="Path to the ONNX pose model")
    parser.add_argument("--conf", type=float, help="Candidate confidence cutoff (default 0.3)")
    parser.add_argument("--score", type=float, help="NMS score threshold (default 0.25)")
    parser.add_argument("--iou", type=float, help="NMS IoU threshold (default 0.45)")
    parser.add_argument("--output", help="Where to save the annotated image")
    parser.add_argument("--json", help="Where to save kept detections as JSON")
    parser.add_argument("--no-show", action="store_true", help="Do not open a display window")
    parser.add_argument(
        "--strict-bounds",
        action="store_true",
        help="Use a range check instead of the modulo frame test when drawing keypoints",
    )
    parser.add_argument(
        "--mock", action="store_true", help="Use an empty static runtime (no model file needed)"
    )
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args)
    except SystemExit:
        raise
    except Exception as e:
        logger.exception("Pose run failed")
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
