"""Export a YOLOv8-pose checkpoint to ONNX (CPU-only).

This script is intentionally simple and print-oriented.
"""

from __future__ import annotations

import argparse
import os


def main(argv: list[str] | None = None) -> int:
    """Run an ONNX export for the pose model."""

    parser = argparse.ArgumentParser(description="Export a YOLOv8-pose model to ONNX")
    parser.add_argument("--model", default=os.getenv("PV_EXPORT_MODEL", "yolov8n-pose.pt"))
    parser.add_argument("--imgsz", type=int, default=640)
    args = parser.parse_args(argv)

    # Keep the project CPU-only: do not let Ultralytics auto-install GPU runtimes
    # (e.g. onnxruntime-gpu) as part of export.
    os.environ.setdefault("ULTRALYTICS_AUTOUPDATE", "0")

    from ultralytics import YOLO

    try:
        print(f"Loading {args.model}...")
        model = YOLO(args.model, task="pose")
        print("Exporting to ONNX...")
        path = model.export(format="onnx", imgsz=args.imgsz, device="cpu")
        print(f"Wrote {path}")
        return 0
    except Exception as e:
        print(f"Failed: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
