"""In-process state for settings and the pose pipeline.

FastAPI routes use this module to access (and hot-reload) the singleton
`PosePipeline`. The pipeline reuses one input tensor, so every run goes
through `_lock`.
"""

from __future__ import annotations

import logging
from threading import RLock

from poseview.core.config.settings import PoseSettings, load_settings, settings_to_dict
from poseview.core.pipeline import PosePipeline
from poseview.core.runtime.onnx import OnnxPoseRuntime
from poseview.core.types import Frame, PoseResult

logger = logging.getLogger(__name__)

_settings: PoseSettings | None = None
_pipeline: PosePipeline | None = None
_lock = RLock()


def get_settings() -> PoseSettings:
    """Return cached settings, loading them on first use."""

    global _settings
    with _lock:
        if _settings is None:
            _settings = load_settings()
    return _settings


def reload_settings(data: dict | None = None) -> PoseSettings:
    """Reload settings and drop the current pipeline so the next request rebuilds it.

    Args:
        data: Optional patch dict merged into the loaded settings.
    """

    global _settings, _pipeline
    with _lock:
        base = load_settings()
        if data:
            _settings = PoseSettings(**{**settings_to_dict(base), **data})
        else:
            _settings = base
        _pipeline = None
    return _settings


def build_pipeline(settings: PoseSettings) -> PosePipeline:
    runtime = OnnxPoseRuntime(
        settings.model_path,
        providers=settings.providers,
        default_size=settings.input_size,
    )
    return PosePipeline(
        runtime,
        confidence_threshold=settings.confidence_threshold,
        score_threshold=settings.score_threshold,
        iou_threshold=settings.iou_threshold,
    )


def get_pipeline() -> PosePipeline:
    """Return the singleton pipeline, loading the model on first use.

    Raises:
        ModelLoadError: if the configured model cannot be loaded.
    """

    global _pipeline
    with _lock:
        if _pipeline is None:
            settings = get_settings()
            logger.info("Loading pose model %s", settings.model_path)
            _pipeline = build_pipeline(settings)
    return _pipeline


def run_pipeline(pipeline: PosePipeline, image: Frame) -> PoseResult:
    """Process one image while holding the pipeline lock."""

    with _lock:
        return pipeline.process(image)


def reset_pipeline() -> None:
    """Discard the singleton pipeline (if present)."""

    global _pipeline
    with _lock:
        _pipeline = None


def is_pipeline_loaded() -> bool:
    return _pipeline is not None
