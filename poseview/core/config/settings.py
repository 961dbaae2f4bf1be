"""Runtime configuration.

Settings are loaded from YAML defaults and overridden by environment variables
prefixed with `PV_`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from poseview.core.overlay.draw import RenderStyle


class PoseSettings(BaseSettings):
    """Runtime configuration loaded from YAML defaults and `PV_` env overrides."""

    model_path: str = Field("yolov8n-pose.onnx", description="Path to the ONNX export")
    image_path: str | None = None
    providers: list[str] = Field(default_factory=lambda: ["CPUExecutionProvider"])
    # Used only when the model declares dynamic spatial dims.
    input_size: int = 640

    confidence_threshold: float = 0.3
    score_threshold: float = 0.25
    iou_threshold: float = 0.45
    visibility_threshold: float = 0.5
    keypoint_radius: int = 5
    strict_bounds: bool = False
    show_window: bool = True

    model_config = SettingsConfigDict(
        env_prefix="PV_",
        validate_assignment=True,
        protected_namespaces=(),
    )

    @field_validator(
        "confidence_threshold",
        "score_threshold",
        "iou_threshold",
        "visibility_threshold",
    )
    @classmethod
    def _validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= float(v) <= 1.0:
            raise ValueError("thresholds must be in [0, 1]")
        return float(v)

    @field_validator("input_size", "keypoint_radius")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if int(v) <= 0:
            raise ValueError("must be > 0")
        return int(v)

    @field_validator("providers")
    @classmethod
    def _validate_providers(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("providers must not be empty")
        return v


def settings_to_dict(settings: PoseSettings) -> dict[str, Any]:
    return settings.model_dump()


def _config_path() -> Path:
    """Return the YAML configuration path (defaults to config/poseview.config.yml)."""

    return Path(os.getenv("PV_CONFIG", "config/poseview.config.yml"))


def load_settings() -> PoseSettings:
    """Load settings from YAML and environment variables.

    YAML provides defaults; environment variables override.
    """

    data: dict[str, Any] = {}
    path = _config_path()
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    env_settings = PoseSettings()
    env_overrides: dict[str, Any] = {
        name: getattr(env_settings, name) for name in env_settings.model_fields_set
    }

    merged = {**data, **env_overrides}
    return PoseSettings(**merged)


def render_style_from_settings(settings: PoseSettings) -> RenderStyle:
    return RenderStyle(
        visibility_threshold=settings.visibility_threshold,
        keypoint_radius=settings.keypoint_radius,
        strict_bounds=settings.strict_bounds,
    )
