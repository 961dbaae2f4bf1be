"""Pydantic models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from poseview.core.types import Detection


class KeypointSchema(BaseModel):
    """One joint in image-space pixels."""

    x: float
    y: float
    visibility: float


class DetectionSchema(BaseModel):
    """Kept pose detection payload."""

    box: tuple[int, int, int, int]
    confidence: float
    keypoints: list[KeypointSchema]

    @classmethod
    def from_detection(cls, det: Detection) -> DetectionSchema:
        return cls(
            box=det.box,
            confidence=det.confidence,
            keypoints=[
                KeypointSchema(x=float(x), y=float(y), visibility=float(v))
                for x, y, v in det.keypoints
            ],
        )


class DetectResponse(BaseModel):
    """Response for one processed image."""

    image_size: tuple[int, int]
    inference_ms: float
    candidates: int
    detections: list[DetectionSchema]


class ConfigSchema(BaseModel):
    """Runtime configuration payload."""

    model_config = ConfigDict(protected_namespaces=())

    model_path: str
    image_path: str | None = None
    providers: list[str] = Field(default_factory=lambda: ["CPUExecutionProvider"], min_length=1)
    input_size: int = Field(default=640, gt=0)
    confidence_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    score_threshold: float = Field(default=0.25, ge=0.0, le=1.0)
    iou_threshold: float = Field(default=0.45, ge=0.0, le=1.0)
    visibility_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    keypoint_radius: int = Field(default=5, gt=0)
    strict_bounds: bool = False
    show_window: bool = True
