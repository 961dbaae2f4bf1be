"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from poseview.api.services import state

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str | bool]:
    """Lightweight liveness probe; `model_loaded` turns true after the first detect call."""

    return {"status": "ok", "model_loaded": state.is_pipeline_loaded()}
