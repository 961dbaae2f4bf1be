"""Configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from poseview.api.schemas.models import ConfigSchema
from poseview.api.services.state import get_settings, reload_settings
from poseview.core.config.settings import settings_to_dict

router = APIRouter()


@router.get("/config", response_model=ConfigSchema)
def get_config() -> ConfigSchema:
    """Return the current effective configuration."""

    settings = get_settings()
    return ConfigSchema(**settings_to_dict(settings))


@router.post("/config", response_model=ConfigSchema)
def update_config(cfg: ConfigSchema) -> ConfigSchema:
    """Update in-memory settings; the pipeline is rebuilt on the next request.

    Persist configuration via environment variables or the YAML config file.
    """

    settings = reload_settings(cfg.model_dump())
    return ConfigSchema(**settings_to_dict(settings))
