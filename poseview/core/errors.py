"""Exceptions raised at the pipeline boundaries."""

from __future__ import annotations


class PoseViewError(Exception):
    """Base class for all poseview errors."""


class ModelLoadError(PoseViewError):
    """The model file is missing, corrupt or has an unexpected signature."""


class ImageLoadError(PoseViewError):
    """The input image could not be read or decoded."""


class ShapeError(PoseViewError, ValueError):
    """A tensor or image does not have the shape the pipeline expects."""
