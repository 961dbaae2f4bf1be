"""ONNX Runtime executor for YOLOv8-pose exports.

The session is CPU-only by default; other execution providers can be passed
explicitly (e.g. `CUDAExecutionProvider`).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import numpy as np
import onnxruntime as ort

from poseview.core.errors import ModelLoadError, ShapeError

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS = ("CPUExecutionProvider",)
DEFAULT_INPUT_SIZE = 640


def _static_dim(dim: Any, fallback: int) -> int:
    """Return `dim` when it is a concrete int, else `fallback` (dynamic axes are strings/None)."""

    if isinstance(dim, int) and dim > 0:
        return dim
    return fallback


class OnnxPoseRuntime:
    """`InferenceRuntime` backed by an `onnxruntime.InferenceSession`."""

    def __init__(
        self,
        model_path: str | Path,
        providers: Sequence[str] = DEFAULT_PROVIDERS,
        default_size: int = DEFAULT_INPUT_SIZE,
    ) -> None:
        """Load and compile the model.

        Args:
            model_path: Path to an `.onnx` file.
            providers: ONNX Runtime execution providers, in priority order.
            default_size: Spatial size used when the model declares dynamic H/W.

        Raises:
            ModelLoadError: if the file is missing, cannot be parsed, or does not
                have exactly one 4-D input.
        """

        self.model_path = Path(model_path)
        if not self.model_path.is_file():
            raise ModelLoadError(f"Model file not found: {self.model_path}")
        try:
            self.session = ort.InferenceSession(str(self.model_path), providers=list(providers))
        except Exception as e:
            raise ModelLoadError(f"Cannot load model {self.model_path}: {e}") from e

        inputs = self.session.get_inputs()
        outputs = self.session.get_outputs()
        if len(inputs) != 1 or len(inputs[0].shape) != 4:
            raise ModelLoadError(
                f"Expected a single [1, C, H, W] input, got {[i.shape for i in inputs]}"
            )
        if not outputs:
            raise ModelLoadError("Model has no outputs")

        self.input_name: str = inputs[0].name
        self.output_name: str = outputs[0].name
        _n, c, h, w = inputs[0].shape
        self.input_shape: tuple[int, int, int, int] = (
            1,
            _static_dim(c, 3),
            _static_dim(h, default_size),
            _static_dim(w, default_size),
        )
        self._log_model_info(inputs, outputs)

    def _log_model_info(self, inputs: list[Any], outputs: list[Any]) -> None:
        logger.info("model: %s", self.model_path.name)
        for node in inputs:
            logger.info("    input  name=%s type=%s shape=%s", node.name or "NONE", node.type, node.shape)
        for node in outputs:
            logger.info("    output name=%s type=%s shape=%s", node.name or "NONE", node.type, node.shape)

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        if tuple(tensor.shape) != self.input_shape:
            raise ShapeError(f"input tensor shape {tensor.shape} != model input {self.input_shape}")
        outputs = self.session.run([self.output_name], {self.input_name: tensor})
        return np.asarray(outputs[0])
