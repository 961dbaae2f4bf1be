"""Inference runtime interface expected by `PosePipeline`."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class InferenceRuntime(Protocol):
    """Minimal executor interface: a fixed input shape and one blocking call.

    `input_shape` is `(1, C, H, W)`. `infer` returns the raw `[1, rows, N]`
    output buffer for a filled input tensor.
    """

    input_shape: tuple[int, int, int, int]

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """Run the network on `tensor` and return its single output."""
