"""Runtime that returns a precomputed output buffer.

Used for `--mock` runs (no model file needed) and for exercising the decode
pipeline with hand-built buffers.
"""

from __future__ import annotations

import numpy as np

from poseview.core.contract import COCO17_CONTRACT, ModelContract


class StaticRuntime:
    """`InferenceRuntime` returning the same `[1, rows, N]` buffer on every call."""

    def __init__(
        self,
        output: np.ndarray | None = None,
        input_shape: tuple[int, int, int, int] = (1, 3, 640, 640),
        contract: ModelContract = COCO17_CONTRACT,
    ) -> None:
        if output is None:
            output = np.zeros((1, contract.num_rows, 0), dtype=np.float32)
        self.output = np.asarray(output, dtype=np.float32)
        self.input_shape = tuple(input_shape)
        self.calls = 0
        self.last_input: np.ndarray | None = None

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        self.calls += 1
        self.last_input = tensor
        return self.output
