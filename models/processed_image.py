"""Filtered image returned by the engine."""

from dataclasses import dataclass

import numpy as np


@dataclass
class ProcessedImage:
    """Response half of the wire contract."""

    width: int
    height: int
    data: np.ndarray

    # Runtime
    elapsed_ms: float = 0.0

    def as_array(self) -> np.ndarray:
        """(H, W, 4) view of the flat RGBA buffer."""
        return self.data.reshape(self.height, self.width, 4)

    def to_dict(self) -> dict:
        return {
            'width': self.width,
            'height': self.height,
            'data': self.data.tolist(),
        }
