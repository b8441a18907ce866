"""Shared fixtures and a per-pixel reference filter."""

import math

import numpy as np
import pytest

from engines.border import clamp_coordinate


def reference_convolve(image: np.ndarray, kernel, multiplier: float = 1.0) -> np.ndarray:
    """Straightforward per-pixel filter used to check the vectorized engine."""
    h, w = image.shape[:2]
    eff = [float(k) * float(multiplier) for k in kernel]
    out = image.copy()
    for y in range(h):
        for x in range(w):
            for c in range(3):
                total = 0.0
                for ky in range(3):
                    for kx in range(3):
                        coeff = eff[ky * 3 + kx]
                        if coeff == 0.0:
                            continue
                        sy = clamp_coordinate(y + ky - 1, h)
                        sx = clamp_coordinate(x + kx - 1, w)
                        total += coeff * float(image[sy, sx, c])
                out[y, x, c] = math.floor(min(max(total, 0.0), 255.0) + 0.5)
    return out


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, (11, 13, 4), dtype=np.uint8)


@pytest.fixture
def two_by_two():
    """2x2 image: black, white / white, black, opaque."""
    return np.array([
        [[0, 0, 0, 255], [255, 255, 255, 255]],
        [[255, 255, 255, 255], [0, 0, 0, 255]],
    ], dtype=np.uint8)
