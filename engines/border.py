"""Clamp-to-edge border handling."""

import numpy as np


def clamp_coordinate(v: int, size: int) -> int:
    """Nearest in-bounds index for a neighbor coordinate."""
    return min(max(v, 0), size - 1)


def pad_edge(channels: np.ndarray, radius: int = 1) -> np.ndarray:
    """Float64 copy of an (H, W, C) array with a replicated-edge frame.

    Out-of-bounds neighbors read the nearest edge pixel, clamped per axis,
    so blur kernels do not darken the border.
    """
    return np.pad(
        channels.astype(np.float64),
        ((radius, radius), (radius, radius), (0, 0)),
        mode='edge',
    )
