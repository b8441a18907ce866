"""Row-band splitting and merging for parallel convolution."""

import math
from typing import List, Optional, Tuple

import numpy as np

# Bands per worker, for load balancing
BANDS_PER_WORKER = 4
MIN_BAND_ROWS = 16


def default_band_rows(height: int, workers: int) -> int:
    """Band height giving ~BANDS_PER_WORKER bands per worker."""
    return max(MIN_BAND_ROWS, math.ceil(height / (workers * BANDS_PER_WORKER)))


def split_into_bands(height: int, band_rows: int) -> List[Tuple[int, int]]:
    """Split [0, height) into consecutive (start, stop) row ranges."""
    if band_rows <= 0:
        raise ValueError(f"band_rows must be positive, got {band_rows}")
    return [(start, min(start + band_rows, height)) for start in range(0, height, band_rows)]


def merge_bands(
    bands: List[Tuple[int, int, np.ndarray]],
    out: np.ndarray,
    channels: Optional[slice] = None
) -> np.ndarray:
    """Write (start, stop, rows) results into out, in place."""
    channels = channels if channels is not None else slice(None)
    for (start, stop, rows) in bands:
        out[start:stop, :, channels] = rows
    return out
