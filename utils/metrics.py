"""Metrics: runtime and how much a filter changed the image."""

import time
from typing import Dict, Optional

import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

# skimage's default SSIM window
_SSIM_MIN_SIDE = 7


class Timer:
    """Simple wall-clock timer for filter runs."""

    def __init__(self):
        self.elapsed_ms = 0.0

    def measure(self, func, *args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.elapsed_ms = (time.perf_counter() - start) * 1000.0
        return result


def compute_change_metrics(original_rgba: np.ndarray, filtered_rgba: np.ndarray) -> Dict[str, Optional[float]]:
    """PSNR/SSIM of the filtered RGB channels against the original.

    PSNR is inf for an unchanged image. SSIM is None when the image is
    smaller than the SSIM window.
    """
    original_rgb = original_rgba[:, :, :3]
    filtered_rgb = filtered_rgba[:, :, :3]

    diff = original_rgb.astype(np.float64) - filtered_rgb.astype(np.float64)
    mae = float(np.mean(np.abs(diff)))
    if not np.any(diff):
        psnr = float('inf')
    else:
        psnr = float(peak_signal_noise_ratio(original_rgb, filtered_rgb, data_range=255))

    ssim = None
    if min(original_rgb.shape[:2]) >= _SSIM_MIN_SIDE:
        ssim = float(structural_similarity(
            original_rgb, filtered_rgb, channel_axis=2, data_range=255
        ))

    return {
        'psnr_rgb': psnr,
        'ssim_rgb': ssim,
        'mean_abs_diff': mae,
        'changed_pixels': int(np.count_nonzero(np.any(diff != 0, axis=2))),
    }
