"""3x3 convolution of RGBA pixel buffers.

Each color channel is filtered independently with clamp-to-edge borders:

    out[x, y, c] = round(clamp(sum(k[dy+1, dx+1] * m * in[x+dx, y+dy, c]), 0, 255))

for dx, dy in {-1, 0, 1}. The kernel is not flipped (correlation), matching
how kernel entries are laid out in the parameter form. Accumulation is float64
and clamping happens once, at the end; kernels too large for that are
rescaled during accumulation and saturate. Rounding is half away from zero, which
for the clamped, non-negative sums is floor(v + 0.5). Alpha is copied through.
"""

import logging
import time
from typing import Optional

import numpy as np
from joblib import Parallel, delayed

from engines.band_processor import default_band_rows, split_into_bands, merge_bands
from engines.border import pad_edge
from models.convolution_params import (
    KERNEL_SIZE,
    validate_kernel,
    validate_multiplier,
    validate_positive_int,
)
from models.errors import AllocationFailure, InvalidInput

logger = logging.getLogger(__name__)

CHANNELS = 4
COLOR_CHANNELS = 3
MAX_SAMPLE = 255.0
# Largest |coefficient| for which nine taps over 255 cannot overflow
SAFE_COEFFICIENT = np.finfo(np.float64).max / (KERNEL_SIZE * KERNEL_SIZE * MAX_SAMPLE)


def effective_kernel(kernel, multiplier=1.0) -> np.ndarray:
    """3x3 float64 kernel with the multiplier applied to every coefficient.

    Passing a pre-scaled kernel with multiplier 1 gives the same array, so
    both forms produce byte-identical output.
    """
    values = validate_kernel(kernel)
    multiplier = validate_multiplier(multiplier)
    with np.errstate(over='ignore'):
        eff = values * multiplier
    if not np.all(np.isfinite(eff)):
        raise InvalidInput("Kernel value times multiplier overflows float64")
    return eff


def accumulation_scale(eff: np.ndarray) -> float:
    """Divisor applied to the kernel so a 9-tap sum over 255s stays finite.

    1.0 for any kernel whose worst-case sum already fits in float64.
    """
    largest = float(np.max(np.abs(eff)))
    if largest <= SAFE_COEFFICIENT:
        return 1.0
    return largest


def _samples_from_sequence(pixels) -> np.ndarray:
    try:
        arr = np.asarray(pixels)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Pixel buffer is not a flat sequence of samples: {e}") from e

    if arr.size == 0:
        return arr.reshape(-1)
    if arr.dtype.kind not in 'iu':
        raise InvalidInput(f"Pixel samples must be integers, got {arr.dtype}")
    if arr.min() < 0 or arr.max() > 255:
        raise InvalidInput("Pixel samples must be in 0..255")
    return arr.astype(np.uint8).reshape(-1)


def as_pixel_array(pixels, width, height) -> np.ndarray:
    """Validate a flat RGBA buffer and return it as an (H, W, 4) uint8 array.

    Accepts bytes-like objects, uint8 ndarrays of any shape, or sequences of
    ints. The input is never written to.
    """
    width = validate_positive_int(width, "width")
    height = validate_positive_int(height, "height")
    expected = width * height * CHANNELS

    if isinstance(pixels, np.ndarray):
        if pixels.dtype != np.uint8:
            raise InvalidInput(f"Pixel array must be uint8, got {pixels.dtype}")
        flat = pixels.reshape(-1)
    elif isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(pixels, dtype=np.uint8)
    else:
        flat = _samples_from_sequence(pixels)

    if flat.size != expected:
        raise InvalidInput(
            f"Pixel buffer length {flat.size} does not match "
            f"{width}x{height}x{CHANNELS} = {expected}"
        )
    return flat.reshape(height, width, CHANNELS)


def _correlate_band(padded: np.ndarray, eff: np.ndarray, start: int, stop: int, scale: float = 1.0):
    """Filter output rows [start, stop). Returns (start, stop, uint8 rows).

    eff is already divided by scale; the sum is multiplied back before
    clamping, where an overflow to +-inf saturates like any other value.
    """
    width = padded.shape[1] - 2
    acc = np.zeros((stop - start, width, COLOR_CHANNELS), dtype=np.float64)
    term = np.empty_like(acc)

    for ky in range(KERNEL_SIZE):
        for kx in range(KERNEL_SIZE):
            coeff = eff[ky, kx]
            if coeff == 0.0:
                continue
            np.multiply(padded[start + ky:stop + ky, kx:kx + width], coeff, out=term)
            acc += term

    if scale != 1.0:
        with np.errstate(over='ignore'):
            np.multiply(acc, scale, out=acc)
    np.clip(acc, 0.0, MAX_SAMPLE, out=acc)
    np.add(acc, 0.5, out=acc)
    np.floor(acc, out=acc)
    return start, stop, acc.astype(np.uint8)


def _convolve_rgba(src: np.ndarray, eff: np.ndarray, workers: int, band_rows: Optional[int]) -> np.ndarray:
    height, width = src.shape[:2]
    start_time = time.perf_counter()

    try:
        out = np.empty((height, width, CHANNELS), dtype=np.uint8)
        padded = pad_edge(src[:, :, :COLOR_CHANNELS])

        if band_rows is None:
            band_rows = height if workers == 1 else default_band_rows(height, workers)
        bands = split_into_bands(height, band_rows)
        logger.debug(
            "Convolving %dx%d, kernel=%s, %d band(s) on %d worker(s)",
            width, height, eff.ravel().tolist(), len(bands), workers
        )

        scale = accumulation_scale(eff)
        taps = eff / scale if scale != 1.0 else eff

        if workers == 1 or len(bands) == 1:
            results = [_correlate_band(padded, taps, start, stop, scale) for start, stop in bands]
        else:
            # Threads share the read-only padded source
            results = Parallel(n_jobs=workers, prefer='threads')(
                delayed(_correlate_band)(padded, taps, start, stop, scale) for start, stop in bands
            )

        merge_bands(results, out, slice(0, COLOR_CHANNELS))
        out[:, :, 3] = src[:, :, 3]
    except MemoryError as e:
        raise AllocationFailure(f"Could not allocate buffers for a {width}x{height} image") from e

    logger.debug("Convolution done in %.2f ms", (time.perf_counter() - start_time) * 1000.0)
    return out


def _validate_execution(workers, band_rows):
    workers = validate_positive_int(workers, "workers")
    if band_rows is not None:
        band_rows = validate_positive_int(band_rows, "band_rows")
    return workers, band_rows


def convolve(
    pixels,
    width: int,
    height: int,
    kernel,
    multiplier: float = 1.0,
    *,
    workers: int = 1,
    band_rows: Optional[int] = None
) -> np.ndarray:
    """Filter a flat RGBA buffer with a 3x3 kernel.

    Returns a newly allocated flat uint8 array of width*height*4 samples.
    All arguments are checked before any work; bad values raise InvalidInput.
    workers > 1 filters row bands concurrently with identical results.
    """
    src = as_pixel_array(pixels, width, height)
    eff = effective_kernel(kernel, multiplier)
    workers, band_rows = _validate_execution(workers, band_rows)
    return _convolve_rgba(src, eff, workers, band_rows).reshape(-1)


def convolve_rgba(
    image: np.ndarray,
    kernel,
    multiplier: float = 1.0,
    *,
    workers: int = 1,
    band_rows: Optional[int] = None
) -> np.ndarray:
    """Filter an (H, W, 4) uint8 image. Returns a new (H, W, 4) array."""
    if not isinstance(image, np.ndarray) or image.ndim != 3 or image.shape[2] != CHANNELS:
        shape = getattr(image, 'shape', None)
        raise InvalidInput(f"Expected an (H, W, 4) RGBA array, got shape {shape}")
    height, width = image.shape[:2]
    if height == 0 or width == 0:
        raise InvalidInput(f"Image dimensions must be positive, got {width}x{height}")
    if image.dtype != np.uint8:
        raise InvalidInput(f"Pixel array must be uint8, got {image.dtype}")

    eff = effective_kernel(kernel, multiplier)
    workers, band_rows = _validate_execution(workers, band_rows)
    return _convolve_rgba(image, eff, workers, band_rows)
