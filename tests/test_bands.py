"""Tests for border handling and row-band execution."""

import numpy as np
import pytest

import engines.convolution as convolution
from engines.band_processor import default_band_rows, merge_bands, split_into_bands
from engines.border import clamp_coordinate, pad_edge
from engines.convolution import convolve, convolve_rgba
from models.errors import AllocationFailure, InvalidInput
from utils.constants import get_preset
from utils.test_images import generate_noise


def test_clamp_coordinate():
    """Out-of-range indices snap to the nearest edge."""
    assert clamp_coordinate(-1, 5) == 0
    assert clamp_coordinate(5, 5) == 4
    assert clamp_coordinate(2, 5) == 2
    assert clamp_coordinate(-1, 1) == 0


def test_pad_edge_replicates_border():
    """Frame pixels copy the nearest edge pixel."""
    channels = np.arange(2 * 3 * 1, dtype=np.uint8).reshape(2, 3, 1)
    padded = pad_edge(channels)
    assert padded.shape == (4, 5, 1)
    assert padded.dtype == np.float64
    assert padded[0, 0, 0] == channels[0, 0, 0]
    assert padded[-1, -1, 0] == channels[-1, -1, 0]
    assert np.array_equal(padded[1:-1, 1:-1], channels)
    assert np.array_equal(padded[0, 1:-1], channels[0])


def test_split_into_bands_covers_height():
    """Bands are consecutive and cover [0, height) exactly once."""
    bands = split_into_bands(23, 5)
    assert bands == [(0, 5), (5, 10), (10, 15), (15, 20), (20, 23)]
    assert split_into_bands(4, 10) == [(0, 4)]
    with pytest.raises(ValueError):
        split_into_bands(4, 0)


def test_default_band_rows():
    """About four bands per worker, never below the minimum."""
    assert default_band_rows(1000, 4) == 63
    assert default_band_rows(10, 8) == 16


def test_merge_bands_writes_rows():
    """Band results land in their row ranges."""
    out = np.zeros((4, 2, 4), dtype=np.uint8)
    bands = [(0, 2, np.full((2, 2, 3), 7, np.uint8)), (2, 4, np.full((2, 2, 3), 9, np.uint8))]
    merge_bands(bands, out, slice(0, 3))
    assert np.all(out[:2, :, :3] == 7)
    assert np.all(out[2:, :, :3] == 9)
    assert np.all(out[:, :, 3] == 0)


@pytest.mark.parametrize("workers, band_rows", [(1, 3), (2, None), (3, 4), (4, 1)])
def test_banded_matches_serial(workers, band_rows):
    """Row-band and parallel execution give the serial bytes."""
    img = generate_noise(29, 37, seed=7)
    kernel, multiplier = get_preset('gaussian_blur')
    serial = convolve_rgba(img, kernel, multiplier)
    banded = convolve_rgba(img, kernel, multiplier, workers=workers, band_rows=band_rows)
    assert np.array_equal(serial, banded)


def test_rejects_bad_execution_settings():
    """workers and band_rows must be positive ints."""
    with pytest.raises(InvalidInput):
        convolve(bytes(16), 2, 2, [1] * 9, workers=0)
    with pytest.raises(InvalidInput):
        convolve(bytes(16), 2, 2, [1] * 9, band_rows=-3)
    with pytest.raises(InvalidInput):
        convolve(bytes(16), 2, 2, [1] * 9, workers=1.5)


def test_allocation_failure(monkeypatch):
    """MemoryError during setup surfaces as AllocationFailure."""
    def fail(*args, **kwargs):
        raise MemoryError

    monkeypatch.setattr(convolution, 'pad_edge', fail)
    with pytest.raises(AllocationFailure) as exc_info:
        convolve(bytes(16), 2, 2, [1] * 9)
    assert isinstance(exc_info.value, MemoryError)
    assert isinstance(exc_info.value.__cause__, MemoryError)
