"""Convolution engines - pure computation, no I/O."""

from .border import clamp_coordinate, pad_edge
from .band_processor import split_into_bands, merge_bands, default_band_rows
from .convolution import convolve, convolve_rgba, effective_kernel, as_pixel_array
from .pipeline import process_image, process_with_params, process_request

__all__ = [
    'clamp_coordinate',
    'pad_edge',
    'split_into_bands',
    'merge_bands',
    'default_band_rows',
    'convolve',
    'convolve_rgba',
    'effective_kernel',
    'as_pixel_array',
    'process_image',
    'process_with_params',
    'process_request',
]
