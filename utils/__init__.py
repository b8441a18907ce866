"""Shared utilities.

image_io (OpenCV) and config (python-dotenv) are imported from their
modules directly so the engines do not load them.
"""

from .constants import DEFAULT_KERNEL, DEFAULT_MULTIPLIER, KERNEL_PRESETS, get_preset
from .metrics import Timer, compute_change_metrics
from .test_images import generate_checkerboard, generate_gradient, generate_alpha_ramp

__all__ = [
    'DEFAULT_KERNEL',
    'DEFAULT_MULTIPLIER',
    'KERNEL_PRESETS',
    'get_preset',
    'Timer',
    'compute_change_metrics',
    'generate_checkerboard',
    'generate_gradient',
    'generate_alpha_ramp',
]
