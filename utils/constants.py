"""Kernel presets and defaults."""

from typing import Dict, List, Tuple

from models.errors import InvalidInput

# Initial values of the parameter form
DEFAULT_KERNEL: List[float] = [1.0] * 9
DEFAULT_MULTIPLIER: float = 1.0

# name -> (row-major kernel, multiplier)
KERNEL_PRESETS: Dict[str, Tuple[List[float], float]] = {
    'identity': ([0, 0, 0,
                  0, 1, 0,
                  0, 0, 0], 1.0),
    'box_blur': ([1, 1, 1,
                  1, 1, 1,
                  1, 1, 1], 1.0 / 9.0),
    'gaussian_blur': ([1, 2, 1,
                       2, 4, 2,
                       1, 2, 1], 1.0 / 16.0),
    'sharpen': ([0, -1, 0,
                 -1, 5, -1,
                 0, -1, 0], 1.0),
    'edge_detect': ([-1, -1, -1,
                     -1, 8, -1,
                     -1, -1, -1], 1.0),
    'emboss': ([-2, -1, 0,
                -1, 1, 1,
                0, 1, 2], 1.0),
    'laplacian': ([0, 1, 0,
                   1, -4, 1,
                   0, 1, 0], 1.0),
}


def get_preset(name: str) -> Tuple[List[float], float]:
    """Look up a preset by name. Returns a fresh (kernel, multiplier) pair."""
    try:
        kernel, multiplier = KERNEL_PRESETS[name]
    except KeyError:
        known = ', '.join(sorted(KERNEL_PRESETS))
        raise InvalidInput(f"Unknown kernel preset: {name!r} (known: {known})") from None
    return [float(v) for v in kernel], multiplier
