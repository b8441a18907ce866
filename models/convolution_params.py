"""Convolution parameters."""

import math
import numbers
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from models.errors import InvalidInput

KERNEL_SIZE = 3
KERNEL_LENGTH = KERNEL_SIZE * KERNEL_SIZE


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def validate_kernel(kernel) -> np.ndarray:
    """Return kernel as a 3x3 float64 array or raise InvalidInput.

    Only ints and floats are accepted; bools and numeric strings are
    rejected rather than converted.
    """
    if isinstance(kernel, np.ndarray):
        if kernel.dtype.kind not in 'iuf':
            raise InvalidInput(f"Kernel values must be real numbers, got {kernel.dtype}")
        values = kernel.astype(np.float64).ravel()
    else:
        try:
            items = np.asarray(kernel, dtype=object).ravel()
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Kernel values must be real numbers: {e}") from e
        for pos, item in enumerate(items):
            if not _is_real(item):
                raise InvalidInput(f"Kernel value at position {pos + 1} is not a real number: {item!r}")
        try:
            values = items.astype(np.float64)
        except OverflowError as e:
            raise InvalidInput(f"Kernel value does not fit in float64: {e}") from e

    if values.size != KERNEL_LENGTH:
        raise InvalidInput(f"Kernel must have exactly {KERNEL_LENGTH} values, got {values.size}")
    if not np.all(np.isfinite(values)):
        bad = int(np.flatnonzero(~np.isfinite(values))[0])
        raise InvalidInput(f"Kernel value at position {bad + 1} is not finite")
    return values.reshape(KERNEL_SIZE, KERNEL_SIZE)


def validate_multiplier(multiplier) -> float:
    """Return multiplier as float or raise InvalidInput."""
    if not _is_real(multiplier):
        raise InvalidInput(f"Multiplier must be a real number, got {type(multiplier).__name__}")
    value = float(multiplier)
    if not math.isfinite(value):
        raise InvalidInput(f"Kernel multiplier must be finite, got {value}")
    return value


def validate_positive_int(value, name: str) -> int:
    """Positive int check shared by dimensions and worker settings."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInput(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidInput(f"{name} must be positive, got {value}")
    return int(value)


@dataclass
class ConvolutionParams:
    """3x3 kernel, multiplier and execution settings."""

    kernel: Sequence[float] = field(default_factory=lambda: [1.0] * KERNEL_LENGTH)
    multiplier: float = 1.0
    workers: int = 1
    band_rows: Optional[int] = None

    def __post_init__(self):
        self.kernel = validate_kernel(self.kernel)
        self.multiplier = validate_multiplier(self.multiplier)
        self.workers = validate_positive_int(self.workers, "workers")
        if self.band_rows is not None:
            self.band_rows = validate_positive_int(self.band_rows, "band_rows")

    @property
    def effective(self) -> np.ndarray:
        """Kernel with the multiplier folded into every coefficient."""
        return self.kernel * self.multiplier

    @classmethod
    def from_preset(cls, name: str, **overrides) -> "ConvolutionParams":
        from utils.constants import get_preset

        kernel, multiplier = get_preset(name)
        overrides.setdefault("multiplier", multiplier)
        return cls(kernel=kernel, **overrides)
