"""Error taxonomy for the convolution engine."""


class ConvolutionError(Exception):
    """Base class for engine failures."""


class InvalidInput(ConvolutionError, ValueError):
    """Bad dimensions, buffer length, kernel, multiplier or settings.

    Raised before any computation starts; no partial output exists.
    """


class AllocationFailure(ConvolutionError, MemoryError):
    """Output or working buffer could not be allocated."""
