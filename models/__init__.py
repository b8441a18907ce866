"""Data models for convolution parameters, results and errors."""

from .errors import ConvolutionError, InvalidInput, AllocationFailure
from .convolution_params import ConvolutionParams
from .processed_image import ProcessedImage

__all__ = [
    'ConvolutionError',
    'InvalidInput',
    'AllocationFailure',
    'ConvolutionParams',
    'ProcessedImage',
]
