"""Request/response wrapper around the convolution engine."""

import logging
from typing import Mapping, Optional

from engines.convolution import convolve
from models.convolution_params import ConvolutionParams
from models.errors import InvalidInput
from models.processed_image import ProcessedImage
from utils.metrics import Timer

logger = logging.getLogger(__name__)

REQUEST_KEYS = ('kernel', 'width', 'height', 'image')


def process_image(kernel, image, width: int, height: int, multiplier: float = 1.0) -> ProcessedImage:
    """Filter one RGBA buffer with kernel * multiplier, serially."""
    params = ConvolutionParams(kernel=kernel, multiplier=multiplier)
    return process_with_params(image, width, height, params)


def process_with_params(image, width: int, height: int, params: ConvolutionParams) -> ProcessedImage:
    """Filter one RGBA buffer and package it with its dimensions."""
    timer = Timer()
    data = timer.measure(
        convolve, image, width, height, params.kernel, params.multiplier,
        workers=params.workers, band_rows=params.band_rows
    )
    logger.info("Filtered %dx%d image in %.2f ms", width, height, timer.elapsed_ms)

    return ProcessedImage(width=int(width), height=int(height), data=data, elapsed_ms=timer.elapsed_ms)


def process_request(request: Mapping, params: Optional[ConvolutionParams] = None) -> dict:
    """Handle a wire request {kernel, width, height, image[, multiplier]}.

    Returns {width, height, data}. params, when given, only supplies the
    execution settings (workers, band_rows).
    """
    if not isinstance(request, Mapping):
        raise InvalidInput(f"Request must be a mapping, got {type(request).__name__}")
    missing = [key for key in REQUEST_KEYS if key not in request]
    if missing:
        raise InvalidInput(f"Request is missing: {', '.join(missing)}")

    conv_params = ConvolutionParams(
        kernel=request['kernel'],
        multiplier=request.get('multiplier', 1.0),
        workers=params.workers if params else 1,
        band_rows=params.band_rows if params else None,
    )
    result = process_with_params(request['image'], request['width'], request['height'], conv_params)
    return result.to_dict()
