"""
Kernel Convolution Studio
Apply a 3x3 kernel and multiplier to an RGBA image.
"""

import argparse
import json
import logging
import sys

from models.errors import AllocationFailure, InvalidInput

logger = logging.getLogger('kernelconv')

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog='kernelconv',
        description='Filter an image with a 3x3 convolution kernel.',
    )
    source = ap.add_mutually_exclusive_group()
    source.add_argument('image', nargs='?', help='input image path')
    source.add_argument('--synthetic', metavar='KEY', nargs='?', const='checkerboard',
                        help='use a generated test image (checkerboard, gradient, alpha_ramp, noise)')
    source.add_argument('--request', metavar='JSON', help='wire request file {kernel, width, height, image}')
    source.add_argument('--list-presets', action='store_true', help='print kernel presets and exit')

    kernel = ap.add_mutually_exclusive_group()
    kernel.add_argument('--preset', help='named kernel preset')
    kernel.add_argument('--kernel', nargs=9, type=float, metavar='K', help='nine row-major kernel values')

    ap.add_argument('--multiplier', type=float, default=None, help='scalar applied to every kernel value')
    ap.add_argument('--workers', type=int, default=None, help='row bands filtered in parallel')
    ap.add_argument('--band-rows', type=int, default=None, help='rows per band')
    ap.add_argument('-o', '--output', default=None, help='output path (PNG, or JSON with --request)')
    return ap


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def _build_params(args, settings):
    from models.convolution_params import ConvolutionParams
    from utils.constants import DEFAULT_KERNEL, DEFAULT_MULTIPLIER

    workers = args.workers if args.workers is not None else settings.workers
    band_rows = args.band_rows if args.band_rows is not None else settings.band_rows

    if args.preset:
        overrides = {'workers': workers, 'band_rows': band_rows}
        if args.multiplier is not None:
            overrides['multiplier'] = args.multiplier
        return ConvolutionParams.from_preset(args.preset, **overrides)

    return ConvolutionParams(
        kernel=args.kernel if args.kernel else DEFAULT_KERNEL,
        multiplier=args.multiplier if args.multiplier is not None else DEFAULT_MULTIPLIER,
        workers=workers,
        band_rows=band_rows,
    )


def run_list_presets() -> int:
    from utils.constants import KERNEL_PRESETS

    for name, (kernel, multiplier) in KERNEL_PRESETS.items():
        rows = [kernel[i:i + 3] for i in range(0, 9, 3)]
        print(f"{name:<14} x{multiplier:.4g}  {rows}")
    return EXIT_OK


def run_request(args, params) -> int:
    from engines.pipeline import process_request

    with open(args.request, 'r', encoding='utf-8') as fh:
        request = json.load(fh)

    response = process_request(request, params)
    output = args.output or 'response.json'
    with open(output, 'w', encoding='utf-8') as fh:
        json.dump(response, fh)

    print(f"Image: {response['width']}x{response['height']}")
    print(f"Saved: {output}")
    return EXIT_OK


def run_image(args, params) -> int:
    from engines.pipeline import process_with_params
    from utils.image_io import load_image, save_image
    from utils.metrics import compute_change_metrics
    from utils.test_images import generate_demo_image

    if args.synthetic:
        print(f"Generating test image ({args.synthetic})...")
        image = generate_demo_image(args.synthetic)
        if image is None:
            raise InvalidInput(f"Unknown synthetic image: {args.synthetic!r}")
    else:
        print(f"Loading: {args.image}")
        image = load_image(args.image)

    height, width = image.shape[:2]
    print(f"Image: {width}x{height}")
    print(f"Kernel: {params.kernel.tolist()} x {params.multiplier:g}")

    result = process_with_params(image, width, height, params)
    filtered = result.as_array()
    metrics = compute_change_metrics(image, filtered)

    print("\n=== Results ===")
    print(f"PSNR vs original: {metrics['psnr_rgb']:.2f} dB")
    if metrics['ssim_rgb'] is not None:
        print(f"SSIM vs original: {metrics['ssim_rgb']:.4f}")
    print(f"Changed pixels:   {metrics['changed_pixels']}")
    print(f"Time:             {result.elapsed_ms:.2f} ms")

    output = args.output or 'filtered.png'
    save_image(filtered, output)
    print(f"\nSaved: {output}")
    return EXIT_OK


def main(argv=None) -> int:
    from utils.config import load_settings

    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        ap.error(str(e))
    _configure_logging(settings.log_level_value)

    if args.list_presets:
        return run_list_presets()
    if not (args.image or args.synthetic or args.request):
        ap.error('an image path, --synthetic or --request is required')

    try:
        params = _build_params(args, settings)
        if args.request:
            return run_request(args, params)
        return run_image(args, params)
    except InvalidInput as e:
        logger.error("Invalid input: %s", e)
        return EXIT_INVALID
    except AllocationFailure as e:
        logger.error("Out of memory: %s", e)
        return EXIT_FAILURE
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_FAILURE


if __name__ == '__main__':
    sys.exit(main())
