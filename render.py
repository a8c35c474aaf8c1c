import os
import sys
import warnings
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import numpy as np
import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

import PIL.Image

from mandelbrot import (
    BACKENDS,
    GridParameters,
    MandelbrotError,
    legacy_intensity,
    load_grid,
    render_frame,
    save_grid,
    to_intensity,
)

SIXTEEN_BIT_FORMATS = {"PNG", "TIFF"}


def select_device():
    """Place TensorFlow work on the first GPU when one is visible."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Memory growth must be set before the GPU is initialised.
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set as a 16-bit grayscale image.')

    parser.add_argument('--x-start', type=float,
                        dest='x_start', help='real coordinate of the first grid column',
                        metavar='X_START', default=-2.0)

    parser.add_argument('--y-start', type=float,
                        dest='y_start', help='imaginary coordinate of the first grid row',
                        metavar='Y_START', default=-2.0)

    parser.add_argument('--width', type=float,
                        dest='width', help='width of the sampled region in the complex plane',
                        metavar='WIDTH', default=4.0)

    parser.add_argument('--height', type=float,
                        dest='height', help='height of the sampled region in the complex plane',
                        metavar='HEIGHT', default=4.0)

    parser.add_argument('--rows', type=int,
                        dest='rows', help='number of sample rows',
                        metavar='ROWS', default=512)

    parser.add_argument('--cols', type=int,
                        dest='cols', help='number of sample columns',
                        metavar='COLS', default=512)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration cap; points that reach it are treated as inside the set',
                        metavar='MAX_ITERATIONS', default=100)

    parser.add_argument('--max-modulus', type=float,
                        dest='max_modulus', help='escape radius used to decide divergence',
                        metavar='MAX_MODULUS', default=2.0)

    parser.add_argument('--backend', choices=BACKENDS, default='python',
                        help='evaluate cells one by one in Python or all at once with TensorFlow')

    parser.add_argument('--palette', choices=['standard', 'legacy'], default='standard',
                        help='intensity mapping; "legacy" reproduces images from the old desktop viewer')

    parser.add_argument('--load-grid', dest='load_grid', type=str, metavar='PATH',
                        help='read a saved iteration grid instead of computing one; pass the '
                             '--max-iterations the grid was generated with so in-set cells render black')

    parser.add_argument('--save-grid', dest='save_grid', type=str, metavar='PATH',
                        help='write the iteration grid as a text file')

    parser.add_argument('--output', dest='output', type=str, metavar='PATH',
                        help='write the grayscale image to PATH')

    parser.add_argument('--format', type=str,
                        dest='format', help='image format; defaults to the extension of --output, else "png"',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(pixels: np.ndarray, image_format: str) -> PIL.Image.Image:
    """Wrap a uint16 pixel buffer in a Pillow image suited to ``image_format``."""

    if _pil_format_name(image_format) in SIXTEEN_BIT_FORMATS:
        return PIL.Image.fromarray(pixels.astype(np.uint16))
    return PIL.Image.fromarray((pixels >> 8).astype(np.uint8))


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if opt.load_grid is None and opt.save_grid is None and opt.output is None:
        parser.error('nothing to do: pass --output and/or --save-grid.')

    try:
        if opt.load_grid is not None:
            iterations = load_grid(opt.load_grid)
            log("Loaded %dx%d grid from %s" % (iterations.shape[0], iterations.shape[1], opt.load_grid))
            log("Cells equal to --max-iterations (%d) render black" % opt.max_iterations)
        else:
            params = GridParameters(
                x_start=opt.x_start,
                y_start=opt.y_start,
                width=opt.width,
                height=opt.height,
                rows=opt.rows,
                cols=opt.cols,
                max_iterations=opt.max_iterations,
                max_modulus=opt.max_modulus,
            )
            device = None
            if opt.backend == 'tensorflow':
                log("TensorFlow version: %s" % tf.__version__)
                device = select_device()
            result = render_frame(params, backend=opt.backend, device=device)
            iterations = result.iterations
            log("Computed %dx%d grid with the %s backend" % (params.rows, params.cols, opt.backend))

        if opt.save_grid is not None:
            path = save_grid(iterations, opt.save_grid)
            log("Saved grid to %s" % path)

        if opt.output is not None:
            if opt.palette == 'legacy':
                pixels = legacy_intensity(iterations)
            else:
                pixels = to_intensity(iterations, opt.max_iterations)
            output_path = Path(opt.output).expanduser()
            image_format = (opt.format or output_path.suffix or "png").lower().lstrip(".")
            if not output_path.suffix:
                output_path = output_path.with_suffix(f".{image_format}")
            write_single_image(to_image(pixels, image_format), output_path, image_format)
            log("Saved image to %s" % output_path)
    except MandelbrotError as exc:
        parser.error(str(exc))
    except OSError as exc:
        parser.error(f"{exc.filename}: {exc.strerror}")


if __name__ == '__main__':
    main()
