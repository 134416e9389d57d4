#!/usr/bin/env python3
"""
mandelbrot_render.py

Render the classic Mandelbrot view as a black/white plain-text pixmap (P3).

Usage
-----
python mandelbrot_render.py <width> <height> [max_iterations] \
  [--output mandelbrot.ppm] [--workers N] [--preview mandelbrot.png] [--progress]

max_iterations falls back to 1024 when it is missing or not an integer.
A positional count other than 2 or 3 prints the usage line as a warning;
missing width/height is fatal.
"""
import argparse
import sys

from mandelbrot_escape import DEFAULT_MAX_ITER, generate_image
from pixmap_image import save_ppm, save_preview

DEFAULT_OUTPUT = "mandelbrot.ppm"
TAG = "[mandelbrot]"


def build_parser():
    ap = argparse.ArgumentParser(
        description="Render the Mandelbrot set as a binary P3 pixmap.",
        usage="%(prog)s <width> <height> <max_iterations> [options]",
    )
    ap.add_argument("positional", nargs="*", metavar="value",
                    help="width, height and optional max_iterations (default 1024).")
    ap.add_argument("--output", default=DEFAULT_OUTPUT, help="P3 file to write.")
    ap.add_argument("--workers", type=int, default=1,
                    help="Worker processes for row rendering (0 = all CPUs).")
    ap.add_argument("--preview", default=None, help="Optional raster preview path (e.g. out.png).")
    ap.add_argument("--progress", action="store_true", help="Show a per-row progress bar.")
    return ap


def _parse_count(text):
    """Plain ASCII decimal with an optional '+', else None."""
    digits = text[1:] if text.startswith("+") else text
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits)


def _positive_int(ap, text, name):
    value = _parse_count(text)
    if value is None or value <= 0:
        ap.error(f"{name} must be a positive integer; got {text!r}")
    return value


def parse_args(argv=None):
    """Return (width, height, max_iter, options)."""
    ap = build_parser()
    args = ap.parse_args(argv)
    values = args.positional

    if not 2 <= len(values) <= 3:
        ap.print_usage(sys.stderr)
    if len(values) < 2:
        ap.error("width and height are required")

    width = _positive_int(ap, values[0], "width")
    height = _positive_int(ap, values[1], "height")
    max_iter = _parse_count(values[2]) if len(values) > 2 else None
    if max_iter is None:
        max_iter = DEFAULT_MAX_ITER

    if args.workers < 0:
        ap.error(f"--workers must be >= 0; got {args.workers}")
    return width, height, max_iter, args


def main(argv=None):
    width, height, max_iter, args = parse_args(argv)
    workers = None if args.workers == 0 else args.workers

    print(f"{TAG} Generating Mandelbrot for {width}x{height} image (max_iterations: {max_iter})")
    image = generate_image(width, height, max_iter, workers=workers, progress=args.progress)
    print(f"{TAG} Pixels in the set: {image.count_mandelbrot_pixels()}")

    try:
        written = [save_ppm(image, args.output)]
        if args.preview:
            written.append(save_preview(image, args.preview))
    except OSError as e:
        raise SystemExit(f"ERROR: writing output failed: {e}")

    print(f"{TAG} Wrote:")
    for path in written:
        print("  ", path)


if __name__ == "__main__":
    main()
