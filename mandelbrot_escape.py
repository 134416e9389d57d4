#!/usr/bin/env python3
"""
mandelbrot_escape.py

Escape-time classification of the classic Mandelbrot view.

For every pixel (x, y) of a width x height image the point

    cx = (x / width  - 0.75) * 3.5
    cy = (y / height - 0.5)  * 2.0

is iterated with z <- z*z + c from z = 0. A point escapes at iteration i when
|z|^2 > 4 is observed before step i runs; points that never escape within
max_iter steps are treated as members of the set (rendered black).

Rows are independent units of work. generate_mask() fills a preallocated
(height, width) boolean buffer one row per task, either in-process or across a
multiprocessing.Pool; the result does not depend on the order rows are visited.
"""
import numpy as np
from multiprocessing import Pool, cpu_count
from tqdm import tqdm

from complex_arith import Complex, add, multiply, squared_magnitude
from pixmap_image import Image

# -----------------------------
# Knobs
# -----------------------------
ESCAPE_RADIUS_SQ = 4.0  # |z| > 2 always diverges
DEFAULT_MAX_ITER = 1024

X_OFFSET, X_SCALE = 0.75, 3.5
Y_OFFSET, Y_SCALE = 0.5, 2.0


def check_pixel(c: Complex, max_iter: int):
    """Return the escape iteration index for c, or None if it stays bounded."""
    z = Complex()
    for i in range(max_iter):
        if squared_magnitude(z) > ESCAPE_RADIUS_SQ:
            return i
        z = add(multiply(z, z), c)
    return None


def pixel_to_plane(x: int, y: int, width: int, height: int) -> Complex:
    cx = (float(x) / float(width) - X_OFFSET) * X_SCALE
    cy = (float(y) / float(height) - Y_OFFSET) * Y_SCALE
    return Complex(cx, cy)


def classify_row(y: int, width: int, height: int, max_iter: int) -> np.ndarray:
    """In-set flags for row y (True = bounded)."""
    out = np.empty(width, dtype=bool)
    for x in range(width):
        out[x] = check_pixel(pixel_to_plane(x, y, width, height), max_iter) is None
    return out


def _row_task(args):
    y, width, height, max_iter = args
    return y, classify_row(y, width, height, max_iter)


def _validate(width, height, max_iter):
    if width <= 0 or height <= 0:
        raise ValueError(f"width and height must be positive; got {width}x{height}")
    if max_iter < 0:
        raise ValueError(f"max_iter must be non-negative; got {max_iter}")


def generate_mask(width, height, max_iter, workers=1, rows=None, progress=False) -> np.ndarray:
    """
    Boolean (height, width) array, True where the pixel never escaped.

    workers=None uses every CPU; workers=1 stays in-process. rows, if given,
    must be a permutation of range(height) and sets the order rows are handed out.
    """
    _validate(width, height, max_iter)
    if workers is None:
        workers = cpu_count()
    if workers < 1:
        raise ValueError(f"workers must be >= 1; got {workers}")

    order = list(range(height)) if rows is None else [int(y) for y in rows]
    if sorted(order) != list(range(height)):
        raise ValueError("rows must visit every row index exactly once")

    mask = np.zeros((height, width), dtype=bool)
    tasks = [(y, width, height, max_iter) for y in order]

    bar_opts = dict(total=height, desc="rows", unit="row", disable=not progress)
    if workers == 1 or height == 1:
        with tqdm(**bar_opts) as bar:
            for y, row in map(_row_task, tasks):
                mask[y] = row
                bar.update(1)
    else:
        chunk = max(1, height // (workers * 8))
        # workers must be forked before tqdm starts its monitor thread
        with Pool(processes=workers) as pool, tqdm(**bar_opts) as bar:
            for y, row in pool.imap_unordered(_row_task, tasks, chunksize=chunk):
                mask[y] = row
                bar.update(1)
    return mask


def generate_image(width, height, max_iter, workers=1, progress=False) -> Image:
    """Black (bounded) / white (escaped) rendering of the classic view."""
    mask = generate_mask(width, height, max_iter, workers=workers, progress=progress)
    return Image.from_mask(mask)
