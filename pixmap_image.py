#!/usr/bin/env python3
"""
pixmap_image.py

RGB image buffer for the binary Mandelbrot rendering, plus the plain-text
portable pixmap (P3) reader/writer.

Layout of a P3 file as written here:

    P3
    <width> <height>
    255
    r g b        (one line per pixel, row-major: y outer, x inner)

Pixels are stored in a preallocated numpy array of shape (height, width, 3),
dtype uint8, initialised to black.
"""
import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass

PPM_MAGIC = "P3"
MAX_COLOR = 255


def in_set_color(rgb):
    """True where a color (or the last axis of an RGB array) is not pure white."""
    return np.all(np.asarray(rgb) < MAX_COLOR, axis=-1)


class PixmapFormatError(ValueError):
    """Raised when P3 text cannot be parsed into an Image."""


@dataclass(frozen=True)
class Pixel:
    r: int
    g: int
    b: int

    @classmethod
    def black(cls):
        return cls(0, 0, 0)

    @classmethod
    def white(cls):
        return cls(MAX_COLOR, MAX_COLOR, MAX_COLOR)

    def is_mandelbrot(self) -> bool:
        """Anything that is not pure white counts as inside the set."""
        return bool(in_set_color((self.r, self.g, self.b)))

    def __str__(self):
        return f"{self.r} {self.g} {self.b}"


class Image:
    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"image dimensions must be non-negative; got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)

    @classmethod
    def from_mask(cls, mask: np.ndarray):
        """
        Binary rendering of an in-set mask of shape (height, width):
        True (bounded) -> black, False (escaped) -> white.
        """
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim != 2:
            raise ValueError(f"mask must be 2-D (height, width); got shape {mask.shape}")
        height, width = mask.shape
        image = cls(width, height)
        image.pixels[~mask] = MAX_COLOR
        return image

    def _check(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")

    def get(self, x: int, y: int) -> Pixel:
        self._check(x, y)
        r, g, b = self.pixels[y, x].tolist()
        return Pixel(r, g, b)

    def set(self, x: int, y: int, pixel: Pixel):
        self._check(x, y)
        self.pixels[y, x] = (pixel.r, pixel.g, pixel.b)

    def count_mandelbrot_pixels(self) -> int:
        return int(np.count_nonzero(in_set_color(self.pixels)))

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) and np.array_equal(
            self.pixels, other.pixels
        )

    __hash__ = None

    def __repr__(self):
        return f"Image({self.width}x{self.height})"


# ----------------------------
# P3 text codec
# ----------------------------
def to_ppm(image: Image) -> str:
    header = f"{PPM_MAGIC}\n{image.width} {image.height}\n{MAX_COLOR}\n"
    body = "".join(f"{r} {g} {b}\n" for r, g, b in image.pixels.reshape(-1, 3).tolist())
    return header + body


def save_ppm(image: Image, path) -> str:
    with open(path, "w") as f:
        f.write(to_ppm(image))
    return str(path)


def _tokens(text):
    for line in text.splitlines():
        yield from line.split("#", 1)[0].split()


def _int_token(tok, what):
    try:
        value = int(tok)
    except ValueError:
        raise PixmapFormatError(f"{what} is not an integer: {tok!r}") from None
    if value < 0:
        raise PixmapFormatError(f"{what} must be non-negative; got {value}")
    return value


def parse_ppm(text: str) -> Image:
    toks = list(_tokens(text))
    if len(toks) < 4:
        raise PixmapFormatError("truncated header: expected magic, width, height and max color")
    if toks[0] != PPM_MAGIC:
        raise PixmapFormatError(f"unsupported magic {toks[0]!r}; only plain-text {PPM_MAGIC} is read")

    width = _int_token(toks[1], "width")
    height = _int_token(toks[2], "height")
    maxval = _int_token(toks[3], "max color")
    if not 0 < maxval <= MAX_COLOR:
        raise PixmapFormatError(f"max color must be in 1..{MAX_COLOR}; got {maxval}")

    values = toks[4:]
    expected = width * height * 3
    if len(values) != expected:
        raise PixmapFormatError(f"expected {expected} color values for {width}x{height}; got {len(values)}")

    data = np.array([_int_token(v, "color value") for v in values], dtype=np.int64)
    if data.size and data.max() > maxval:
        raise PixmapFormatError(f"color value {int(data.max())} exceeds max color {maxval}")

    image = Image(width, height)
    image.pixels[...] = data.reshape(height, width, 3).astype(np.uint8)
    return image


def load_ppm(path) -> Image:
    with open(path) as f:
        return parse_ppm(f.read())


def save_preview(image: Image, path) -> str:
    """Raster preview (format chosen by the file extension, e.g. .png)."""
    plt.imsave(path, image.pixels)
    return str(path)
