import random
import warnings

import numpy as np
import pytest

from complex_arith import Complex
from mandelbrot_escape import (
    check_pixel,
    classify_row,
    generate_image,
    generate_mask,
    pixel_to_plane,
)
from pixmap_image import Pixel, parse_ppm, to_ppm


def test_cardioid_point_is_bounded():
    assert check_pixel(Complex(-0.875, 0.0), 1024) is None


def test_outside_point_escapes():
    i = check_pixel(Complex(-0.1, 0.9), 1024)
    assert i is not None
    assert 0 <= i < 1024


def test_escape_index_far_point():
    # z0 = 0 is checked at i = 0, z1 = c (|c|^2 = 9) at i = 1
    assert check_pixel(Complex(3.0, 0.0), 10) == 1


def test_zero_iterations_never_escape():
    assert check_pixel(Complex(100.0, 100.0), 0) is None


def test_pixel_to_plane_corners():
    assert pixel_to_plane(0, 0, 350, 200) == Complex(-0.75 * 3.5, -0.5 * 2.0)
    c = pixel_to_plane(175, 100, 350, 200)
    assert c.re == pytest.approx((0.5 - 0.75) * 3.5)
    assert c.im == pytest.approx(0.0)


def test_classify_row_matches_check_pixel():
    row = classify_row(7, 30, 20, 64)
    expected = [check_pixel(pixel_to_plane(x, 7, 30, 20), 64) is None for x in range(30)]
    assert row.tolist() == expected


def test_max_iter_zero_is_all_black():
    img = generate_image(16, 9, 0)
    assert img.count_mandelbrot_pixels() == 16 * 9
    assert img.get(0, 0) == Pixel.black()


def test_image_has_both_colors():
    img = generate_image(70, 40, 64)
    assert 0 < img.count_mandelbrot_pixels() < 70 * 40
    assert img.get(0, 0) == Pixel.white()


def test_idempotent():
    assert generate_image(60, 35, 128) == generate_image(60, 35, 128)


def test_row_order_does_not_matter():
    width, height = 48, 30
    rows = list(range(height))
    random.Random(11).shuffle(rows)
    a = generate_mask(width, height, 200)
    b = generate_mask(width, height, 200, rows=rows)
    c = generate_mask(width, height, 200, rows=reversed(range(height)))
    assert np.array_equal(a, b)
    assert np.array_equal(a, c)


def test_parallel_matches_sequential():
    seq = generate_mask(52, 31, 150, workers=1)
    par = generate_mask(52, 31, 150, workers=3)
    assert np.array_equal(seq, par)


def test_progress_flag_does_not_change_result():
    assert np.array_equal(
        generate_mask(20, 10, 50, progress=True),
        generate_mask(20, 10, 50),
    )


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(width=0, height=5, max_iter=10),
        dict(width=5, height=0, max_iter=10),
        dict(width=5, height=5, max_iter=-1),
        dict(width=5, height=5, max_iter=10, workers=0),
        dict(width=5, height=3, max_iter=10, rows=[0, 1]),
        dict(width=5, height=3, max_iter=10, rows=[0, 1, 1]),
    ],
)
def test_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        generate_mask(**kwargs)


def test_generated_image_survives_pixmap_round_trip():
    img = generate_image(25, 15, 100)
    assert parse_ppm(to_ppm(img)) == img


def test_pixel_count_525x300():
    img = generate_image(525, 300, 1024, workers=None)
    assert img.count_mandelbrot_pixels() == 34062


def test_pixel_count_300x525():
    img = generate_image(300, 525, 1024, workers=None)
    assert img.count_mandelbrot_pixels() == 33965


def test_parallel_with_progress_bar_does_not_fork_threaded():
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        par = generate_mask(40, 30, 50, workers=2, progress=True)
    assert np.array_equal(par, generate_mask(40, 30, 50))
