import itertools
import random

import pytest

from pngcrop.image_engine.convert import convert_pixel, convert_pixels, luminance
from pngcrop.image_engine.pixel import RGB, RGBA, Gray, GrayAlpha, PixelFormat, decode_pixel

SAMPLES = {
    PixelFormat.GRAY: Gray(77),
    PixelFormat.GRAY_ALPHA: GrayAlpha(77, 33),
    PixelFormat.RGB: RGB(200, 100, 50),
    PixelFormat.RGBA: RGBA(200, 100, 50, 33),
}


def test_luminance_truncates():
    assert luminance(255, 0, 0) == 76
    assert luminance(0, 255, 0) == 150
    assert luminance(0, 0, 255) == 28
    assert luminance(255, 255, 255) == 255
    assert luminance(0, 0, 0) == 0


def test_luminance_of_gray_triple_is_the_gray():
    assert all(luminance(g, g, g) == g for g in range(256))


@pytest.mark.parametrize("rgb, gray", [((7, 7, 7), 7), ((0, 7, 17), 6)])
def test_luminance_is_exact_where_float_rounds_down(rgb, gray):
    # 0.3*7 + 0.59*7 + 0.11*7 in float32 lands just under 7
    assert luminance(*rgb) == gray
    assert convert_pixels(bytes(rgb), PixelFormat.RGB, PixelFormat.GRAY) == bytes([gray])


@pytest.mark.parametrize("fmt", list(PixelFormat))
def test_identity_returns_input(fmt):
    pixel = SAMPLES[fmt]
    assert convert_pixel(pixel, fmt) is pixel


def test_full_table():
    # luminance(200, 100, 50) = (6000 + 5900 + 550) // 100 = 124
    expected = {
        (PixelFormat.GRAY, PixelFormat.GRAY_ALPHA): GrayAlpha(77, 255),
        (PixelFormat.GRAY, PixelFormat.RGB): RGB(77, 77, 77),
        (PixelFormat.GRAY, PixelFormat.RGBA): RGBA(77, 77, 77, 255),
        (PixelFormat.GRAY_ALPHA, PixelFormat.GRAY): Gray(77),
        (PixelFormat.GRAY_ALPHA, PixelFormat.RGB): RGB(77, 77, 77),
        (PixelFormat.GRAY_ALPHA, PixelFormat.RGBA): RGBA(77, 77, 77, 33),
        (PixelFormat.RGB, PixelFormat.GRAY): Gray(124),
        (PixelFormat.RGB, PixelFormat.GRAY_ALPHA): GrayAlpha(124, 255),
        (PixelFormat.RGB, PixelFormat.RGBA): RGBA(200, 100, 50, 255),
        (PixelFormat.RGBA, PixelFormat.GRAY): Gray(124),
        (PixelFormat.RGBA, PixelFormat.GRAY_ALPHA): GrayAlpha(124, 33),
        (PixelFormat.RGBA, PixelFormat.RGB): RGB(200, 100, 50),
    }
    for (src, dst), want in expected.items():
        assert convert_pixel(SAMPLES[src], dst) == want, (src, dst)


def test_alpha_defaults_to_opaque():
    for src in (PixelFormat.GRAY, PixelFormat.RGB):
        for dst in (PixelFormat.GRAY_ALPHA, PixelFormat.RGBA):
            assert convert_pixel(SAMPLES[src], dst).alpha == 255


@pytest.mark.parametrize("src,dst", list(itertools.product(PixelFormat, PixelFormat)))
def test_bulk_conversion_matches_per_pixel(src, dst):
    rng = random.Random(1234)
    data = bytes(rng.randrange(256) for _ in range(src.channels * 64))
    bulk = convert_pixels(data, src, dst)
    per_pixel = b"".join(
        convert_pixel(decode_pixel(data, i, src), dst).to_bytes() for i in range(0, len(data), src.channels)
    )
    assert bulk == per_pixel
    assert len(bulk) == 64 * dst.channels


def test_bulk_conversion_of_empty_run():
    assert convert_pixels(b"", PixelFormat.RGB, PixelFormat.GRAY) == b""
