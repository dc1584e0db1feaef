"""Conversions between the four pixel formats.

Rules:
- to gray: luminance 0.3*R + 0.59*G + 0.11*B, truncated; alpha dropped
- to gray+alpha: same gray, alpha copied or 255
- to RGB/RGBA from gray: R = G = B = gray
- alpha is copied when the source has one, otherwise 255; never inferred
- same format to same format returns the input unchanged

`convert_pixel` handles one pixel; `convert_pixels` applies the same table to
a whole byte run with numpy.
"""

from __future__ import annotations

import numpy as np

from .pixel import MAX_CHANNEL_VALUE, RGB, RGBA, Gray, GrayAlpha, Pixel, PixelFormat


def luminance(red: int, green: int, blue: int) -> int:
    """Truncated 0.3/0.59/0.11 weighted sum.

    Integer weights keep the result exact: (30, 150, 28) for pure red, green
    and blue, and g for any (g, g, g). This deliberately differs from
    single-precision float arithmetic, which truncates some sums one lower.
    """
    return (30 * red + 59 * green + 11 * blue) // 100


def convert_pixel(pixel: Pixel, target: PixelFormat) -> Pixel:
    if pixel.format is target:
        return pixel

    match pixel:
        case Gray(gray=g):
            red = green = blue = g
            alpha = None
        case GrayAlpha(gray=g, alpha=a):
            red = green = blue = g
            alpha = a
        case RGB(red=red, green=green, blue=blue):
            alpha = None
        case RGBA(red=red, green=green, blue=blue, alpha=a):
            alpha = a
        case _:
            raise TypeError(f"not a pixel: {pixel!r}")

    if alpha is None:
        alpha = MAX_CHANNEL_VALUE

    match target:
        case PixelFormat.GRAY:
            return Gray(_gray_of(pixel, red, green, blue))
        case PixelFormat.GRAY_ALPHA:
            return GrayAlpha(_gray_of(pixel, red, green, blue), alpha)
        case PixelFormat.RGB:
            return RGB(red, green, blue)
        case PixelFormat.RGBA:
            return RGBA(red, green, blue, alpha)
    raise ValueError(f"unknown target format {target!r}")


def _gray_of(pixel: Pixel, red: int, green: int, blue: int) -> int:
    if pixel.format.has_color:
        return luminance(red, green, blue)
    return red


def convert_pixels(data: bytes, source: PixelFormat, target: PixelFormat) -> bytes:
    """Convert a packed run of `source` pixels into a fresh run of `target` pixels.

    `data` must hold a whole number of pixels.
    """
    if source is target:
        return bytes(data)
    if not data:
        return b""

    src = np.frombuffer(data, dtype=np.uint8).reshape(-1, source.channels)
    count = src.shape[0]

    if source.has_color:
        rgb = src[:, :3]
    else:
        rgb = np.repeat(src[:, :1], 3, axis=1)

    if source.has_alpha:
        alpha = src[:, -1:]
    else:
        alpha = np.full((count, 1), MAX_CHANNEL_VALUE, dtype=np.uint8)

    if target.has_color:
        out = rgb if target is PixelFormat.RGB else np.concatenate([rgb, alpha], axis=1)
    else:
        if source.has_color:
            wide = rgb.astype(np.uint32)
            gray = ((30 * wide[:, 0] + 59 * wide[:, 1] + 11 * wide[:, 2]) // 100).astype(np.uint8)
            gray = gray.reshape(count, 1)
        else:
            gray = src[:, :1]
        out = gray if target is PixelFormat.GRAY else np.concatenate([gray, alpha], axis=1)

    return np.ascontiguousarray(out, dtype=np.uint8).tobytes()
