"""Image Engine - in-memory image core and PNG boundary.

This package provides:
- Pixel formats and their byte codecs (pixel)
- Conversions between formats (convert)
- The immutable image buffer with crop/convert/flip (image)
- PNG reading and writing through pyvips (codec)

Usage:
    from pngcrop.image_engine import ImageBuffer, PixelFormat
    from pngcrop.image_engine.codec import load_image, save_image

    image = load_image("in.png")
    save_image(image.crop(10, 10, 0, 0).convert(PixelFormat.GRAY), "out.png")

The codec is not imported here so the core stays usable without pyvips.
"""

from .convert import convert_pixel, convert_pixels, luminance
from .image import ImageBuffer
from .pixel import RGB, RGBA, Gray, GrayAlpha, Pixel, PixelFormat, channel_count, decode_pixel, encode_pixel

__all__ = [
    "RGB",
    "RGBA",
    "Gray",
    "GrayAlpha",
    "ImageBuffer",
    "Pixel",
    "PixelFormat",
    "channel_count",
    "convert_pixel",
    "convert_pixels",
    "decode_pixel",
    "encode_pixel",
    "luminance",
]
