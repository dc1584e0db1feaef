"""PNG reading and writing using pyvips.

Turns files into `ImageBuffer`s and back. Palette images are refused
before any decoding happens; everything else is reduced to 8 bits per
channel.
"""

from __future__ import annotations

import contextlib
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from pngcrop.errors import CodecError, UnsupportedFormatError
from pngcrop.logger import get_logger

from .image import ImageBuffer
from .pixel import PixelFormat

_logger = get_logger("codec")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
# signature + chunk length + b"IHDR" + 13 bytes of IHDR data
_HEADER_SIZE = 8 + 8 + 13

_INTERPRETATIONS = {
    PixelFormat.GRAY: "b-w",
    PixelFormat.GRAY_ALPHA: "b-w",
    PixelFormat.RGB: "srgb",
    PixelFormat.RGBA: "srgb",
}

_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        # Configure pyvips caches to avoid memory growth
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    return _pyvips


@dataclass(frozen=True, slots=True)
class PngHeader:
    width: int
    height: int
    bit_depth: int
    color_type: int


def parse_png_header(data: bytes, path: str = "<memory>") -> PngHeader:
    """Parse the signature and IHDR chunk at the start of a PNG stream."""
    if len(data) < len(PNG_SIGNATURE) or data[: len(PNG_SIGNATURE)] != PNG_SIGNATURE:
        raise CodecError(path, "read", "not a PNG file")
    if len(data) < _HEADER_SIZE or data[12:16] != b"IHDR":
        raise CodecError(path, "read", "missing IHDR chunk")
    width, height, bit_depth, color_type = struct.unpack(">IIBB", data[16:26])
    return PngHeader(width, height, bit_depth, color_type)


def read_png_header(path: str | Path) -> PngHeader:
    path = str(path)
    try:
        with open(path, "rb") as f:
            head = f.read(_HEADER_SIZE)
    except OSError as e:
        raise CodecError(path, "read", e.strerror or str(e)) from e
    return parse_png_header(head, path)


def _to_uchar(image: Any) -> Any:
    if image.format == "uchar":
        return image
    if image.format in ("ushort", "short"):
        # Keep the high byte of 16-bit samples
        return (image >> 8).cast("uchar")
    return image.cast("uchar")


def load_image(path: str | Path) -> ImageBuffer:
    """Read a PNG file into an `ImageBuffer`.

    Raises:
        UnsupportedFormatError: palette or unknown color type
        CodecError: file missing, not a PNG, or undecodable
    """
    path = str(path)
    header = read_png_header(path)
    try:
        PixelFormat.from_png_color_type(header.color_type)
    except ValueError as e:
        raise UnsupportedFormatError(path, str(e)) from e

    pyvips = _get_pyvips_module()
    try:
        image = pyvips.Image.new_from_file(path, access="sequential")
        image = _to_uchar(image)
        mem = image.write_to_memory()
    except pyvips.Error as e:
        _logger.error("Failed to decode %s: %s", path, e)
        raise CodecError(path, "read", str(e).strip() or "decode failed") from e

    try:
        fmt = PixelFormat.from_channels(image.bands)
    except ValueError as e:
        raise UnsupportedFormatError(path, str(e)) from e

    rows = np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width * fmt.channels)
    _logger.debug("loaded %s: %dx%d %s", path, image.width, image.height, fmt.name)
    return ImageBuffer.from_rows(image.height, image.width, fmt, (row.tobytes() for row in rows))


def decode_image(path: str | Path) -> tuple[str, ImageBuffer | None, str | None]:
    """Read a PNG file without raising.

    Returns (path, image|None, error|None).
    """
    try:
        return str(path), load_image(path), None
    except CodecError as e:
        _logger.debug("decode failed: %s", e)
        return str(path), None, str(e)


def _to_vips(image: ImageBuffer, path: str) -> Any:
    if image.is_empty():
        raise CodecError(path, "write", f"cannot encode an empty {image.width}x{image.height} image")
    height, width, fmt, rows = image.to_rows()
    pyvips = _get_pyvips_module()
    vimg = pyvips.Image.new_from_memory(b"".join(rows), width, height, fmt.channels, "uchar")
    return vimg.copy(interpretation=_INTERPRETATIONS[fmt])


def save_image(image: ImageBuffer, path: str | Path) -> str:
    """Write `image` as an 8-bit PNG. Returns the path written."""
    path = str(path)
    vimg = _to_vips(image, path)
    pyvips = _get_pyvips_module()
    try:
        vimg.pngsave(path)
    except pyvips.Error as e:
        _logger.error("Failed to write %s: %s", path, e)
        raise CodecError(path, "write", str(e).strip() or "encode failed") from e
    _logger.info("Saved %s (%dx%d %s)", path, image.width, image.height, image.format.name)
    return path


def encode_image_to_png(image: ImageBuffer) -> bytes:
    vimg = _to_vips(image, "<memory>")
    pyvips = _get_pyvips_module()
    try:
        return bytes(vimg.pngsave_buffer())
    except pyvips.Error as e:
        raise CodecError("<memory>", "write", str(e).strip() or "encode failed") from e
