"""Pixel formats and their byte codecs.

Every format stores one byte per channel, in the channel order of the
matching pixel class. A pixel of format F always occupies exactly
`F.channels` bytes and any run of that many bytes decodes to one pixel.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

MAX_CHANNEL_VALUE = 0xFF

# PNG IHDR color types
PNG_COLOR_TYPE_GRAY = 0
PNG_COLOR_TYPE_RGB = 2
PNG_COLOR_TYPE_PALETTE = 3
PNG_COLOR_TYPE_GRAY_ALPHA = 4
PNG_COLOR_TYPE_RGB_ALPHA = 6


class PixelFormat(Enum):
    """Channel layout of a pixel.

    The value is the channel count, which is also the byte width.
    """

    GRAY = 1
    GRAY_ALPHA = 2
    RGB = 3
    RGBA = 4

    @property
    def channels(self) -> int:
        return self.value

    @property
    def has_alpha(self) -> bool:
        return self in (PixelFormat.GRAY_ALPHA, PixelFormat.RGBA)

    @property
    def has_color(self) -> bool:
        return self in (PixelFormat.RGB, PixelFormat.RGBA)

    @property
    def png_color_type(self) -> int:
        return _PNG_COLOR_TYPES[self]

    @classmethod
    def from_png_color_type(cls, code: int) -> PixelFormat:
        for fmt, color_type in _PNG_COLOR_TYPES.items():
            if color_type == code:
                return fmt
        if code == PNG_COLOR_TYPE_PALETTE:
            raise ValueError("palette (indexed) images are not supported")
        raise ValueError(f"unknown PNG color type {code}")

    @classmethod
    def from_channels(cls, count: int) -> PixelFormat:
        try:
            return cls(count)
        except ValueError:
            raise ValueError(f"no pixel format with {count} channels") from None

    @classmethod
    def from_name(cls, name: str) -> PixelFormat:
        """Parse a user supplied name such as 'rgba', 'gray-alpha' or 'GRAY_ALPHA'."""
        key = (name or "").strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown pixel format {name!r}") from None


_PNG_COLOR_TYPES = {
    PixelFormat.GRAY: PNG_COLOR_TYPE_GRAY,
    PixelFormat.GRAY_ALPHA: PNG_COLOR_TYPE_GRAY_ALPHA,
    PixelFormat.RGB: PNG_COLOR_TYPE_RGB,
    PixelFormat.RGBA: PNG_COLOR_TYPE_RGB_ALPHA,
}


@dataclass(frozen=True, slots=True)
class Gray:
    format: ClassVar[PixelFormat] = PixelFormat.GRAY

    gray: int

    def to_bytes(self) -> bytes:
        return bytes((self.gray,))


@dataclass(frozen=True, slots=True)
class GrayAlpha:
    format: ClassVar[PixelFormat] = PixelFormat.GRAY_ALPHA

    gray: int
    alpha: int

    def to_bytes(self) -> bytes:
        return bytes((self.gray, self.alpha))


@dataclass(frozen=True, slots=True)
class RGB:
    format: ClassVar[PixelFormat] = PixelFormat.RGB

    red: int
    green: int
    blue: int

    def to_bytes(self) -> bytes:
        return bytes((self.red, self.green, self.blue))


@dataclass(frozen=True, slots=True)
class RGBA:
    format: ClassVar[PixelFormat] = PixelFormat.RGBA

    red: int
    green: int
    blue: int
    alpha: int

    def to_bytes(self) -> bytes:
        return bytes((self.red, self.green, self.blue, self.alpha))


Pixel = Gray | GrayAlpha | RGB | RGBA

PIXEL_TYPES: dict[PixelFormat, type] = {
    PixelFormat.GRAY: Gray,
    PixelFormat.GRAY_ALPHA: GrayAlpha,
    PixelFormat.RGB: RGB,
    PixelFormat.RGBA: RGBA,
}


def channel_count(fmt: PixelFormat) -> int:
    return fmt.channels


def decode_pixel(data: bytes | bytearray | memoryview, offset: int, fmt: PixelFormat) -> Pixel:
    """Read one pixel of `fmt` starting at byte `offset`.

    Raises:
        IndexError: if fewer than `fmt.channels` bytes remain after `offset`
    """
    end = offset + fmt.channels
    if offset < 0 or end > len(data):
        raise IndexError(f"pixel at offset {offset} does not fit in {len(data)} bytes")
    return PIXEL_TYPES[fmt](*data[offset:end])


def encode_pixel(pixel: Pixel) -> bytes:
    return pixel.to_bytes()
