"""Immutable in-memory image.

Pure functions over an owned byte run, no Qt or pyvips dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

import numpy as np

from pngcrop.logger import get_logger

from .convert import convert_pixel, convert_pixels
from .pixel import Pixel, PixelFormat, decode_pixel

_logger = get_logger("image")


def _fit_length(data: bytes | bytearray | memoryview, size: int) -> bytes:
    """Truncate or zero-pad `data` to exactly `size` bytes."""
    buf = bytes(data[:size])
    if len(buf) < size:
        buf += bytes(size - len(buf))
    return buf


@dataclass(frozen=True, slots=True)
class ImageBuffer:
    """Rectangular grid of pixels in one format, stored row-major.

    Rows are `width * format.channels` bytes each, top to bottom. The stored
    run is always exactly `height * width * format.channels` bytes: shorter
    input is zero-padded and longer input is truncated. Every operation that
    changes the image returns a new buffer.
    """

    height: int
    width: int
    format: PixelFormat
    pixels: bytes = b""

    def __post_init__(self) -> None:
        height = max(0, int(self.height))
        width = max(0, int(self.width))
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "pixels", _fit_length(self.pixels, height * width * self.format.channels))

    # ---- construction ----
    @classmethod
    def from_rows(
        cls, height: int, width: int, fmt: PixelFormat, rows: Iterable[bytes | bytearray | memoryview]
    ) -> ImageBuffer:
        """Assemble decoded scanlines into one buffer."""
        return cls(height, width, fmt, b"".join(bytes(row) for row in rows))

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[Pixel]], fmt: PixelFormat | None = None) -> ImageBuffer:
        """Build a buffer from a row-major grid of pixels.

        The format is `fmt` when given, else the format of the first pixel.
        Pixels of another format are converted on the way in. An empty grid
        (no rows, or rows without pixels) gives a 0x0 buffer.
        """
        if not grid or not grid[0]:
            return cls(0, 0, fmt or PixelFormat.RGBA)

        fmt = fmt or grid[0][0].format
        height = len(grid)
        width = len(grid[0])
        data = bytearray()
        for row in grid:
            for pixel in row[:width]:
                data += convert_pixel(pixel, fmt).to_bytes()
            data += bytes(fmt.channels * max(0, width - len(row)))
        return cls(height, width, fmt, bytes(data))

    # ---- accessors ----
    @property
    def channels(self) -> int:
        return self.format.channels

    @property
    def row_size(self) -> int:
        return self.width * self.format.channels

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Decode the pixel at column `x`, row `y` (both 0-indexed)."""
        return decode_pixel(self.pixels, y * self.row_size + x * self.channels, self.format)

    def row(self, y: int) -> bytes:
        start = y * self.row_size
        return self.pixels[start : start + self.row_size]

    def iter_pixels(self) -> Iterator[Pixel]:
        for y in range(self.height):
            for x in range(self.width):
                yield self.get_pixel(x, y)

    def to_grid(self) -> list[list[Pixel]]:
        return [[self.get_pixel(x, y) for x in range(self.width)] for y in range(self.height)]

    def to_rows(self) -> tuple[int, int, PixelFormat, list[bytes]]:
        """Scanlines for an encoder: (height, width, format, rows)."""
        return self.height, self.width, self.format, [self.row(y) for y in range(self.height)]

    def as_array(self) -> np.ndarray:
        """Fresh (height, width, channels) uint8 array of the pixels."""
        arr = np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, self.channels)
        return arr.copy()

    def render_view(self) -> tuple[bytes, int, int]:
        """RGBA bytes plus (width, height) for display."""
        rgba = self.convert(PixelFormat.RGBA)
        return rgba.pixels, rgba.width, rgba.height

    # ---- transforms ----
    def convert(self, target: PixelFormat) -> ImageBuffer:
        if target is self.format:
            return ImageBuffer(self.height, self.width, self.format, self.pixels)
        _logger.debug("convert %dx%d %s -> %s", self.width, self.height, self.format.name, target.name)
        return ImageBuffer(self.height, self.width, target, convert_pixels(self.pixels, self.format, target))

    def crop(self, left: int, right: int, top: int, bottom: int) -> ImageBuffer:
        """Remove `left`/`right` columns and `top`/`bottom` rows.

        An axis whose two amounts add up to its full size or more is left
        untouched rather than emptied. Rows are trimmed first since that is a
        single slice, then columns on the rows that remain.
        """
        left, right, top, bottom = (max(0, int(v)) for v in (left, right, top, bottom))
        _logger.debug(
            "crop %dx%d l=%d r=%d t=%d b=%d", self.width, self.height, left, right, top, bottom
        )
        return self._crop_rows(top, bottom)._crop_columns(left, right)

    def _crop_rows(self, top: int, bottom: int) -> ImageBuffer:
        if top + bottom >= self.height:
            return self
        height = self.height - top - bottom
        start = top * self.row_size
        return ImageBuffer(height, self.width, self.format, self.pixels[start : start + height * self.row_size])

    def _crop_columns(self, left: int, right: int) -> ImageBuffer:
        if left + right >= self.width:
            return ImageBuffer(self.height, self.width, self.format, self.pixels)
        width = self.width - left - right
        row_size = self.row_size
        first = left * self.channels
        last = first + width * self.channels
        data = b"".join(
            self.pixels[y * row_size + first : y * row_size + last] for y in range(self.height)
        )
        return ImageBuffer(self.height, width, self.format, data)

    def flip_vertical(self) -> ImageBuffer:
        return ImageBuffer.from_rows(
            self.height, self.width, self.format, [self.row(y) for y in reversed(range(self.height))]
        )

    def flip_horizontal(self) -> ImageBuffer:
        if self.is_empty():
            return ImageBuffer(self.height, self.width, self.format, self.pixels)
        arr = np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, self.channels)
        return ImageBuffer(self.height, self.width, self.format, arr[:, ::-1, :].tobytes())

    def __repr__(self) -> str:
        return f"ImageBuffer(height={self.height}, width={self.width}, format={self.format.name})"
