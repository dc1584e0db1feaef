"""Exceptions raised at the file boundary.

The in-memory image core never raises these; they come from reading and
writing PNG files.
"""

from __future__ import annotations


class PngCropError(Exception):
    """Base class for pngcrop errors."""


class CodecError(PngCropError):
    """A PNG file could not be read or written.

    Args:
        path: File that failed
        operation: "read" or "write"
        reason: Human readable cause
    """

    def __init__(self, path: str, operation: str, reason: str):
        self.path = str(path)
        self.operation = operation
        self.reason = reason
        super().__init__(f"failed to {operation} '{self.path}': {reason}")


class UnsupportedFormatError(CodecError):
    """The file uses a pixel layout outside gray, gray+alpha, RGB and RGBA."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, "read", reason)
