"""pngcrop - view, crop and convert 8-bit PNG images."""

__version__ = "0.1.0"
