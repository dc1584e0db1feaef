"""Use-case / operations layer.

Qt-free actions invoked by the UI, such as turning key presses into crop
amounts. Keep this package importable without PySide6.
"""

from .crop_controller import CropAmounts, Direction

__all__ = ["CropAmounts", "Direction"]
