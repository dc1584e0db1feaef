from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from pngcrop.image_engine import ImageBuffer


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# direction -> (side grown without Shift, side shrunk with Shift)
_SIDES = {
    Direction.UP: ("bottom", "top"),
    Direction.DOWN: ("top", "bottom"),
    Direction.LEFT: ("right", "left"),
    Direction.RIGHT: ("left", "right"),
}


@dataclass(frozen=True, slots=True)
class CropAmounts:
    """Pixels removed from each side of the source image.

    Python is authoritative for clamping: amounts never leave less than one
    row or one column of the source image.
    """

    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0

    def is_zero(self) -> bool:
        return not (self.left or self.right or self.top or self.bottom)

    def reset(self) -> CropAmounts:
        return CropAmounts()

    def grow(self, side: str, delta: int, width: int, height: int) -> CropAmounts:
        if side in ("left", "right"):
            room = width - self.left - self.right - 1
        else:
            room = height - self.top - self.bottom - 1
        amount = max(0, min(int(delta), room))
        return replace(self, **{side: getattr(self, side) + amount})

    def shrink(self, side: str, delta: int) -> CropAmounts:
        current = getattr(self, side)
        return replace(self, **{side: current - max(0, min(int(delta), current))})

    def step(
        self,
        direction: Direction,
        *,
        shift: bool,
        fast: bool,
        width: int,
        height: int,
        step: int = 1,
        fast_step: int = 10,
    ) -> CropAmounts:
        """Apply one arrow press.

        Up/Down move the bottom/top edge inward, Left/Right the right/left
        edge; with Shift the opposite edge moves back out. Control (`fast`)
        switches to `fast_step`.
        """
        delta = fast_step if fast else step
        grown, shrunk = _SIDES[direction]
        if shift:
            return self.shrink(shrunk, delta)
        return self.grow(grown, delta, width, height)

    def apply(self, image: ImageBuffer) -> ImageBuffer:
        return image.crop(self.left, self.right, self.top, self.bottom)

    def as_tuple(self) -> tuple[int, int, int, int]:
        """(left, right, top, bottom)"""
        return self.left, self.right, self.top, self.bottom
