from __future__ import annotations

from PySide6.QtCore import QRectF, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QWidget

from .image_engine import ImageBuffer, PixelFormat
from .logger import get_logger
from .ops.crop_controller import CropAmounts, Direction
from .settings_manager import SettingsManager

_logger = get_logger("ui_canvas")

_ARROWS = {
    int(Qt.Key.Key_Up): Direction.UP,
    int(Qt.Key.Key_Down): Direction.DOWN,
    int(Qt.Key.Key_Left): Direction.LEFT,
    int(Qt.Key.Key_Right): Direction.RIGHT,
}


def fit_rect(img_w: int, img_h: int, view_w: int, view_h: int) -> tuple[float, float, float, float]:
    """Centered (x, y, w, h) for an image in a view; scales down, never up."""
    if img_w <= 0 or img_h <= 0:
        return 0.0, 0.0, 0.0, 0.0
    scale = min(1.0, max(1, view_w) / img_w, max(1, view_h) / img_h)
    w = img_w * scale
    h = img_h * scale
    return (view_w - w) / 2.0, (view_h - h) / 2.0, w, h


class CropCanvas(QWidget):
    """Shows an image and trims it from the keyboard.

    Arrows move an edge inward, Shift+arrow moves the opposite edge back out,
    Control multiplies the step. R resets, Escape closes.
    """

    cropChanged = Signal(int, int, int, int)

    def __init__(self, image: ImageBuffer, settings: SettingsManager | None = None, parent=None):
        super().__init__(parent)
        self._settings = settings or SettingsManager()
        self._source = image
        # Converted once; every redraw crops the RGBA copy
        self._rgba = image.convert(PixelFormat.RGBA)
        self._amounts = CropAmounts()
        self._display = self._rgba
        self._qimage: QImage | None = None
        self._background = self._resolve_background()

        self.setWindowTitle("pngcrop")
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.resize(max(1, image.width), max(1, image.height))
        self._refresh()

    def _resolve_background(self) -> QColor:
        hexcol = self._settings.background_color
        color = QColor(hexcol)
        if color.isValid():
            return color
        _logger.warning("saved background_color invalid: %s", hexcol)
        return QColor(0, 0, 0)

    # ---- state ----
    @property
    def amounts(self) -> CropAmounts:
        return self._amounts

    @property
    def display_image(self) -> ImageBuffer:
        """Currently shown RGBA crop."""
        return self._display

    def result_image(self) -> ImageBuffer:
        """The source image with the current crop, in its original format."""
        return self._amounts.apply(self._source)

    def set_amounts(self, amounts: CropAmounts) -> None:
        if amounts == self._amounts:
            return
        self._amounts = amounts
        self._refresh()

    def _refresh(self) -> None:
        self._display = self._amounts.apply(self._rgba)
        data, w, h = self._display.pixels, self._display.width, self._display.height
        if w and h:
            self._qimage = QImage(data, w, h, w * 4, QImage.Format.Format_RGBA8888).copy()
        else:
            self._qimage = None
        _logger.debug("crop %s -> %dx%d", self._amounts.as_tuple(), w, h)
        self.cropChanged.emit(*self._amounts.as_tuple())
        self.update()

    def _step(self, direction: Direction, modifiers) -> None:
        self.set_amounts(
            self._amounts.step(
                direction,
                shift=bool(modifiers & Qt.KeyboardModifier.ShiftModifier),
                fast=bool(modifiers & Qt.KeyboardModifier.ControlModifier),
                width=self._source.width,
                height=self._source.height,
                step=self._settings.crop_step,
                fast_step=self._settings.crop_fast_step,
            )
        )

    # ---- Qt events ----
    def keyPressEvent(self, event) -> None:
        key = int(event.key())
        if key in _ARROWS:
            self._step(_ARROWS[key], event.modifiers())
        elif key == int(Qt.Key.Key_R):
            self.set_amounts(self._amounts.reset())
        elif key == int(Qt.Key.Key_Escape):
            self.close()
        else:
            super().keyPressEvent(event)

    def wheelEvent(self, event) -> None:
        angle = event.angleDelta().y()
        if angle == 0:
            return
        self._step(Direction.UP if angle > 0 else Direction.DOWN, event.modifiers())

    def paintEvent(self, event) -> None:  # noqa: ARG002
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), self._background)
            if self._qimage is None:
                return
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            x, y, w, h = fit_rect(self._qimage.width(), self._qimage.height(), self.width(), self.height())
            painter.drawImage(QRectF(x, y, w, h), self._qimage)
        finally:
            painter.end()
