import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QPoint, QPointF, Qt
from PySide6.QtGui import QWheelEvent

from pngcrop.image_engine import RGB, ImageBuffer, PixelFormat
from pngcrop.ops.crop_controller import CropAmounts
from pngcrop.settings_manager import SettingsManager
from pngcrop.ui_canvas import CropCanvas, fit_rect


@pytest.fixture
def canvas(qtbot, ramp, tmp_path):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    c = CropCanvas(ramp, settings)
    qtbot.addWidget(c)
    c.show()
    return c


def test_fit_rect_scales_down_only():
    assert fit_rect(10, 10, 100, 50) == (45.0, 20.0, 10.0, 10.0)
    x, y, w, h = fit_rect(200, 100, 100, 100)
    assert (w, h) == (100.0, 50.0)
    assert (x, y) == (0.0, 25.0)
    assert fit_rect(0, 5, 10, 10) == (0.0, 0.0, 0.0, 0.0)


def test_display_is_rgba_of_source(canvas, ramp):
    assert canvas.display_image.format is PixelFormat.RGBA
    assert canvas.display_image.size == ramp.size
    assert canvas.result_image() == ramp


def test_arrow_keys_crop(qtbot, canvas):
    qtbot.keyClick(canvas, Qt.Key.Key_Down)
    qtbot.keyClick(canvas, Qt.Key.Key_Right)
    assert canvas.amounts == CropAmounts(left=1, top=1)

    result = canvas.result_image()
    assert result.format is PixelFormat.RGB
    assert (result.width, result.height) == (3, 4)
    assert result.get_pixel(0, 0) == RGB(1, 1, 11)
    assert canvas.display_image.size == (3, 4)


def test_shift_and_control_modifiers(qtbot, canvas):
    qtbot.keyClick(canvas, Qt.Key.Key_Up, Qt.KeyboardModifier.ControlModifier)
    # 5 rows: at most 4 can go
    assert canvas.amounts.bottom == 4
    qtbot.keyClick(canvas, Qt.Key.Key_Down, Qt.KeyboardModifier.ShiftModifier)
    assert canvas.amounts.bottom == 3
    assert canvas.result_image().height == 2


def test_reset_key(qtbot, canvas, ramp):
    qtbot.keyClick(canvas, Qt.Key.Key_Left)
    assert canvas.amounts.right == 1
    qtbot.keyClick(canvas, Qt.Key.Key_R)
    assert canvas.amounts.is_zero()
    assert canvas.result_image() == ramp


def test_crop_changed_signal(qtbot, canvas):
    with qtbot.waitSignal(canvas.cropChanged, timeout=1000) as blocker:
        qtbot.keyClick(canvas, Qt.Key.Key_Right)
    assert blocker.args == [1, 0, 0, 0]


def test_escape_closes(qtbot, canvas):
    assert canvas.isVisible()
    qtbot.keyClick(canvas, Qt.Key.Key_Escape)
    assert not canvas.isVisible()


def test_invalid_background_falls_back_to_black(qtbot, tmp_path):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    settings.set("background_color", "not-a-color")
    c = CropCanvas(ImageBuffer(1, 1, PixelFormat.GRAY, b"\x80"), settings)
    qtbot.addWidget(c)
    assert c._background.name() == "#000000"


def _wheel(angle: int, modifiers=Qt.KeyboardModifier.NoModifier) -> QWheelEvent:
    return QWheelEvent(
        QPointF(1, 1),
        QPointF(1, 1),
        QPoint(0, 0),
        QPoint(0, angle),
        Qt.MouseButton.NoButton,
        modifiers,
        Qt.ScrollPhase.NoScrollPhase,
        False,
    )


def test_wheel_acts_as_up_and_down(canvas):
    canvas.wheelEvent(_wheel(120))
    assert canvas.amounts == CropAmounts(bottom=1)

    canvas.wheelEvent(_wheel(-120))
    assert canvas.amounts == CropAmounts(top=1, bottom=1)

    canvas.wheelEvent(_wheel(0))
    assert canvas.amounts == CropAmounts(top=1, bottom=1)
    assert canvas.result_image().height == 3


def test_wheel_with_shift_moves_edge_back(canvas):
    canvas.set_amounts(CropAmounts(top=2))
    canvas.wheelEvent(_wheel(120, Qt.KeyboardModifier.ShiftModifier))
    assert canvas.amounts == CropAmounts(top=1)
