"""Pytest configuration.

The crop window tests use PySide6 widgets. We create a single `QApplication`
for the session as early as possible so Qt modules imported during
collection never run without one, and shut it down cleanly at the end.
"""

from __future__ import annotations

import os
from typing import Any

import pytest

from pngcrop.image_engine import RGBA, ImageBuffer, PixelFormat

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QApplication exists before collecting/running tests."""

    # Headless runs (CI) have no display; an explicit platform still wins.
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    # Import lazily so non-Qt environments can still run the core tests.
    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    global _APP

    app = QApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = QApplication([]) if app is None else app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    app = QApplication.instance()
    if app is None:
        return
    app.quit()
    app.processEvents()


@pytest.fixture
def quad() -> ImageBuffer:
    """2x2 RGBA: red, green / blue, white."""
    grid = [
        [RGBA(255, 0, 0, 255), RGBA(0, 255, 0, 255)],
        [RGBA(0, 0, 255, 255), RGBA(255, 255, 255, 255)],
    ]
    return ImageBuffer.from_grid(grid)


@pytest.fixture
def ramp() -> ImageBuffer:
    """5 rows x 4 columns RGB, each pixel (x, y, 10*y + x)."""
    data = bytes(v for y in range(5) for x in range(4) for v in (x, y, 10 * y + x))
    return ImageBuffer(5, 4, PixelFormat.RGB, data)
