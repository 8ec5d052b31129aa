"""
Shared pytest fixtures for watch face tests.
"""
import os
import sys

# Render without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def settings_manager(qt_app):
    """Create SettingsManager instance for testing."""
    from core.settings import SettingsManager
    manager = SettingsManager(organization="Test", application="WatchFacesTest")
    manager.reset_to_defaults()
    yield manager
    # Leave defaults behind for the next test
    manager.reset_to_defaults()


@pytest.fixture
def utc_analog_face(qt_app):
    """Analog face pinned to UTC, created and sized to 320x320."""
    from faces.analog_face import AnalogFace
    face = AnalogFace(timezone="UTC")
    face.on_create()
    face.on_viewport_change(320, 320)
    yield face
    face.on_destroy()


@pytest.fixture
def utc_digital_face(qt_app):
    """Digital face pinned to UTC, created and sized to 320x320."""
    from faces.digital_face import DigitalFace
    face = DigitalFace(timezone="UTC")
    face.on_create()
    face.on_viewport_change(320, 320)
    yield face
    face.on_destroy()


@pytest.fixture
def temp_image(tmp_path):
    """Create a temporary 100x50 background image."""
    from PySide6.QtGui import QImage, QColor
    from PySide6.QtCore import QSize

    image = QImage(QSize(100, 50), QImage.Format.Format_RGB32)
    image.fill(QColor(255, 0, 0))  # Red

    image_path = tmp_path / "background.png"
    image.save(str(image_path))

    return image_path
