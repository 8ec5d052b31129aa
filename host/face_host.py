"""
Watch face host widget.

Owns one WatchFace and its RedrawScheduler and translates Qt widget events
into the face lifecycle: create, viewport changes, paint, visibility,
ambient mode, device properties, minute ticks and timezone changes.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from PySide6.QtCore import QSize, Qt, QTimer, Signal
from PySide6.QtGui import QHideEvent, QImage, QKeyEvent, QPainter, QPaintEvent, QResizeEvent, QShowEvent
from PySide6.QtWidgets import QWidget

from core.constants import sizes
from core.constants.timing import TIME_TICK_INTERVAL_MS
from core.logging.logger import get_logger
from core.settings.settings_manager import SettingsManager
from faces.base_face import WatchFace
from faces.clock_state import current_time_ms
from faces.styles import DisplayMode
from host.redraw_scheduler import RedrawScheduler

logger = get_logger(__name__)


class WatchFaceHost(QWidget):
    """
    Desktop stand-in for a watch face service.

    Features:
    - Second-aligned redraws while visible and interactive
    - Ambient mode toggle (key 'A' in the preview window)
    - Minute time ticks while visible
    - Offscreen rendering for snapshots
    """

    # Emitted after every ambient-mode change with the new mode value
    mode_changed = Signal(str)

    def __init__(self, face: WatchFace, settings_manager: Optional[SettingsManager] = None,
                 parent: Optional[QWidget] = None, timezone: Optional[str] = None,
                 device_properties: Optional[Mapping[str, Any]] = None):
        """
        Args:
            face: The face to host. The host takes ownership of it.
            settings_manager: Source of timezone and device-property settings.
            parent: Parent widget
            timezone: Pinned timezone. When set, the 'display.timezone'
                setting is not re-read on show.
            device_properties: Pinned device properties. When set, the
                'display.low_bit_ambient' and 'display.burn_in_protection'
                settings are ignored.
        """
        super().__init__(parent)
        self._face = face
        self._settings = settings_manager
        self._pinned_timezone = timezone
        self._pinned_properties = dict(device_properties) if device_properties is not None else None
        self._visible = False
        self._cleaned_up = False

        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setWindowTitle(f"Watch face: {face.NAME}")

        self._scheduler = RedrawScheduler(self.update, parent=self)

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(TIME_TICK_INTERVAL_MS)
        self._tick_timer.timeout.connect(self.on_time_tick)

        properties = self._configured_properties()
        if properties is not None:
            self._face.on_properties_changed(properties)
        if self._settings is not None:
            self._settings.settings_changed.connect(self._on_setting_changed)

        self._face.on_create()
        logger.debug("[HOST] Hosting %s face", face.NAME)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def face(self) -> WatchFace:
        return self._face

    @property
    def scheduler(self) -> RedrawScheduler:
        return self._scheduler

    def is_ambient(self) -> bool:
        return self._face.is_ambient

    def is_face_visible(self) -> bool:
        return self._visible

    def sizeHint(self) -> QSize:
        return QSize(sizes.DEFAULT_VIEWPORT_WIDTH, sizes.DEFAULT_VIEWPORT_HEIGHT)

    # ------------------------------------------------------------------
    # Host notifications
    # ------------------------------------------------------------------

    def set_ambient_mode(self, ambient: bool) -> None:
        """Ambient-mode notification from the platform."""
        if self._face.on_mode_changed(DisplayMode.from_ambient(ambient)):
            self.update()
            self.mode_changed.emit(self._face.mode.value)
        # Whether the timer should run depends on visibility as well as mode.
        self._scheduler.set_ambient(ambient)

    def toggle_ambient_mode(self) -> None:
        self.set_ambient_mode(not self._face.is_ambient)

    def set_device_properties(self, properties: Optional[Mapping[str, Any]]) -> None:
        """Display capability notification (low-bit ambient, burn-in protection)."""
        if self._pinned_properties is not None:
            self._pinned_properties = dict(properties or {})
        self._face.on_properties_changed(properties)
        self.update()

    def set_face_visible(self, visible: bool) -> None:
        """Visibility notification. Starts or stops the periodic redraw."""
        visible = bool(visible)
        if visible == self._visible:
            return
        self._visible = visible
        self._face.on_visibility_changed(visible)
        if visible:
            # The timezone may have changed while hidden.
            self._refresh_timezone()
            self._tick_timer.start()
            self.update()
        else:
            self._tick_timer.stop()
        self._scheduler.set_visible(visible)
        logger.debug("[HOST] %s face visible=%s", self._face.NAME, visible)

    def on_time_tick(self) -> None:
        """Minute tick. Keeps ambient faces current without the second timer."""
        self._face.on_time_tick()
        self.update()

    def notify_timezone_changed(self, timezone: Optional[str] = None) -> None:
        """Timezone change notification. ``None`` re-reads the configured timezone."""
        if timezone is None:
            self._refresh_timezone()
        else:
            if self._pinned_timezone is not None:
                self._pinned_timezone = timezone
            self._face.on_timezone_changed(timezone)
        logger.info("[HOST] Timezone now %s", self._face.timezone)
        self.update()

    def _refresh_timezone(self) -> None:
        if self._pinned_timezone is not None:
            self._face.on_timezone_changed(self._pinned_timezone)
        elif self._settings is not None:
            self._face.on_timezone_changed(self._settings.get('display.timezone', 'local'))

    def _configured_properties(self) -> Optional[Mapping[str, Any]]:
        if self._pinned_properties is not None:
            return self._pinned_properties
        if self._settings is None:
            return None
        return {
            "low_bit_ambient": self._settings.get_bool('display.low_bit_ambient', False),
            "burn_in_protection": self._settings.get_bool('display.burn_in_protection', False),
        }

    def _on_setting_changed(self, key: str, value: object) -> None:
        if key == 'display.timezone':
            if self._pinned_timezone is not None:
                return
            self.notify_timezone_changed(str(value) if value is not None else None)
        elif key in ('display.low_bit_ambient', 'display.burn_in_protection', '*'):
            if self._pinned_properties is not None:
                return
            self.set_device_properties(self._configured_properties())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_to_image(self, timestamp_ms: Optional[int] = None,
                        size: Optional[QSize] = None) -> QImage:
        """Render one frame offscreen. Used for snapshots and tests.

        The face geometry is restored afterwards so an open window keeps
        painting at its own size.
        """
        size = size or (self.size() if self.width() > 0 and self.height() > 0 else self.sizeHint())
        previous = self._face.geometry
        self._face.on_viewport_change(size.width(), size.height())
        image = QImage(size, QImage.Format.Format_ARGB32_Premultiplied)
        image.fill(Qt.GlobalColor.black)
        painter = QPainter(image)
        try:
            self._face.on_render(painter, timestamp_ms if timestamp_ms is not None else current_time_ms())
        finally:
            painter.end()
            if previous is not None:
                self._face.on_viewport_change(previous.width, previous.height)
        return image

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def resizeEvent(self, event: QResizeEvent) -> None:
        size = event.size()
        self._face.on_viewport_change(size.width(), size.height())
        super().resizeEvent(event)

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            self._face.on_render(painter, current_time_ms())
        finally:
            painter.end()

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self.set_face_visible(True)

    def hideEvent(self, event: QHideEvent) -> None:
        super().hideEvent(event)
        self.set_face_visible(False)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_A:
            self.toggle_ambient_mode()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event) -> None:
        self.cleanup()
        super().closeEvent(event)

    def cleanup(self) -> None:
        """Stop timers and release the face."""
        if self._cleaned_up:
            return
        self._cleaned_up = True
        logger.debug("[HOST] Cleaning up %s face", self._face.NAME)
        self._scheduler.shutdown()
        self._tick_timer.stop()
        if self._settings is not None:
            try:
                self._settings.settings_changed.disconnect(self._on_setting_changed)
            except (RuntimeError, TypeError):
                logger.debug("[HOST] settings_changed already disconnected")
        self._face.on_destroy()
