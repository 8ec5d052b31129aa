"""
Watch face lifecycle contract.

A WatchFace knows how to paint itself for a ClockState. It does not own a
timer or a window: the host drives it through the ``on_*`` hooks and
decides when to repaint.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Tuple, Union

from PySide6.QtGui import QPainter

from core.logging.logger import get_logger, is_verbose_logging
from core.settings.settings_manager import SettingsManager, get_default_settings
from faces.clock_state import ClockState, compute_state
from faces.geometry import ViewportGeometry
from faces.styles import RGBA, WHITE, DeviceProperties, DisplayMode, StyleSet, select_styles
from faces.timezone_utils import LOCAL, validate_timezone

logger = get_logger(__name__)


class WatchFace(ABC):
    """
    Base class for watch faces.

    Subclasses provide ``build_styles`` (the interactive style set) and
    ``render``. Everything else is shared lifecycle bookkeeping.
    """

    NAME = "base"
    # Roles recoloured to the ambient ink colour. None means every role.
    AMBIENT_INK_ROLES: Optional[Tuple[str, ...]] = None

    def __init__(self, settings: Optional[SettingsManager] = None,
                 timezone: Optional[str] = None):
        """
        Args:
            settings: Settings source. Defaults are used when omitted.
            timezone: Timezone override. Falls back to 'display.timezone'.
        """
        self._settings = settings
        self._mode = DisplayMode.INTERACTIVE
        self._properties = DeviceProperties()
        self._visible = False
        self._created = False
        self._geometry: Optional[ViewportGeometry] = None
        self._base_styles = StyleSet()
        self._active_styles = StyleSet()
        self._timezone = LOCAL
        self._set_timezone(timezone if timezone is not None else self._setting('display.timezone', LOCAL))

    # ------------------------------------------------------------------
    # Settings helpers
    # ------------------------------------------------------------------

    def _setting(self, key: str, default: Any = None) -> Any:
        if self._settings is not None:
            return self._settings.get(key, default)
        return get_default_settings().get(key, default)

    def _face_key(self, name: str) -> str:
        return f"faces.{self.NAME}.{name}"

    def _face_str(self, name: str, default: str = "") -> str:
        value = self._setting(self._face_key(name), default)
        return str(value) if value is not None else default

    def _face_float(self, name: str, default: float) -> float:
        if self._settings is not None:
            return self._settings.get_float(self._face_key(name), default)
        raw = self._setting(self._face_key(name), default)
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning("[FALLBACK] Invalid %s=%r, using %s", self._face_key(name), raw, default)
            return default

    def _face_color(self, name: str, default: RGBA = WHITE) -> RGBA:
        key = self._face_key(name)
        if self._settings is not None:
            return self._settings.get_color(key, default)
        raw = get_default_settings().get(key)
        return tuple(raw) if raw else default  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------

    def on_create(self) -> None:
        """One-time style and resource initialisation."""
        self._base_styles = self.build_styles()
        self._restyle()
        self._created = True
        logger.info("[FACE] %s created (timezone=%s)", self.NAME, self._timezone)

    def on_viewport_change(self, width: int, height: int) -> Optional[ViewportGeometry]:
        """Update geometry. Non-positive sizes are ignored."""
        if width <= 0 or height <= 0:
            logger.debug("[FACE] %s ignoring empty viewport %dx%d", self.NAME, width, height)
            return self._geometry
        geometry = ViewportGeometry(int(width), int(height))
        if geometry == self._geometry:
            return geometry
        self._geometry = geometry
        self._on_geometry_changed(geometry)
        logger.debug("[FACE] %s viewport %dx%d", self.NAME, width, height)
        return geometry

    def on_mode_changed(self, mode: Union[DisplayMode, bool]) -> bool:
        """Switch display mode. Returns True when the mode actually changed."""
        if isinstance(mode, bool):
            mode = DisplayMode.from_ambient(mode)
        if mode is self._mode:
            return False
        self._mode = mode
        self._restyle()
        logger.info("[AMBIENT] %s mode -> %s", self.NAME, mode.value)
        return True

    def on_properties_changed(self, properties: Union[DeviceProperties, Mapping[str, Any], None]) -> None:
        """Apply host display capabilities."""
        if not isinstance(properties, DeviceProperties):
            properties = DeviceProperties.from_mapping(properties)
        if properties == self._properties:
            return
        self._properties = properties
        self._restyle()
        logger.debug("[FACE] %s properties %s", self.NAME, properties)

    def on_visibility_changed(self, visible: bool) -> None:
        self._visible = bool(visible)

    def on_time_tick(self) -> None:
        """Minute tick from the host. Faces repaint; nothing else to update."""

    def on_timezone_changed(self, timezone: Optional[str]) -> None:
        self._set_timezone(timezone)

    def on_render(self, painter: QPainter, timestamp_ms: int) -> Optional[ClockState]:
        """Render a frame for ``timestamp_ms``. Returns the state drawn, if any."""
        if self._geometry is None:
            return None
        if not self._created:
            self.on_create()
        state = compute_state(timestamp_ms, self._timezone)
        self.render(painter, state, self._geometry, self._mode, self._active_styles)
        if is_verbose_logging():
            logger.debug("[FACE] %s rendered %s (%s)", self.NAME, state.time_text, self._mode.value)
        return state

    def on_destroy(self) -> None:
        self._created = False
        logger.debug("[FACE] %s destroyed", self.NAME)

    # ------------------------------------------------------------------
    # Subclass API
    # ------------------------------------------------------------------

    @abstractmethod
    def build_styles(self) -> StyleSet:
        """Return the interactive-mode style set."""

    @abstractmethod
    def render(self, painter: QPainter, state: ClockState, geometry: ViewportGeometry,
               mode: DisplayMode, styles: Optional[StyleSet] = None) -> None:
        """Paint one frame."""

    def _on_geometry_changed(self, geometry: ViewportGeometry) -> None:
        """Recompute derived lengths. Default: nothing to do."""

    def ambient_ink(self) -> RGBA:
        return self._face_color("ambient_color", WHITE)

    # ------------------------------------------------------------------
    # Internals / accessors
    # ------------------------------------------------------------------

    def _restyle(self) -> None:
        self._active_styles = select_styles(
            self._base_styles,
            self._mode,
            self._properties,
            ambient_ink=self.ambient_ink(),
            ink_roles=self.AMBIENT_INK_ROLES,
        )

    def _set_timezone(self, timezone: Optional[str]) -> None:
        tz = timezone or LOCAL
        if not validate_timezone(tz):
            logger.warning("[FALLBACK] Unknown timezone '%s' for %s, using local time", tz, self.NAME)
            tz = LOCAL
        self._timezone = tz

    @property
    def mode(self) -> DisplayMode:
        return self._mode

    @property
    def is_ambient(self) -> bool:
        return self._mode is DisplayMode.AMBIENT

    @property
    def properties(self) -> DeviceProperties:
        return self._properties

    @property
    def timezone(self) -> str:
        return self._timezone

    @property
    def geometry(self) -> Optional[ViewportGeometry]:
        return self._geometry

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def base_styles(self) -> StyleSet:
        return self._base_styles

    @property
    def active_styles(self) -> StyleSet:
        return self._active_styles
