"""
Persistent settings for the watch faces.

Values live in QSettings under dot-notation keys ('display.timezone',
'faces.analog.hand_color'). Colours are stored as [r, g, b(, a)] lists.
"""
from typing import Any, Dict, List, Tuple
import threading
from PySide6.QtCore import QSettings, QObject, Signal
from core.logging.logger import get_logger, is_verbose_logging

logger = get_logger('SettingsManager')

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def get_default_settings() -> Dict[str, Any]:
    """Return the canonical default settings map (dot-notation keys)."""
    return {
        # Display / host
        'display.face': 'analog',  # 'analog' | 'digital'
        'display.timezone': 'local',
        'display.size': [320, 320],
        'display.low_bit_ambient': False,
        'display.burn_in_protection': False,

        # Digital face
        'faces.digital.background_image': '',
        'faces.digital.background_color': [255, 255, 255, 255],
        'faces.digital.text_color': [0, 150, 136, 255],
        'faces.digital.ambient_color': [255, 255, 255, 255],
        'faces.digital.font_family': 'Roboto Medium',
        'faces.digital.font_path': '',
        'faces.digital.text_size': 40,
        'faces.digital.date_text_size': 20,
        'faces.digital.tag_text': '#TIA',

        # Analog face
        'faces.analog.background_color': [38, 50, 56, 255],
        'faces.analog.hand_color': [236, 239, 241, 255],
        'faces.analog.tick_color': [144, 164, 174, 255],
        'faces.analog.label_color': [0, 230, 118, 255],
        'faces.analog.ambient_color': [255, 255, 255, 255],
        'faces.analog.font_family': 'Nexa Light',
        'faces.analog.font_path': '',
        'faces.analog.label_text': 'radar',
        'faces.analog.label_text_size': 60,
        'faces.analog.hour_text_size': 20,
        'faces.analog.hand_stroke': 3.0,
        'faces.analog.tick_stroke': 2.0,
    }


class SettingsManager(QObject):
    """
    QSettings-backed store with defaults and change notifications.

    Every access goes through one re-entrant lock. ``settings_changed`` is
    emitted for each ``set`` and with key '*' after a reset.
    """

    settings_changed = Signal(str, object)  # key, new value

    def __init__(self, organization: str = "WatchFaces",
                 application: str = "WatchFaces"):
        """
        Args:
            organization: QSettings organization name
            application: QSettings application name
        """
        super().__init__()

        self._settings = QSettings(organization, application)
        self._lock = threading.RLock()

        self._set_defaults()

        logger.info("SettingsManager ready (%s/%s)", organization, application)

    def _set_defaults(self) -> None:
        """Store defaults for keys that have no value yet."""
        with self._lock:
            missing = {k: v for k, v in get_default_settings().items()
                       if not self._settings.contains(k)}
            for key, value in missing.items():
                self._settings.setValue(key, value)
        if missing:
            logger.debug("Applied %d default settings", len(missing))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key``, or ``default`` when absent."""
        with self._lock:
            return self._settings.value(key, default)

    @staticmethod
    def to_bool(value: Any, default: bool = False) -> bool:
        """Coerce a stored value to bool.

        QSettings hands back strings for booleans on INI backends, so the
        usual spellings are recognised. Anything unrecognised gives
        ``default``.
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        return self.to_bool(self.get(key, default), default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        raw = self.get(key, default)
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning("[FALLBACK] Invalid number for %s: %r, using %r", key, raw, default)
            return default

    def get_color(self, key: str,
                  default: Tuple[int, int, int, int] = (255, 255, 255, 255)) -> Tuple[int, int, int, int]:
        """Return a stored colour as an (r, g, b, a) tuple.

        Channels are coerced to int and clamped to 0..255; a missing alpha
        reads as opaque.
        """
        raw = self.get(key, None)
        channels: List[int] = []
        if isinstance(raw, (list, tuple)) and len(raw) in (3, 4):
            try:
                channels = [max(0, min(255, int(c))) for c in raw]
            except (TypeError, ValueError):
                channels = []
        if not channels:
            if raw is not None:
                logger.warning("[FALLBACK] Invalid colour for %s: %r", key, raw)
            return tuple(default)  # type: ignore[return-value]
        if len(channels) == 3:
            channels.append(255)
        return tuple(channels)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` and emit ``settings_changed``."""
        with self._lock:
            previous = self._settings.value(key)
            self._settings.setValue(key, value)

        self.settings_changed.emit(key, value)
        if is_verbose_logging():
            logger.debug("Setting changed: %s: %r -> %r", key, previous, value)
        else:
            logger.debug("Setting changed: %s", key)

    def reset_to_defaults(self) -> None:
        """Replace everything stored with the canonical defaults."""
        with self._lock:
            self._settings.clear()
            for key, value in get_default_settings().items():
                self._settings.setValue(key, value)
            self._settings.sync()

        logger.info("Settings reset to defaults")
        self.settings_changed.emit('*', None)

    def save(self) -> None:
        """Flush pending writes to persistent storage."""
        with self._lock:
            self._settings.sync()
        logger.debug("Settings saved")
