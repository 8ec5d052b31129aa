"""
Paint styles and display modes for the watch faces.

Styles are immutable. A face builds one StyleSet for interactive mode when
it is created and derives the ambient variant as a new StyleSet whenever the
display mode or device properties change; render passes only read them.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QFont, QFontDatabase, QPainter, QPen

from core.logging.logger import get_logger
from core.settings.settings_manager import SettingsManager

logger = get_logger(__name__)

RGBA = Tuple[int, int, int, int]

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)


class DisplayMode(Enum):
    """Display power mode reported by the host."""
    INTERACTIVE = "interactive"
    AMBIENT = "ambient"

    @classmethod
    def from_ambient(cls, in_ambient: bool) -> "DisplayMode":
        return cls.AMBIENT if in_ambient else cls.INTERACTIVE


@dataclass(frozen=True)
class DeviceProperties:
    """Host-reported display capabilities that affect ambient rendering."""

    low_bit_ambient: bool = False
    burn_in_protection: bool = False

    @classmethod
    def from_mapping(cls, properties: Optional[Mapping[str, Any]]) -> "DeviceProperties":
        """Build from a host property map. Absent or malformed flags read as False."""
        if not properties:
            return cls()

        return cls(
            low_bit_ambient=SettingsManager.to_bool(properties.get("low_bit_ambient"), default=False),
            burn_in_protection=SettingsManager.to_bool(properties.get("burn_in_protection"), default=False),
        )

    @property
    def reduced_fidelity(self) -> bool:
        """True when ambient painting must drop anti-aliasing."""
        return self.low_bit_ambient or self.burn_in_protection


@dataclass(frozen=True)
class PaintStyle:
    """Ink description for one drawing role."""

    color: RGBA = WHITE
    stroke_width: float = 1.0
    anti_alias: bool = True
    text_size: float = 0.0
    typeface: Optional[str] = None
    square_cap: bool = False

    def qcolor(self) -> QColor:
        return QColor(*self.color)

    def pen(self) -> QPen:
        pen = QPen(self.qcolor())
        pen.setWidthF(self.stroke_width)
        pen.setCapStyle(Qt.PenCapStyle.SquareCap if self.square_cap else Qt.PenCapStyle.FlatCap)
        return pen

    def font(self) -> QFont:
        font = QFont(self.typeface) if self.typeface else QFont()
        if self.text_size > 0:
            font.setPixelSize(max(1, int(round(self.text_size))))
        if not self.anti_alias:
            font.setStyleStrategy(QFont.StyleStrategy.NoAntialias)
        return font

    def apply_hints(self, painter: QPainter) -> None:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, self.anti_alias)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing, self.anti_alias)


@dataclass(frozen=True)
class StyleSet:
    """Read-only mapping of drawing role to PaintStyle."""

    _entries: Mapping[str, PaintStyle] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_entries", MappingProxyType(dict(self._entries)))

    def __getitem__(self, role: str) -> PaintStyle:
        return self._entries[role]

    def __contains__(self, role: object) -> bool:
        return role in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def roles(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def map(self, fn: Callable[[str, PaintStyle], PaintStyle]) -> "StyleSet":
        """Return a copy with ``fn(role, style)`` applied to every role."""
        return StyleSet({role: fn(role, style) for role, style in self._entries.items()})


def select_styles(
    base: StyleSet,
    mode: DisplayMode,
    properties: DeviceProperties,
    *,
    ambient_ink: RGBA = WHITE,
    ink_roles: Optional[Iterable[str]] = None,
) -> StyleSet:
    """
    Pick the style set for a display mode.

    Interactive mode returns ``base`` untouched. Ambient mode recolours the
    ink roles (every role when ``ink_roles`` is None) to ``ambient_ink`` and,
    when the device is low-bit or burn-in protected, disables anti-aliasing
    on every role.
    """
    if mode is DisplayMode.INTERACTIVE:
        return base

    recolor = set(base.roles() if ink_roles is None else ink_roles)
    drop_aa = properties.reduced_fidelity

    def _ambient(role: str, style: PaintStyle) -> PaintStyle:
        changes: Dict[str, Any] = {}
        if role in recolor:
            changes["color"] = ambient_ink
        if drop_aa:
            changes["anti_alias"] = False
        return replace(style, **changes) if changes else style

    return base.map(_ambient)


_TYPEFACE_CACHE: Dict[str, Optional[str]] = {}


def resolve_typeface(family: Optional[str], font_path: Optional[str] = None) -> Optional[str]:
    """
    Resolve the font family to paint with.

    When ``font_path`` names a font file it is registered with Qt once and
    its first family is used. A missing or unreadable file falls back to
    ``family``.
    """
    if not font_path:
        return family or None

    if font_path in _TYPEFACE_CACHE:
        return _TYPEFACE_CACHE[font_path] or family or None

    loaded: Optional[str] = None
    if Path(font_path).is_file():
        font_id = QFontDatabase.addApplicationFont(font_path)
        if font_id >= 0:
            families = QFontDatabase.applicationFontFamilies(font_id)
            if families:
                loaded = families[0]
    if loaded is None:
        logger.warning("[FALLBACK] Could not load font %s, using family %r", font_path, family)
    else:
        logger.debug("[FACE] Loaded font %s as %r", font_path, loaded)

    _TYPEFACE_CACHE[font_path] = loaded
    return loaded or family or None
