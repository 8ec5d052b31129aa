"""
Digital watch face.

Draws the time and date over a background image. In ambient mode the
background is black, every text is white, and a short tag line appears below
the centre.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QPointF, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QFontMetricsF, QImage, QPainter

from core.constants import sizes
from core.logging.logger import get_logger
from faces.base_face import WatchFace
from faces.clock_state import ClockState, format_time_text
from faces.geometry import ViewportGeometry
from faces.styles import BLACK, DisplayMode, PaintStyle, StyleSet, resolve_typeface

logger = get_logger(__name__)

ROLE_BACKGROUND = "background"
ROLE_TIME = "time"
ROLE_DATE = "date"
ROLE_TAG = "tag"

# Size of the generated background when no image is configured.
_FALLBACK_BACKGROUND_SIZE = QSize(sizes.DEFAULT_VIEWPORT_WIDTH, sizes.DEFAULT_VIEWPORT_HEIGHT)


@dataclass(frozen=True)
class TextItem:
    """One horizontally centred text draw."""

    role: str
    text: str
    x: float
    baseline: float


def scaled_background_size(original: QSize, viewport_width: int) -> QSize:
    """Scale ``original`` so its width matches the viewport, keeping the aspect ratio."""
    if original.width() <= 0:
        return QSize(original)
    width = round(original.width() * viewport_width / original.width())
    height = round(original.height() * viewport_width / original.width())
    return QSize(width, height)


def text_items(state: ClockState, geometry: ViewportGeometry, mode: DisplayMode,
               tag_text: str = "#TIA") -> List[TextItem]:
    """Text draws in paint order. The tag line only shows in ambient mode."""
    cx, cy = geometry.center
    items = [TextItem(ROLE_TIME, format_time_text(state), cx, cy + sizes.TIME_TEXT_OFFSET_Y)]
    if mode is DisplayMode.AMBIENT and tag_text:
        items.append(TextItem(ROLE_TAG, tag_text, cx, cy + sizes.TAG_TEXT_OFFSET_Y))
    items.append(TextItem(ROLE_DATE, state.date_label, cx, cy + sizes.DATE_TEXT_OFFSET_Y))
    return items


class DigitalFace(WatchFace):
    """Time and date over a background image."""

    NAME = "digital"
    AMBIENT_INK_ROLES = (ROLE_TIME, ROLE_DATE, ROLE_TAG)

    def __init__(self, *args, background: Optional[QImage] = None, **kwargs):
        """
        Args:
            background: Background image. When omitted the configured
                'faces.digital.background_image' path is loaded on create.
        """
        super().__init__(*args, **kwargs)
        self._original_background: Optional[QImage] = background
        self._scaled_background: Optional[QImage] = None
        self._tag_text = self._face_str("tag_text", "#TIA")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_create(self) -> None:
        if self._original_background is None or self._original_background.isNull():
            self._original_background = self._load_background()
        super().on_create()
        if self.geometry is not None:
            self._rescale_background(self.geometry)

    def build_styles(self) -> StyleSet:
        typeface = resolve_typeface(self._face_str("font_family"), self._face_str("font_path"))
        text_color = self._face_color("text_color")
        text_size = self._face_float("text_size", 40.0)
        return StyleSet({
            ROLE_BACKGROUND: PaintStyle(color=self._face_color("background_color")),
            ROLE_TIME: PaintStyle(color=text_color, text_size=text_size, typeface=typeface),
            ROLE_TAG: PaintStyle(color=text_color, text_size=text_size, typeface=typeface),
            ROLE_DATE: PaintStyle(
                color=text_color,
                text_size=self._face_float("date_text_size", 20.0),
                typeface=typeface,
            ),
        })

    def _on_geometry_changed(self, geometry: ViewportGeometry) -> None:
        if self._original_background is not None:
            self._rescale_background(geometry)

    def on_destroy(self) -> None:
        self._scaled_background = None
        super().on_destroy()

    # ------------------------------------------------------------------
    # Background
    # ------------------------------------------------------------------

    def _load_background(self) -> QImage:
        path = self._face_str("background_image")
        if path:
            if Path(path).is_file():
                image = QImage(path)
                if not image.isNull():
                    logger.info("[FACE] Loaded background %s (%dx%d)", path, image.width(), image.height())
                    return image
            logger.warning("[FALLBACK] Could not load background image %s", path)

        # No usable image: a flat fill in the configured background colour.
        image = QImage(_FALLBACK_BACKGROUND_SIZE, QImage.Format.Format_ARGB32_Premultiplied)
        image.fill(QColor(*self._face_color("background_color")))
        logger.debug("[FACE] Using generated %dx%d background", image.width(), image.height())
        return image

    def _rescale_background(self, geometry: ViewportGeometry) -> None:
        original = self._original_background
        if original is None or original.isNull():
            return
        target = scaled_background_size(original.size(), geometry.width)
        # Always scale from the original so repeated resizes do not degrade it.
        self._scaled_background = original.scaled(
            target,
            Qt.AspectRatioMode.IgnoreAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        logger.debug("[FACE] Background scaled to %dx%d", target.width(), target.height())

    @property
    def background(self) -> Optional[QImage]:
        """The background image as currently scaled for the viewport."""
        return self._scaled_background

    @property
    def original_background(self) -> Optional[QImage]:
        return self._original_background

    @property
    def tag_text(self) -> str:
        return self._tag_text

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def render(self, painter: QPainter, state: ClockState, geometry: ViewportGeometry,
               mode: DisplayMode, styles: Optional[StyleSet] = None) -> None:
        styles = styles if styles is not None else self.active_styles
        painter.save()
        try:
            self._draw_background(painter, geometry, mode, styles[ROLE_BACKGROUND])
            for item in text_items(state, geometry, mode, self._tag_text):
                self._draw_centered_text(painter, item, styles[item.role])
        finally:
            painter.restore()

    def _draw_background(self, painter: QPainter, geometry: ViewportGeometry,
                         mode: DisplayMode, style: PaintStyle) -> None:
        rect = QRectF(0, 0, geometry.width, geometry.height)
        if mode is DisplayMode.AMBIENT:
            painter.fillRect(rect, QColor(*BLACK))
            return
        painter.fillRect(rect, style.qcolor())
        if self._scaled_background is not None:
            painter.drawImage(QPointF(0, 0), self._scaled_background)

    @staticmethod
    def _draw_centered_text(painter: QPainter, item: TextItem, style: PaintStyle) -> None:
        font = style.font()
        width = QFontMetricsF(font).horizontalAdvance(item.text)
        style.apply_hints(painter)
        painter.setFont(font)
        painter.setPen(style.qcolor())
        painter.drawText(QPointF(item.x - width / 2.0, item.baseline), item.text)
