"""
Analog watch face.

Draws a themed background, a text label, 60 minute ticks, 12 hour labels,
hour/minute/second hands and a centre hub. The second hand is hidden in
ambient mode.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter

from core.constants import sizes
from core.logging.logger import get_logger
from faces.base_face import WatchFace
from faces.clock_state import ClockState
from faces.geometry import TWO_PI, Point, ViewportGeometry, dial_point
from faces.styles import BLACK, DisplayMode, PaintStyle, StyleSet, resolve_typeface

logger = get_logger(__name__)

# Hand-placed label positions, as (label, dx, dy) from the centre. They are
# tuned for the default font size rather than derived from the tick circle.
HOUR_LABEL_OFFSETS: Tuple[Tuple[str, float, float], ...] = (
    ("12", -10.0, -120.0),
    ("1", 60.0, -100.0),
    ("2", 105.0, -57.0),
    ("3", 120.0, 7.0),
    ("4", 105.0, 73.0),
    ("5", 55.0, 120.0),
    ("6", -3.0, 130.0),
    ("7", -69.0, 120.0),
    ("8", -115.0, 73.0),
    ("9", -132.0, 7.0),
    ("10", -115.0, -57.0),
    ("11", -69.0, -100.0),
)

ROLE_BACKGROUND = "background"
ROLE_LABEL = "label"
ROLE_HOUR_TEXT = "hour_text"
ROLE_TICK = "tick"
ROLE_HAND = "hand"
ROLE_SECOND_HAND = "second_hand"
ROLE_HUB = "hub"


@dataclass(frozen=True)
class TickSegment:
    index: int
    is_long: bool
    inner: Point
    outer: Point


@dataclass(frozen=True)
class HandSegment:
    role: str
    angle: float
    length: float
    start: Point
    end: Point


@dataclass(frozen=True)
class HandLengths:
    """Hand lengths derived from the viewport; recomputed on resize."""

    hour: float
    minute: float
    second: float

    @classmethod
    def from_geometry(cls, geometry: ViewportGeometry) -> "HandLengths":
        """Lengths never go below 0; on small dials the shortest hands vanish."""
        cx = geometry.center_x
        return cls(
            hour=max(0.0, cx - sizes.HOUR_HAND_INSET),
            minute=max(0.0, cx - sizes.MINUTE_HAND_INSET),
            second=max(0.0, cx - sizes.SECOND_HAND_INSET),
        )


def is_long_tick(index: int) -> bool:
    return index % sizes.LONG_TICK_EVERY == 0


def tick_segments(geometry: ViewportGeometry) -> List[TickSegment]:
    """The 60 minute ticks, index 0 at twelve o'clock."""
    outer_radius = geometry.center_x
    segments = []
    for index in range(sizes.TICK_COUNT):
        long_tick = is_long_tick(index)
        inset = sizes.LONG_TICK_INSET if long_tick else sizes.SHORT_TICK_INSET
        angle = index * TWO_PI / sizes.TICK_COUNT
        segments.append(TickSegment(
            index=index,
            is_long=long_tick,
            inner=dial_point(geometry, angle, max(0.0, outer_radius - inset)),
            outer=dial_point(geometry, angle, outer_radius),
        ))
    return segments


def second_angle(state: ClockState) -> float:
    """Second hand angle; continuous because ``state.second`` carries milliseconds."""
    return state.second / 60.0 * TWO_PI


def minute_angle(state: ClockState) -> float:
    minutes = state.minute + state.second / 60.0
    return minutes / 60.0 * TWO_PI


def hour_angle(state: ClockState) -> float:
    """Hour hand angle from the raw 0-11 hour plus the fractional minute."""
    minutes = state.minute + state.second / 60.0
    hours = state.hour + minutes / 60.0
    return hours / 12.0 * TWO_PI


def hand_segments(state: ClockState, geometry: ViewportGeometry, mode: DisplayMode,
                  lengths: Optional[HandLengths] = None) -> List[HandSegment]:
    """Hands in paint order. The second hand is only present in interactive mode."""
    lengths = lengths or HandLengths.from_geometry(geometry)
    center = geometry.center
    hands = [
        ("minute", minute_angle(state), lengths.minute),
        ("hour", hour_angle(state), lengths.hour),
    ]
    if mode is DisplayMode.INTERACTIVE:
        hands.append(("second", second_angle(state), lengths.second))
    return [
        HandSegment(role=role, angle=angle, length=length, start=center,
                    end=dial_point(geometry, angle, length))
        for role, angle, length in hands
    ]


class AnalogFace(WatchFace):
    """Radar-style analog face."""

    NAME = "analog"
    AMBIENT_INK_ROLES = (ROLE_LABEL, ROLE_HOUR_TEXT, ROLE_TICK, ROLE_HAND, ROLE_SECOND_HAND, ROLE_HUB)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._lengths: Optional[HandLengths] = None
        self._ticks: List[TickSegment] = []
        self._label_text = self._face_str("label_text", "radar").lower()

    def build_styles(self) -> StyleSet:
        typeface = resolve_typeface(self._face_str("font_family"), self._face_str("font_path"))
        hand_color = self._face_color("hand_color")
        tick_color = self._face_color("tick_color")
        tick_stroke = self._face_float("tick_stroke", 2.0)
        return StyleSet({
            ROLE_BACKGROUND: PaintStyle(color=self._face_color("background_color")),
            ROLE_LABEL: PaintStyle(
                color=self._face_color("label_color"),
                text_size=self._face_float("label_text_size", 60.0),
                typeface=typeface,
            ),
            ROLE_HOUR_TEXT: PaintStyle(
                color=tick_color,
                text_size=self._face_float("hour_text_size", 20.0),
                typeface=typeface,
            ),
            ROLE_TICK: PaintStyle(color=tick_color, stroke_width=tick_stroke),
            ROLE_HAND: PaintStyle(
                color=hand_color,
                stroke_width=self._face_float("hand_stroke", 3.0),
                square_cap=True,
            ),
            ROLE_SECOND_HAND: PaintStyle(color=hand_color, stroke_width=tick_stroke, square_cap=True),
            ROLE_HUB: PaintStyle(color=hand_color),
        })

    def _on_geometry_changed(self, geometry: ViewportGeometry) -> None:
        self._lengths = HandLengths.from_geometry(geometry)
        self._ticks = tick_segments(geometry)

    @property
    def hand_lengths(self) -> Optional[HandLengths]:
        return self._lengths

    @property
    def label_text(self) -> str:
        return self._label_text

    def render(self, painter: QPainter, state: ClockState, geometry: ViewportGeometry,
               mode: DisplayMode, styles: Optional[StyleSet] = None) -> None:
        styles = styles if styles is not None else self.active_styles
        if geometry != self.geometry or self._lengths is None:
            lengths = HandLengths.from_geometry(geometry)
            ticks = tick_segments(geometry)
        else:
            lengths, ticks = self._lengths, self._ticks

        painter.save()
        try:
            self._draw_background(painter, geometry, mode, styles[ROLE_BACKGROUND])
            self._draw_label(painter, geometry, styles[ROLE_LABEL])
            self._draw_ticks(painter, ticks, styles[ROLE_TICK])
            self._draw_hour_labels(painter, geometry, styles[ROLE_HOUR_TEXT])
            for hand in hand_segments(state, geometry, mode, lengths):
                role = ROLE_SECOND_HAND if hand.role == "second" else ROLE_HAND
                self._draw_line(painter, hand.start, hand.end, styles[role])
            self._draw_hub(painter, geometry, styles[ROLE_HUB])
        finally:
            painter.restore()

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    @staticmethod
    def _draw_background(painter: QPainter, geometry: ViewportGeometry,
                         mode: DisplayMode, style: PaintStyle) -> None:
        rect = QRectF(0, 0, geometry.width, geometry.height)
        if mode is DisplayMode.AMBIENT:
            painter.fillRect(rect, QColor(*BLACK))
        else:
            painter.fillRect(rect, style.qcolor())

    def _draw_label(self, painter: QPainter, geometry: ViewportGeometry, style: PaintStyle) -> None:
        if not self._label_text:
            return
        x, y = geometry.offset(sizes.LABEL_OFFSET_X, sizes.LABEL_OFFSET_Y)
        self._draw_text(painter, self._label_text, x, y, style)

    def _draw_ticks(self, painter: QPainter, ticks: List[TickSegment], style: PaintStyle) -> None:
        for tick in ticks:
            self._draw_line(painter, tick.inner, tick.outer, style)

    def _draw_hour_labels(self, painter: QPainter, geometry: ViewportGeometry, style: PaintStyle) -> None:
        for text, dx, dy in HOUR_LABEL_OFFSETS:
            x, y = geometry.offset(dx, dy)
            self._draw_text(painter, text, x, y, style)

    @staticmethod
    def _draw_hub(painter: QPainter, geometry: ViewportGeometry, style: PaintStyle) -> None:
        style.apply_hints(painter)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(style.qcolor())
        radius = sizes.CENTER_HUB_RADIUS
        painter.drawEllipse(QPointF(*geometry.center), radius, radius)

    @staticmethod
    def _draw_line(painter: QPainter, start: Point, end: Point, style: PaintStyle) -> None:
        style.apply_hints(painter)
        painter.setPen(style.pen())
        painter.drawLine(QPointF(*start), QPointF(*end))

    @staticmethod
    def _draw_text(painter: QPainter, text: str, x: float, baseline: float, style: PaintStyle) -> None:
        """Left-aligned text with its baseline at ``baseline``."""
        style.apply_hints(painter)
        painter.setFont(style.font())
        painter.setPen(style.qcolor())
        painter.drawText(QPointF(x, baseline), text)
