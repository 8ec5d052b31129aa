"""Viewport geometry and dial rotation helpers."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Tuple

TWO_PI = math.pi * 2.0

Point = Tuple[float, float]


@dataclass(frozen=True)
class ViewportGeometry:
    """Drawing surface size. All face coordinates are relative to the centre."""

    width: int
    height: int

    @property
    def center_x(self) -> float:
        return self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.height / 2.0

    @property
    def center(self) -> Point:
        return (self.center_x, self.center_y)

    def offset(self, dx: float, dy: float) -> Point:
        return (self.center_x + dx, self.center_y + dy)


def dial_point(geometry: ViewportGeometry, angle: float, radius: float) -> Point:
    """Point at ``radius`` from the centre, angle 0 straight up and increasing clockwise."""
    return (
        geometry.center_x + math.sin(angle) * radius,
        geometry.center_y - math.cos(angle) * radius,
    )
