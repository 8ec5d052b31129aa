"""Size constants for the watch faces.

All lengths are in pixels. Hand and tick lengths are insets measured
inward from the horizontal centre, so they scale with the viewport.
"""

# =============================================================================
# Viewport
# =============================================================================

DEFAULT_VIEWPORT_WIDTH = 320
DEFAULT_VIEWPORT_HEIGHT = 320

# =============================================================================
# Analog dial
# =============================================================================

TICK_COUNT = 60
"""Number of minute ticks around the dial."""

LONG_TICK_EVERY = 5
"""Every Nth tick (including index 0) is drawn long."""

LONG_TICK_INSET = 20
SHORT_TICK_INSET = 10

# Hand length is center_x minus the inset, floored at 0 below a 160 px wide viewport.
HOUR_HAND_INSET = 80
MINUTE_HAND_INSET = 50
SECOND_HAND_INSET = 20

CENTER_HUB_RADIUS = 8.5

LABEL_OFFSET_X = -75
LABEL_OFFSET_Y = -40

# =============================================================================
# Digital layout (baseline offsets from the centre)
# =============================================================================

TIME_TEXT_OFFSET_Y = -50
DATE_TEXT_OFFSET_Y = -20
TAG_TEXT_OFFSET_Y = 70
