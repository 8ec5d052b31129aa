"""Timing constants for the watch faces.

All timing values are in milliseconds unless otherwise noted.
"""

# =============================================================================
# Redraw
# =============================================================================

INTERACTIVE_UPDATE_RATE_MS = 1000
"""Redraw period in interactive mode. Once a second advances the second hand."""

TIME_TICK_INTERVAL_MS = 60000
"""Host time-tick period. Keeps ambient faces current once a minute."""

IMMEDIATE_REDRAW_DELAY_MS = 0
"""Delay for the first redraw after the scheduler is (re)started."""
