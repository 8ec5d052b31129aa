"""Second-aligned redraw timer for interactive mode.

The scheduler is owned by the host that owns the face. It keeps one
single-shot QTimer and re-arms it after every firing so redraws land on
whole-second boundaries instead of drifting.
"""
from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from core.constants.timing import IMMEDIATE_REDRAW_DELAY_MS, INTERACTIVE_UPDATE_RATE_MS
from core.logging.logger import get_logger, is_verbose_logging
from faces.clock_state import current_time_ms

logger = get_logger(__name__)


def compute_delay_ms(now_ms: int, interval_ms: int = INTERACTIVE_UPDATE_RATE_MS) -> int:
    """Milliseconds until the next ``interval_ms`` boundary (1..interval_ms)."""
    return interval_ms - (now_ms % interval_ms)


class RedrawScheduler(QObject):
    """
    Periodic redraw driver.

    Runs only while the face is visible and interactive. Each firing calls
    ``invalidate`` and, if still allowed to run, re-arms for the next whole
    second.
    """

    # Emitted on every firing, after invalidate()
    frame_requested = Signal()

    def __init__(self, invalidate: Callable[[], None],
                 interval_ms: int = INTERACTIVE_UPDATE_RATE_MS,
                 clock: Optional[Callable[[], int]] = None,
                 parent: Optional[QObject] = None):
        """
        Args:
            invalidate: Zero-arg callable that requests a repaint.
            interval_ms: Redraw period.
            clock: Epoch-millisecond clock, for tests. Defaults to wall time.
            parent: Qt parent.
        """
        super().__init__(parent)
        if interval_ms <= 0:
            logger.warning("[FALLBACK] Invalid redraw interval %s, using %s",
                           interval_ms, INTERACTIVE_UPDATE_RATE_MS)
            interval_ms = INTERACTIVE_UPDATE_RATE_MS
        self._invalidate = invalidate
        self._interval_ms = interval_ms
        self._clock = clock or current_time_ms
        self._visible = False
        self._ambient = False
        self._shut_down = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._handle_update)

    # ------------------------------------------------------------------
    # State inputs
    # ------------------------------------------------------------------

    def set_visible(self, visible: bool) -> None:
        self._visible = bool(visible)
        self.update_timer()

    def set_ambient(self, ambient: bool) -> None:
        self._ambient = bool(ambient)
        self.update_timer()

    def should_run(self) -> bool:
        """The timer runs only while visible and interactive."""
        return self._visible and not self._ambient and not self._shut_down

    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    # ------------------------------------------------------------------
    # Timer control
    # ------------------------------------------------------------------

    def update_timer(self) -> None:
        """Start the timer if it should be running, or stop it if it should not."""
        self.cancel()
        if self.should_run():
            self._timer.start(IMMEDIATE_REDRAW_DELAY_MS)
            logger.debug("[SCHEDULER] Started")

    def cancel(self) -> None:
        """Stop any pending redraw. Safe to call when nothing is scheduled."""
        if self._timer.isActive():
            self._timer.stop()
            logger.debug("[SCHEDULER] Cancelled")

    def shutdown(self) -> None:
        """Cancel and refuse to re-arm. Called on host teardown."""
        self._shut_down = True
        self.cancel()
        logger.debug("[SCHEDULER] Shut down")

    def _handle_update(self) -> None:
        self._invalidate()
        self.frame_requested.emit()
        if self.should_run():
            delay_ms = compute_delay_ms(self._clock(), self._interval_ms)
            self._timer.start(delay_ms)
            if is_verbose_logging():
                logger.debug("[SCHEDULER] Next redraw in %d ms", delay_ms)
