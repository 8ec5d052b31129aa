"""Desktop host for the watch faces: preview widget and redraw scheduling."""

from .face_host import WatchFaceHost
from .redraw_scheduler import RedrawScheduler, compute_delay_ms

__all__ = ['WatchFaceHost', 'RedrawScheduler', 'compute_delay_ms']
