from __future__ import annotations

import io
import logging

from core.logging.logger import ColoredFormatter, SuppressingStreamHandler


def _build_logger(name: str, stream: io.StringIO) -> tuple[logging.Logger, SuppressingStreamHandler]:
    """Isolated logger bound to ``stream`` so the root configuration is untouched."""
    handler = SuppressingStreamHandler(stream)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))

    logger = logging.getLogger(name)
    logger.handlers = []  # type: ignore[assignment]
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return logger, handler


def test_duplicate_sources_collapse_into_summary() -> None:
    stream = io.StringIO()
    logger, handler = _build_logger("test_suppress.scheduler", stream)

    for _ in range(4):
        logger.debug("[SCHEDULER] Next redraw")
    logger.warning("[FALLBACK] something")
    handler.flush()

    lines = stream.getvalue().splitlines()
    assert lines == [
        "test_suppress.scheduler DEBUG [SCHEDULER] Next redraw",
        "test_suppress.scheduler DEBUG [3 Suppressed: CHECK LOG]",
        "test_suppress.scheduler WARNING [FALLBACK] something",
    ]


def test_warnings_are_never_suppressed() -> None:
    stream = io.StringIO()
    logger, _ = _build_logger("test_suppress.warnings", stream)

    logger.warning("one")
    logger.warning("two")

    assert stream.getvalue().splitlines() == [
        "test_suppress.warnings WARNING one",
        "test_suppress.warnings WARNING two",
    ]


def test_close_flushes_pending_summary() -> None:
    stream = io.StringIO()
    logger, handler = _build_logger("test_suppress.close", stream)

    logger.info("tick")
    logger.info("tick")
    handler.close()

    assert stream.getvalue().splitlines()[-1] == "test_suppress.close INFO [1 Suppressed: CHECK LOG]"


def test_colored_formatter_highlights_fallback() -> None:
    formatter = ColoredFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "[FALLBACK] using local time", None, None)

    text = formatter.format(record)

    assert text.startswith(ColoredFormatter.FALLBACK_COLOR)
    assert "[FALLBACK] using local time" in text
    # Record is restored for other handlers.
    assert record.levelname == "INFO"
