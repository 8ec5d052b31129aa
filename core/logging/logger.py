"""
Logging setup for the watch face previewer.

File logs rotate under logs/. The console is only attached in debug mode,
where tagged lines are coloured and per-second chatter is collapsed.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Tuple


_VERBOSE: bool = False
# Project root; setup_logging() moves it next to the executable in frozen builds.
_BASE_DIR: Path = Path(__file__).parent.parent.parent

LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'
LOG_FILE_NAME = 'watchfaces.log'
LOG_MAX_BYTES = 1 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Marks handlers installed by setup_logging so a second call replaces them.
_HANDLER_FLAG = '_watchfaces_handler'


class ColoredFormatter(logging.Formatter):
    """ANSI-coloured console formatter.

    Message tags win over level colours so fallback paths stay visible even
    when logged at INFO.
    """

    RESET = '\033[0m'
    BOLD = '\033[1m'
    FALLBACK_COLOR = '\033[38;5;208m'  # Orange
    AMBIENT_COLOR = '\033[38;5;135m'   # Purple

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    TAG_COLORS = (
        ('[FALLBACK]', FALLBACK_COLOR),
        ('[AMBIENT]', AMBIENT_COLOR),
    )

    def color_for(self, record: logging.LogRecord) -> Optional[str]:
        text = str(record.msg)
        for tag, color in self.TAG_COLORS:
            if tag in text:
                return color
        return self.LEVEL_COLORS.get(record.levelno)

    def format(self, record: logging.LogRecord) -> str:
        color = self.color_for(record)
        if color is None:
            return super().format(record)

        # Colour a copy; the original record is shared with the file handler.
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        return f"{color}{super().format(tinted)}{self.RESET}"


class SuppressingStreamHandler(logging.StreamHandler):
    """Console handler that collapses runs of lines from one source.

    Consecutive DEBUG/INFO records with the same logger name and level are
    counted instead of printed. The count is written as
    "[N Suppressed: CHECK LOG]" when the run ends. WARNING and above always
    print. File logs are unaffected.
    """

    SUMMARY_TEMPLATE = "[{count} Suppressed: CHECK LOG]"

    def __init__(self, stream=None):
        super().__init__(stream)
        self._run_key: Optional[Tuple[str, int]] = None
        self._run_record: Optional[logging.LogRecord] = None
        self._run_count = 0

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno >= logging.WARNING:
                self._end_run()
                self._write(record)
                return

            key = (record.name, record.levelno)
            if key == self._run_key:
                self._run_count += 1
                return

            self._end_run()
            self._write(record)
            self._run_key = key
            self._run_record = record
        except Exception:
            self.handleError(record)

    def _end_run(self) -> None:
        record, count = self._run_record, self._run_count
        self._run_key = None
        self._run_record = None
        self._run_count = 0
        if record is None or count <= 0:
            return

        summary = logging.makeLogRecord(record.__dict__)
        summary.msg = self.SUMMARY_TEMPLATE.format(count=count)
        summary.args = None
        summary.exc_info = None
        summary.exc_text = None
        self._write(summary)

    def _write(self, record: logging.LogRecord) -> None:
        """Write one record, replacing characters the console cannot encode."""
        stream = self.stream
        if stream is None:
            return
        text = self.format(record) + self.terminator
        try:
            stream.write(text)
        except UnicodeEncodeError:
            encoding = getattr(stream, "encoding", None) or "ascii"
            stream.write(text.encode(encoding, errors="replace").decode(encoding))
        self.flush()

    def close(self) -> None:
        try:
            self._end_run()
        finally:
            super().close()


def get_log_dir() -> Path:
    """Return the directory used for log files."""
    return _BASE_DIR / "logs"


def _install(root: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_FLAG, True)
    root.addHandler(handler)


def _remove_installed(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root.removeHandler(handler)
            handler.close()


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """
    Configure application logging.

    Args:
        debug: DEBUG level and console output.
        verbose: Per-frame render and scheduler logs. Implies debug.
    """
    global _VERBOSE, _BASE_DIR

    debug_enabled = debug or verbose
    level = logging.DEBUG if debug_enabled else logging.INFO

    if getattr(sys, "frozen", False):
        exe_path = Path(getattr(sys, "executable", "") or "")
        if exe_path.exists():
            _BASE_DIR = exe_path.parent

    log_dir = get_log_dir()
    log_dir.mkdir(exist_ok=True)

    root_logger = logging.getLogger()
    _remove_installed(root_logger)
    root_logger.setLevel(level)

    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8',
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    file_handler.setLevel(level)
    _install(root_logger, file_handler)

    if debug_enabled:
        console_handler = SuppressingStreamHandler(sys.stdout)
        formatter_cls = ColoredFormatter if sys.stdout.isatty() else logging.Formatter
        console_handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        _install(root_logger, console_handler)

    _VERBOSE = bool(verbose)

    root_logger.info("=" * 60)
    root_logger.info("WatchFaces logging initialized (debug=%s, verbose=%s, dir=%s)",
                     debug_enabled, _VERBOSE, log_dir)
    root_logger.info("=" * 60)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""
    return _VERBOSE
