"""
WatchFaces - Main Entry Point

Previews the analog and digital watch faces in a desktop window, or renders
a single frame to an image file.
"""
import argparse
import os
import sys
from typing import List, Optional, Tuple

from PySide6.QtCore import QSize
from PySide6.QtWidgets import QApplication

from core.constants import sizes
from core.logging.logger import setup_logging, get_logger
from core.settings.settings_manager import SettingsManager
from faces import FACE_TYPES, create_face
from faces.timezone_utils import get_common_timezones, get_local_timezone
from host.face_host import WatchFaceHost
from versioning import APP_DESCRIPTION, APP_EXE_NAME, APP_NAME, APP_ORGANIZATION, parse_version, version_string

logger = get_logger(__name__)


def parse_size(value: str) -> Tuple[int, int]:
    """Parse 'WxH' (e.g. '320x320') into a positive (width, height) pair."""
    try:
        width_str, height_str = value.lower().split("x", 1)
        width, height = int(width_str), int(height_str)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size '{value}' (expected WxH, e.g. 320x320)") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {value}")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_EXE_NAME,
        description=APP_DESCRIPTION,
    )
    parser.add_argument("--face", choices=sorted(FACE_TYPES), default=None,
                        help="Face to show (default: the 'display.face' setting)")
    parser.add_argument("--ambient", action="store_true", help="Start in ambient mode")
    parser.add_argument("--low-bit-ambient", action="store_true",
                        help="Report a low-bit ambient display")
    parser.add_argument("--burn-in-protection", action="store_true",
                        help="Report burn-in protection")
    parser.add_argument("--size", type=parse_size, default=None, metavar="WxH",
                        help="Viewport size (default: %dx%d)" % (sizes.DEFAULT_VIEWPORT_WIDTH,
                                                                 sizes.DEFAULT_VIEWPORT_HEIGHT))
    parser.add_argument("--timezone", default=None, metavar="TZ",
                        help="'local', a timezone name such as Europe/London, or UTC+5:30")
    parser.add_argument("--snapshot", default=None, metavar="PATH",
                        help="Render one frame to an image file and exit")
    parser.add_argument("--at", type=int, default=None, metavar="EPOCH_MS",
                        help="Timestamp for --snapshot (default: now)")
    parser.add_argument("--list-timezones", action="store_true",
                        help="Print common timezone choices and exit")
    parser.add_argument("--reset-settings", action="store_true",
                        help="Restore every stored setting to its default before starting")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable per-frame debug logging (implies --debug)")
    parser.add_argument("--version", action="version", version=version_string())
    return parser


def list_timezones() -> int:
    for display_name, tz in get_common_timezones():
        print(f"{tz:<22} {display_name}")
    print(f"\nDetected local timezone: {get_local_timezone()}")
    return 0


def _configured_size(settings: SettingsManager) -> Tuple[int, int]:
    raw = settings.get('display.size', [sizes.DEFAULT_VIEWPORT_WIDTH, sizes.DEFAULT_VIEWPORT_HEIGHT])
    try:
        width, height = (int(v) for v in raw)
    except (TypeError, ValueError):
        logger.warning("[FALLBACK] Invalid display.size %r, using default", raw)
        return sizes.DEFAULT_VIEWPORT_WIDTH, sizes.DEFAULT_VIEWPORT_HEIGHT
    if width <= 0 or height <= 0:
        logger.warning("[FALLBACK] Invalid display.size %r, using default", raw)
        return sizes.DEFAULT_VIEWPORT_WIDTH, sizes.DEFAULT_VIEWPORT_HEIGHT
    return width, height


def build_host(args: argparse.Namespace, settings: SettingsManager) -> Tuple[WatchFaceHost, Tuple[int, int]]:
    """Create the face and its host from CLI arguments layered over settings."""
    face_name = args.face or str(settings.get('display.face', 'analog'))
    face = create_face(face_name, settings, timezone=args.timezone)

    # CLI device flags are pinned against later settings changes.
    pinned_properties = None
    if args.low_bit_ambient or args.burn_in_protection:
        pinned_properties = {
            "low_bit_ambient": args.low_bit_ambient or settings.get_bool('display.low_bit_ambient'),
            "burn_in_protection": args.burn_in_protection or settings.get_bool('display.burn_in_protection'),
        }

    host = WatchFaceHost(face, settings, timezone=args.timezone, device_properties=pinned_properties)
    if args.ambient:
        host.set_ambient_mode(True)

    size = args.size or _configured_size(settings)
    return host, size


def run_snapshot(host: WatchFaceHost, size: Tuple[int, int], path: str,
                 timestamp_ms: Optional[int]) -> int:
    image = host.render_to_image(timestamp_ms, QSize(*size))
    host.cleanup()
    if not image.save(path):
        logger.error("Failed to save snapshot to %s", path)
        print(f"error: could not save snapshot to {path}", file=sys.stderr)
        return 1
    logger.info("Snapshot saved to %s (%dx%d)", path, size[0], size[1])
    return 0


def run_preview(app: QApplication, host: WatchFaceHost, size: Tuple[int, int]) -> int:
    host.resize(*size)
    host.show()
    app.aboutToQuit.connect(host.cleanup)
    logger.info("Preview window opened (%s face, %dx%d) - press A to toggle ambient mode",
                host.face.NAME, size[0], size[1])
    return app.exec()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the watch face previewer."""
    args = build_parser().parse_args(argv)

    setup_logging(debug=args.debug, verbose=args.verbose)

    logger.info("=" * 60)
    logger.info("%s Starting", version_string())
    logger.info("=" * 60)

    if args.list_timezones:
        return list_timezones()

    if args.at is not None and args.snapshot is None:
        logger.warning("--at only applies to --snapshot, ignoring")

    # Snapshots never show a window.
    if args.snapshot is not None:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setApplicationVersion(str(parse_version()))

    settings = SettingsManager(organization=APP_ORGANIZATION, application=APP_NAME)
    if args.reset_settings:
        settings.reset_to_defaults()

    exit_code = 0
    try:
        host, size = build_host(args, settings)
        if args.snapshot is not None:
            exit_code = run_snapshot(host, size, args.snapshot, args.at)
        else:
            exit_code = run_preview(app, host, size)
    except Exception as e:
        logger.exception(f"Fatal error in main: {e}")
        exit_code = 1

    settings.save()

    logger.info("=" * 60)
    logger.info(f"{APP_NAME} Exiting (code={exit_code})")
    logger.info("=" * 60)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
