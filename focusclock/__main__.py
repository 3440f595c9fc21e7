"""Allow running FocusClock as a module: python -m focusclock."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from .app import FocusClockApp
from .audio.sounds import SoundManager
from .database.db import APP_DATA_DIR, configure_data_dir, init_db
from .timer.engine import TimerEngine

logger = logging.getLogger("focusclock")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="focusclock",
        description="Pomodoro, stopwatch and countdown timer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  Space    Start/Pause
  Ctrl+R   Reset
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        metavar="PATH",
        help=f"Where settings, stats and sounds are kept (default: {APP_DATA_DIR})",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable the completion sound",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_dir = args.data_dir or APP_DATA_DIR
    if args.data_dir is not None:
        configure_data_dir(args.data_dir)
    init_db()
    logger.info("FocusClock ready (data in %s)", data_dir)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("FocusClock")
    app.setOrganizationName("FocusClock")

    sounds = SoundManager(
        sounds_dir=Path(data_dir).expanduser() / "sounds",
        enabled=not args.mute,
    )
    engine = TimerEngine(notifier=sounds)
    window = FocusClockApp(engine)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
