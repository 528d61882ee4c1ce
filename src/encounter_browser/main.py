"""
Encounter Browser - Entry Point

Paginated, filterable browser for recorded encounters.
"""

import argparse
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from .core import AppSettings, EncounterStore
from .utils.logging_config import LOG_LEVELS, setup_logging
from .app import MainWindow


def main() -> int:
    """
    Application entry point.

    Returns:
        Exit code (0 for success)
    """
    arg_parser = argparse.ArgumentParser(description="Encounter Browser")
    arg_parser.add_argument(
        "--database",
        type=Path,
        help="Encounter database file (default: from settings)",
    )
    arg_parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Console log level (default: from settings)",
    )
    args, qt_args = arg_parser.parse_known_args()

    settings = AppSettings()
    logger = setup_logging(args.log_level or settings.log_level)
    logger.info("Starting Encounter Browser")

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("Encounter Browser")
    app.setApplicationVersion("1.0.0")
    app.setOrganizationName("Encounter Tools")

    font = QFont("Segoe UI", 10)
    if not font.exactMatch():
        font = QFont()
        font.setPointSize(10)
    app.setFont(font)

    db_path = args.database or settings.database_path
    store = EncounterStore(db_path)

    window = MainWindow(store, settings)
    window.show()

    logger.info("Application window shown")

    exit_code = app.exec()

    store.close()
    logger.info(f"Application exiting with code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
