"""Application bootstrap for BBox Buddy."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from . import __version__
from .ui.main_window import MainWindow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger(__name__)


def create_application() -> QApplication:
    """
    Create and configure the Qt application.

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)
    app.setApplicationName("BBox Buddy")
    app.setApplicationVersion(__version__)
    app.setOrganizationName("BBox Buddy")
    return app


def run() -> int:
    """
    Run the BBox Buddy application.

    Returns:
        Exit code
    """
    logger.info("Starting BBox Buddy")

    try:
        app = create_application()
        window = MainWindow()
        window.show()
        logger.info("MainWindow shown")

        return app.exec()

    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        return 1


def main() -> None:
    """Main entry point for the application."""
    sys.exit(run())


if __name__ == "__main__":
    main()
