"""Application bootstrap for Lash Mapper."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from . import __version__
from .core.config import DEFAULT_CONFIG_PATH, ConfigManager
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
    app.setApplicationName("Lash Mapper")
    app.setApplicationVersion(__version__)
    app.setOrganizationName("Lash Mapper")
    return app


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ConfigManager:
    """
    Load the editor configuration before any window exists.

    Args:
        config_path: YAML file with the editor settings

    Returns:
        ConfigManager holding the loaded configuration
    """
    manager = ConfigManager(config_path)
    config = manager.config
    logger.info(
        f"Using config {config_path.resolve()} "
        f"(undo policy: {config.undo_policy}, autosave: {config.autosave})"
    )
    return manager


def create_main_window(config_manager: ConfigManager) -> MainWindow:
    """
    Create the main application window.

    Args:
        config_manager: Loaded editor configuration

    Returns:
        MainWindow instance
    """
    window = MainWindow(config_manager)
    if config_manager.config.default_directory:
        window.status_bar.showMessage(
            f"Client files: {config_manager.config.default_directory}", 5000
        )
    return window


def run() -> int:
    """
    Run the Lash Mapper application.

    Returns:
        Exit code
    """
    logger.info("Starting Lash Mapper")

    try:
        app = create_application()
        config_manager = load_config()
        window = create_main_window(config_manager)
        window.show()

        return app.exec()

    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        return 1


def main() -> None:
    """Main entry point for the application."""
    sys.exit(run())


if __name__ == "__main__":
    main()
