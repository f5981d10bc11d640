"""
Main application entry point.

Initializes logging, settings and the Flet UI.
"""

import logging
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

import flet as ft

from app_controller import AppController
from config_manager import ConfigManager
from localization_manager import LocalizationManager as LM
from logger_config import setup_logging
from theme import Theme

# Setup logging immediately
setup_logging()
logger = logging.getLogger(__name__)

CONTROLLER: Optional[AppController] = None


def main(page: ft.Page):
    """Build the page and wire the controller."""
    # pylint: disable=global-statement
    global CONTROLLER

    logger.info("Initializing main UI...")
    config = ConfigManager.load_config()
    LM.load_language(config.get("language", "en"))

    page.title = LM.get("app_title")
    page.theme_mode = ft.ThemeMode.DARK
    page.theme = Theme.get_theme()
    page.bgcolor = Theme.BG_DARK
    page.padding = 0

    CONTROLLER = AppController(page, config)
    page.on_keyboard_event = CONTROLLER.on_keyboard
    page.add(CONTROLLER.build())
    logger.info("Main view added to page.")

    def cleanup_on_disconnect(e):
        # pylint: disable=unused-argument
        logger.info("Page disconnected, cleaning up...")
        if CONTROLLER:
            CONTROLLER.cleanup()

    page.on_disconnect = cleanup_on_disconnect
    page.on_close = cleanup_on_disconnect


def global_crash_handler(exctype, value, tb):
    """Write a crash report for any unhandled exception, then exit."""
    error_trace = "".join(traceback.format_exception(exctype, value, tb))
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    crash_report = (
        f"LINKPASTE CRASH REPORT [{timestamp}]\n"
        f"{'-'*50}\n"
        f"Type: {exctype.__name__}\n"
        f"Message: {value}\n\n"
        f"Traceback:\n{error_trace}\n"
        f"{'-'*50}\n\n"
    )

    log_path = Path.home() / ".linkpaste" / "crash.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(
            log_path, "a", encoding="utf-8", opener=lambda p, f: os.open(p, f, 0o600)
        ) as f:
            f.write(crash_report)
    except OSError:
        print(crash_report, file=sys.stderr)

    logger.critical("LinkPaste crashed, report saved to %s", log_path)
    logger.critical(crash_report)
    sys.exit(1)


def run():
    """Console entry point."""
    sys.excepthook = global_crash_handler

    logger.info("LinkPaste starting (Python %s)", sys.version.split()[0])

    if os.environ.get("FLET_WEB"):
        ft.app(target=main, view=ft.AppView.WEB_BROWSER, port=8550)
    else:
        try:
            ft.app(target=main)
        except Exception as e:  # pylint: disable=broad-exception-caught
            global_crash_handler(type(e), e, e.__traceback__)


if __name__ == "__main__":
    run()
