"""
Logging configuration module.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List

# Module-level flag to prevent re-initialization
_LOGGING_INITIALIZED = False

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024


def _log_files() -> List[Path]:
    """Local log first, then one in the user's home (or cwd if unwritable)."""
    home_log = Path.home() / ".linkpaste" / "app.log"
    try:
        home_log.parent.mkdir(parents=True, exist_ok=True)
    except Exception:  # pylint: disable=broad-exception-caught
        home_log = Path("app.log")

    files: List[Path] = []
    for log_file in (Path("linkpaste.log"), home_log):
        if log_file not in files:
            files.append(log_file)
    return files


def setup_logging(console_level: int = logging.INFO):
    """Configure the root logger: console at ``console_level``, files at DEBUG."""
    global _LOGGING_INITIALIZED  # pylint: disable=global-statement

    if _LOGGING_INITIALIZED:
        logging.debug("Logging already initialized, skipping setup")
        return

    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if root_logger.handlers:
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for log_file in _log_files():
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=MAX_LOG_BYTES, backupCount=2, encoding="utf-8"
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except Exception as e:  # pylint: disable=broad-exception-caught
            print(f"Failed to setup log file {log_file}: {e}", file=sys.stderr)

    # Third-party chatter stays out of the debug log.
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _LOGGING_INITIALIZED = True
    logging.info("Logging initialized successfully.")
