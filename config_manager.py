"""
Configuration management module.

Handles loading, saving, and validating the paste settings
with atomic file operations and error recovery.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# Configuration file path with fallback
try:
    CONFIG_FILE = Path.home() / ".linkpaste" / "config.json"
except Exception:  # pylint: disable=broad-exception-caught
    CONFIG_FILE = Path("config.json")

DEFAULT_FORMATS: List[Dict[str, Any]] = [
    {
        "name": "Quote",
        "template": "> [{{title}}]({{url}})\n> {{text}}\n",
        "require_fetch": True,
    },
    {
        "name": "Link only",
        "template": "[{{title}}]({{url}})",
        "require_fetch": True,
    },
    {
        "name": "Callout",
        "template": "> [!QUOTE] [{{title}}]({{url}})\n> {{text}}\n",
        "require_fetch": True,
    },
    {
        "name": "Quote in callout",
        "template": "> [!QUOTE] [{{title}}]({{url}})\n> > {{text}}\n> \n> ",
        "require_fetch": True,
    },
    {
        "name": "Create new note",
        "template": '{{notes.create(text + ".md", f"[{title}]({url})") or ""}}',
        "require_fetch": True,
    },
]


class ConfigManager:
    """Manages paste settings with validation and atomic writes."""

    # Defaults and validation schema
    DEFAULTS: Dict[str, Any] = {
        "handle_highlight_url_only": True,
        "notice_while_fetching": True,
        "formats": DEFAULT_FORMATS,
        "format_index": 0,
        "notes_directory": "",
        "request_timeout": 10.0,
        "language": "en",
    }

    _listeners: List[Callable[[Dict[str, Any]], None]] = []
    _listeners_lock = threading.Lock()

    @staticmethod
    def defaults() -> Dict[str, Any]:
        """Return a deep copy of the defaults, safe to mutate."""
        return copy.deepcopy(ConfigManager.DEFAULTS)

    @staticmethod
    def _resolve_config_file() -> Path:
        """Resolve and return the correct config file path."""
        try:
            config_file = CONFIG_FILE
            if not config_file.parent.exists():
                config_file.parent.mkdir(parents=True, exist_ok=True)
            return config_file
        except OSError:
            # Fallback to local
            return Path("config.json")

    @staticmethod
    def _validate_formats(formats: Any) -> None:
        if not isinstance(formats, list) or not formats:
            raise ValueError("formats must be a non-empty list")

        names = set()
        for fmt in formats:
            if not isinstance(fmt, dict):
                raise ValueError("each format must be a dictionary")
            name = fmt.get("name")
            if not isinstance(name, str) or not name:
                raise ValueError("format name must be a non-empty string")
            if name in names:
                raise ValueError(f"duplicate format name: {name}")
            names.add(name)
            if not isinstance(fmt.get("template"), str):
                raise ValueError(f"template of format '{name}' must be a string")
            if not isinstance(fmt.get("require_fetch", True), bool):
                raise ValueError(f"require_fetch of format '{name}' must be a boolean")

    @staticmethod
    def _validate_config(config: Dict[str, Any]) -> None:
        """
        Validate configuration data.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a dictionary")

        for key in ("handle_highlight_url_only", "notice_while_fetching"):
            if key in config and not isinstance(config[key], bool):
                raise ValueError(f"{key} must be a boolean")

        if "formats" in config:
            ConfigManager._validate_formats(config["formats"])

        if "format_index" in config:
            val = config["format_index"]
            if not isinstance(val, int) or isinstance(val, bool) or val < 0:
                raise ValueError("format_index must be a non-negative integer")
            formats = config.get("formats")
            if isinstance(formats, list) and val >= len(formats):
                raise ValueError(
                    f"format_index {val} is out of range for {len(formats)} formats"
                )

        if "notes_directory" in config and config["notes_directory"] is not None:
            if not isinstance(config["notes_directory"], str):
                raise ValueError("notes_directory must be a string")

        if "request_timeout" in config:
            val = config["request_timeout"]
            if isinstance(val, bool) or not isinstance(val, (int, float)) or val <= 0:
                raise ValueError("request_timeout must be a positive number")

        if "language" in config and not isinstance(config["language"], str):
            raise ValueError("language must be a string")

    @staticmethod
    def load_config() -> Dict[str, Any]:
        """
        Load configuration from file with error recovery.
        """
        config_path = ConfigManager._resolve_config_file()
        logger.info("Loading config from %s", config_path)

        config = ConfigManager.defaults()

        if config_path.exists():
            try:
                # Check for empty file first
                if config_path.stat().st_size == 0:
                    logger.warning("Config file is empty, using defaults")
                    return config

                with open(config_path, encoding="utf-8") as f:
                    data = json.load(f)
                    ConfigManager._validate_config(data)
                    merged = ConfigManager.defaults()
                    merged.update(data)
                    ConfigManager._validate_config(merged)
                    config = merged
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning("Config corrupted/invalid (%s), using defaults", e)
                # Backup corrupted file
                try:
                    backup = config_path.with_suffix(".json.bak")
                    if os.path.exists(backup):
                        os.unlink(backup)
                    config_path.rename(backup)
                except OSError as exc:
                    logger.warning("Failed to backup corrupted config: %s", exc)
                return config
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Failed to load config: %s", e)
                return config

        return config

    @staticmethod
    def save_config(config: Dict[str, Any]) -> None:
        """
        Save configuration to file with atomic write operation.
        Listeners are notified once the file has been replaced.
        """
        config_path = ConfigManager._resolve_config_file()
        ConfigManager._validate_config(config)

        temp_path = None

        try:
            if not config_path.parent.exists():
                config_path.parent.mkdir(parents=True, exist_ok=True)

            # Atomic write via temp file
            fd, temp_path = tempfile.mkstemp(
                dir=str(config_path.parent),
                prefix=".config_tmp_",
                suffix=".json",
            )
            os.chmod(temp_path, 0o600)

            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2)
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, str(config_path))
            try:
                os.chmod(str(config_path), 0o600)
            except OSError:
                logger.warning("Could not set secure permissions on config file")
            logger.info("Configuration saved.")

        except Exception as e:
            logger.error("Failed to save config: %s", e)
            raise

        finally:
            # Cleanup if failed and temp file still exists
            if temp_path and os.path.exists(temp_path):
                try:
                    os.unlink(temp_path)
                except OSError as exc:
                    logger.warning(
                        "Failed to remove temp config file %s: %s", temp_path, exc
                    )

        ConfigManager._notify_listeners(config)

    @staticmethod
    def add_listener(listener: Callable[[Dict[str, Any]], None]) -> None:
        """Register a callback invoked with the config after every save."""
        with ConfigManager._listeners_lock:
            if listener not in ConfigManager._listeners:
                ConfigManager._listeners.append(listener)

    @staticmethod
    def remove_listener(listener: Callable[[Dict[str, Any]], None]) -> None:
        with ConfigManager._listeners_lock:
            if listener in ConfigManager._listeners:
                ConfigManager._listeners.remove(listener)

    @staticmethod
    def _notify_listeners(config: Dict[str, Any]) -> None:
        with ConfigManager._listeners_lock:
            listeners = list(ConfigManager._listeners)

        for listener in listeners:
            try:
                listener(copy.deepcopy(config))
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Error in config listener: %s", e)
