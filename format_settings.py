"""
Paste format settings.

Value types handed to the paste handler, plus the editing operations the
settings view performs on the stored configuration dict.
"""

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from config_manager import DEFAULT_FORMATS, ConfigManager

logger = logging.getLogger(__name__)


class FormatSettingsError(ValueError):
    """Base error for invalid edits of the format list."""


class DuplicateFormatNameError(FormatSettingsError):
    pass


class LastFormatError(FormatSettingsError):
    pass


@dataclass(frozen=True)
class PasteFormat:
    name: str
    template: str
    require_fetch: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PasteFormat":
        return cls(
            name=data["name"],
            template=data["template"],
            require_fetch=data.get("require_fetch", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "template": self.template,
            "require_fetch": self.require_fetch,
        }


@dataclass(frozen=True)
class PasteSettings:
    """Immutable snapshot of the settings the paste handler needs."""

    formats: Tuple[PasteFormat, ...]
    format_index: int = 0
    handle_highlight_url_only: bool = True
    notice_while_fetching: bool = True
    notes_directory: str = ""
    request_timeout: float = 10.0

    def __post_init__(self):
        if not self.formats:
            raise ValueError("At least one paste format is required")
        if not 0 <= self.format_index < len(self.formats):
            raise ValueError(f"format_index {self.format_index} is out of range")

    @property
    def active_format(self) -> PasteFormat:
        return self.formats[self.format_index]

    @property
    def notes_path(self) -> Path:
        if self.notes_directory:
            return Path(self.notes_directory).expanduser()
        return Path.home() / ".linkpaste" / "notes"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PasteSettings":
        defaults = ConfigManager.DEFAULTS
        return cls(
            formats=tuple(
                PasteFormat.from_dict(fmt)
                for fmt in config.get("formats", defaults["formats"])
            ),
            format_index=config.get("format_index", defaults["format_index"]),
            handle_highlight_url_only=config.get(
                "handle_highlight_url_only", defaults["handle_highlight_url_only"]
            ),
            notice_while_fetching=config.get(
                "notice_while_fetching", defaults["notice_while_fetching"]
            ),
            notes_directory=config.get("notes_directory") or "",
            request_timeout=config.get("request_timeout", defaults["request_timeout"]),
        )


def _check_index(config: Dict[str, Any], index: int):
    if not 0 <= index < len(config["formats"]):
        raise IndexError(f"No format at index {index}")


def _name_taken(config: Dict[str, Any], name: str, skip_index: int = -1) -> bool:
    return any(
        fmt["name"] == name
        for i, fmt in enumerate(config["formats"])
        if i != skip_index
    )


def add_format(
    config: Dict[str, Any], name: str, template: str, require_fetch: bool = True
) -> int:
    """Append a format and return its index."""
    if not name:
        raise FormatSettingsError("Format name must not be empty")
    if _name_taken(config, name):
        raise DuplicateFormatNameError(f"This name is already used: {name}")
    config["formats"].append(
        PasteFormat(name, template, require_fetch).to_dict()
    )
    logger.debug("Added format %s", name)
    return len(config["formats"]) - 1


def rename_format(config: Dict[str, Any], index: int, new_name: str):
    _check_index(config, index)
    if _name_taken(config, new_name, skip_index=index):
        raise DuplicateFormatNameError(f"This name is already used: {new_name}")
    config["formats"][index]["name"] = new_name


def set_template(config: Dict[str, Any], index: int, template: str):
    _check_index(config, index)
    config["formats"][index]["template"] = template


def set_require_fetch(config: Dict[str, Any], index: int, value: bool):
    _check_index(config, index)
    config["formats"][index]["require_fetch"] = bool(value)


def select_format(config: Dict[str, Any], index: int):
    _check_index(config, index)
    config["format_index"] = index


def delete_format(config: Dict[str, Any], index: int):
    """
    Remove a format. The selection stays on the same format, or moves to the
    previous one when the selected format itself is removed.
    """
    _check_index(config, index)
    if len(config["formats"]) == 1:
        raise LastFormatError("You cannot delete the last format.")

    removed = config["formats"].pop(index)
    selected = config.get("format_index", 0)
    if selected > index or (selected == index and selected > 0):
        selected -= 1
    config["format_index"] = min(selected, len(config["formats"]) - 1)
    logger.debug("Deleted format %s", removed["name"])


def prune_incomplete_formats(config: Dict[str, Any]) -> int:
    """
    Drop formats with an empty name or template. Returns how many were
    removed. The default formats come back if nothing is left.
    """
    formats = config.get("formats", [])
    selected = config.get("format_index", 0)
    kept = []
    new_index = 0
    for i, fmt in enumerate(formats):
        if fmt.get("name") and fmt.get("template"):
            if i <= selected:
                new_index = len(kept)
            kept.append(fmt)

    removed = len(formats) - len(kept)
    if not kept:
        logger.warning("No complete formats left, restoring defaults")
        kept = copy.deepcopy(DEFAULT_FORMATS)
        new_index = 0

    config["formats"] = kept
    config["format_index"] = min(new_index, len(kept) - 1)
    return removed
