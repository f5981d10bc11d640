"""
Localization Manager for user-facing strings.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalizationManager:
    """
    Loads string catalogs from ``locales/<lang>.json`` and looks keys up,
    falling back to English and then to the key itself.
    """

    _strings: dict[str, str] = {}
    _fallback_strings: dict[str, str] = {}
    _current_lang: str = "en"
    _locale_dir: Path = Path(__file__).resolve().parent / "locales"

    @classmethod
    def _load_file(cls, file_path: Path) -> dict[str, str]:
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("Locale file must contain a JSON object")
            return {str(k): str(v) for k, v in data.items()}
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to load locale file %s: %s", file_path, e)
            return {}

    @classmethod
    def load_language(cls, lang_code: str):
        """Load a catalog; unknown or unsafe codes fall back to English."""
        if not isinstance(lang_code, str) or any(c in lang_code for c in "./\\"):
            logger.warning("Invalid language code %r, using English", lang_code)
            lang_code = "en"

        lang_code = lang_code.strip().lower() or "en"
        file_path = cls._locale_dir / f"{lang_code}.json"
        if not file_path.exists() and lang_code != "en":
            logger.info("Locale %s not found, falling back to English", lang_code)
            lang_code = "en"
            file_path = cls._locale_dir / "en.json"

        cls._current_lang = lang_code
        cls._strings = cls._load_file(file_path) if file_path.exists() else {}
        cls._fallback_strings = {}
        if lang_code != "en":
            cls._fallback_strings = cls._load_file(cls._locale_dir / "en.json")
        logger.debug("Loaded locale: %s", cls._current_lang)

    @classmethod
    def get(cls, key: str, *args) -> str:
        """
        Get a localized string.
        Positional ``args`` are substituted with ``str.format``.
        """
        if not cls._strings and not cls._fallback_strings:
            cls.load_language(cls._current_lang)

        val = cls._strings.get(key)
        if val is None:
            val = cls._fallback_strings.get(key, key)
            if val == key:
                logger.debug("Missing localization key: %s", key)

        if args:
            try:
                return val.format(*args)
            except (IndexError, KeyError, ValueError):
                return val
        return val

    @classmethod
    def notice(cls, key: str, *args) -> str:
        """A localized string prefixed with the application name."""
        return f"{cls.get('app_name')}: {cls.get(key, *args)}"
