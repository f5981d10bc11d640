# pylint: disable=missing-module-docstring, missing-class-docstring, missing-function-docstring, protected-access
"""
Tests for ConfigManager.
"""

import json
import unittest
from unittest.mock import MagicMock, patch

import pytest

from config_manager import DEFAULT_FORMATS, ConfigManager


@pytest.mark.usefixtures("isolated_config")
class TestConfigManager:

    def test_load_config_defaults(self):
        config = ConfigManager.load_config()
        assert config == ConfigManager.DEFAULTS
        assert config["handle_highlight_url_only"] is True
        assert config["format_index"] == 0

    def test_defaults_are_independent_copies(self):
        config = ConfigManager.load_config()
        config["formats"][0]["name"] = "Changed"
        assert ConfigManager.DEFAULTS["formats"][0]["name"] == "Quote"

    def test_save_and_load_config(self, isolated_config):
        data = ConfigManager.defaults()
        data["notice_while_fetching"] = False
        data["format_index"] = 3
        ConfigManager.save_config(data)

        assert isolated_config.exists()
        loaded = ConfigManager.load_config()
        assert loaded["notice_while_fetching"] is False
        assert loaded["format_index"] == 3
        assert loaded["language"] == "en"

    def test_partial_file_is_merged_over_defaults(self, isolated_config):
        isolated_config.write_text(json.dumps({"format_index": 1}), encoding="utf-8")
        loaded = ConfigManager.load_config()
        assert loaded["format_index"] == 1
        assert loaded["formats"] == DEFAULT_FORMATS

    def test_load_malformed_config(self, isolated_config):
        isolated_config.write_text("{invalid json", encoding="utf-8")

        config = ConfigManager.load_config()

        assert config == ConfigManager.DEFAULTS
        assert isolated_config.with_suffix(".json.bak").exists()
        assert not isolated_config.exists()

    def test_load_invalid_values(self, isolated_config):
        isolated_config.write_text(
            json.dumps({"format_index": 9}), encoding="utf-8"
        )
        assert ConfigManager.load_config() == ConfigManager.DEFAULTS

    def test_empty_file(self, isolated_config):
        isolated_config.write_text("", encoding="utf-8")
        assert ConfigManager.load_config() == ConfigManager.DEFAULTS

    def test_save_invalid_config_raises(self, isolated_config):
        data = ConfigManager.defaults()
        data["formats"] = []
        with pytest.raises(ValueError):
            ConfigManager.save_config(data)
        assert not isolated_config.exists()


class TestValidateConfig(unittest.TestCase):

    def test_not_a_dict(self):
        with self.assertRaises(ValueError):
            ConfigManager._validate_config([])

    def test_boolean_flags(self):
        with self.assertRaises(ValueError):
            ConfigManager._validate_config({"notice_while_fetching": "yes"})
        with self.assertRaises(ValueError):
            ConfigManager._validate_config({"handle_highlight_url_only": 1})

    def test_format_index(self):
        for bad in (-1, True, "0", 5):
            with self.assertRaises(ValueError):
                ConfigManager._validate_config(
                    {"formats": DEFAULT_FORMATS, "format_index": bad}
                )
        ConfigManager._validate_config({"formats": DEFAULT_FORMATS, "format_index": 4})

    def test_formats(self):
        bad_values = [
            [],
            "Quote",
            [{"name": "", "template": "x"}],
            [{"name": "A", "template": 1}],
            [{"name": "A", "template": "x"}, {"name": "A", "template": "y"}],
            [{"name": "A", "template": "x", "require_fetch": "no"}],
        ]
        for formats in bad_values:
            with self.assertRaises(ValueError):
                ConfigManager._validate_formats(formats)

    def test_request_timeout(self):
        for bad in (0, -3, "10", False):
            with self.assertRaises(ValueError):
                ConfigManager._validate_config({"request_timeout": bad})
        ConfigManager._validate_config({"request_timeout": 2.5})


class TestConfigListeners(unittest.TestCase):

    def setUp(self):
        self.listener = MagicMock()
        ConfigManager.add_listener(self.listener)

    def tearDown(self):
        ConfigManager.remove_listener(self.listener)

    @patch("config_manager.os.fsync")
    @patch("config_manager.os.chmod")
    @patch("config_manager.os.replace")
    @patch("config_manager.os.fdopen")
    @patch("config_manager.tempfile.mkstemp", return_value=(3, "/tmp/.config_tmp_x.json"))
    @patch("config_manager.ConfigManager._resolve_config_file")
    def test_listeners_notified_after_save(
        self, mock_resolve, mock_mkstemp, mock_fdopen, mock_replace, mock_chmod, mock_fsync
    ):  # pylint: disable=too-many-arguments, too-many-positional-arguments, unused-argument
        mock_resolve.return_value = MagicMock()
        config = ConfigManager.defaults()

        ConfigManager.save_config(config)

        mock_replace.assert_called_once()
        self.listener.assert_called_once_with(config)
        self.assertIsNot(self.listener.call_args[0][0], config)

    @patch("config_manager.tempfile.mkstemp", side_effect=OSError("disk full"))
    @patch("config_manager.ConfigManager._resolve_config_file")
    def test_failed_save_does_not_notify(self, mock_resolve, mock_mkstemp):  # pylint: disable=unused-argument
        mock_resolve.return_value = MagicMock()
        with self.assertRaises(OSError):
            ConfigManager.save_config(ConfigManager.defaults())
        self.listener.assert_not_called()

    def test_failing_listener_does_not_stop_others(self):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        ConfigManager.add_listener(broken)
        try:
            ConfigManager._notify_listeners({"format_index": 0})
        finally:
            ConfigManager.remove_listener(broken)
        self.listener.assert_called_once_with({"format_index": 0})

    def test_add_listener_is_idempotent(self):
        ConfigManager.add_listener(self.listener)
        ConfigManager._notify_listeners({})
        self.listener.assert_called_once()
