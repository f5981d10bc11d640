# pylint: disable=missing-module-docstring, missing-class-docstring, missing-function-docstring
import unittest
from pathlib import Path

import pytest

from config_manager import DEFAULT_FORMATS, ConfigManager
from format_settings import (
    DuplicateFormatNameError,
    FormatSettingsError,
    LastFormatError,
    PasteFormat,
    PasteSettings,
    add_format,
    delete_format,
    prune_incomplete_formats,
    rename_format,
    select_format,
    set_require_fetch,
    set_template,
)


def _config(names, index=0):
    config = ConfigManager.defaults()
    config["formats"] = [{"name": n, "template": n.lower(), "require_fetch": True} for n in names]
    config["format_index"] = index
    return config


class TestPasteSettings(unittest.TestCase):

    def test_from_defaults(self):
        settings = PasteSettings.from_config(ConfigManager.defaults())
        self.assertEqual(len(settings.formats), len(DEFAULT_FORMATS))
        self.assertEqual(settings.active_format.name, "Quote")
        self.assertTrue(settings.handle_highlight_url_only)
        self.assertEqual(settings.request_timeout, 10.0)

    def test_missing_keys_use_defaults(self):
        settings = PasteSettings.from_config({})
        self.assertEqual(settings.active_format, PasteFormat.from_dict(DEFAULT_FORMATS[0]))

    def test_format_require_fetch_defaults_to_true(self):
        fmt = PasteFormat.from_dict({"name": "A", "template": "x"})
        self.assertTrue(fmt.require_fetch)
        self.assertEqual(fmt.to_dict(), {"name": "A", "template": "x", "require_fetch": True})

    def test_index_out_of_range(self):
        with self.assertRaises(ValueError):
            PasteSettings(formats=(PasteFormat("A", "x"),), format_index=1)

    def test_no_formats(self):
        with self.assertRaises(ValueError):
            PasteSettings(formats=())

    def test_notes_path(self):
        settings = PasteSettings.from_config({"notes_directory": "/tmp/vault"})
        self.assertEqual(settings.notes_path, Path("/tmp/vault"))
        default = PasteSettings.from_config({})
        self.assertEqual(default.notes_path, Path.home() / ".linkpaste" / "notes")


class TestFormatEditing(unittest.TestCase):

    def test_add_format(self):
        config = _config(["A"])
        index = add_format(config, "B", "{{text}}", require_fetch=False)
        self.assertEqual(index, 1)
        self.assertEqual(
            config["formats"][1], {"name": "B", "template": "{{text}}", "require_fetch": False}
        )

    def test_add_duplicate_or_empty_name(self):
        config = _config(["A"])
        with self.assertRaises(DuplicateFormatNameError):
            add_format(config, "A", "x")
        with self.assertRaises(FormatSettingsError):
            add_format(config, "", "x")
        self.assertEqual(len(config["formats"]), 1)

    def test_rename(self):
        config = _config(["A", "B"])
        rename_format(config, 0, "C")
        self.assertEqual(config["formats"][0]["name"], "C")
        rename_format(config, 0, "C")
        with self.assertRaises(DuplicateFormatNameError):
            rename_format(config, 0, "B")

    def test_rename_to_empty_is_allowed_until_pruned(self):
        config = _config(["A", "B"])
        rename_format(config, 1, "")
        self.assertEqual(config["formats"][1]["name"], "")

    def test_setters(self):
        config = _config(["A", "B"])
        set_template(config, 1, "new")
        set_require_fetch(config, 1, False)
        select_format(config, 1)
        self.assertEqual(config["formats"][1]["template"], "new")
        self.assertFalse(config["formats"][1]["require_fetch"])
        self.assertEqual(config["format_index"], 1)

    def test_bad_index(self):
        config = _config(["A"])
        with self.assertRaises(IndexError):
            select_format(config, 3)
        with self.assertRaises(IndexError):
            set_template(config, -1, "x")

    def test_delete_last_format(self):
        config = _config(["A"])
        with self.assertRaises(LastFormatError):
            delete_format(config, 0)


@pytest.mark.parametrize(
    "selected, deleted, expected_index, expected_name",
    [
        (2, 0, 1, "C"),
        (0, 2, 0, "A"),
        (1, 1, 0, "A"),
        (0, 0, 0, "B"),
        (3, 3, 2, "C"),
    ],
)
def test_delete_keeps_selection(selected, deleted, expected_index, expected_name):
    config = _config(["A", "B", "C", "D"], index=selected)
    delete_format(config, deleted)
    assert config["format_index"] == expected_index
    assert config["formats"][config["format_index"]]["name"] == expected_name


def test_prune_incomplete_formats():
    config = _config(["A", "B", "C"], index=2)
    config["formats"][0]["template"] = ""
    config["formats"][1]["name"] = ""

    assert prune_incomplete_formats(config) == 2
    assert [f["name"] for f in config["formats"]] == ["C"]
    assert config["format_index"] == 0


def test_prune_keeps_selected_format():
    config = _config(["A", "B", "C"], index=2)
    config["formats"][0]["name"] = ""
    prune_incomplete_formats(config)
    assert config["formats"][config["format_index"]]["name"] == "C"


def test_prune_restores_defaults_when_empty():
    config = _config(["A"])
    config["formats"][0]["template"] = ""

    assert prune_incomplete_formats(config) == 1
    assert config["formats"] == DEFAULT_FORMATS
    assert config["formats"] is not DEFAULT_FORMATS
    assert config["format_index"] == 0
