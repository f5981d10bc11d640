# pylint: disable=missing-module-docstring, missing-class-docstring, missing-function-docstring, protected-access
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from config_manager import ConfigManager
from editor_buffer import Position
from replace_selection import PASTE_ORIGIN
from views.editor_view import EditorView, FletEditor
from views.settings_view import SettingsView


def _event(value):
    return SimpleNamespace(control=SimpleNamespace(value=value))


class TestSettingsView(unittest.TestCase):

    def setUp(self):
        self.config = ConfigManager.defaults()
        self.save = MagicMock()
        self.view = SettingsView(self.config, save=self.save)

    def test_builds_one_row_per_format(self):
        self.assertEqual(len(self.view.format_rows.controls), len(self.config["formats"]))
        self.assertEqual(len(self.view.format_dd.options), len(self.config["formats"]))
        self.assertEqual(self.view.format_dd.value, "0")

    def test_flags_are_saved(self):
        self.view._set_flag("notice_while_fetching", False)
        self.assertFalse(self.config["notice_while_fetching"])
        self.save.assert_called_once_with(self.config)

    def test_rename(self):
        field = SimpleNamespace(value="Renamed", error_text=None)
        self.view._on_rename(1, field)
        self.assertEqual(self.config["formats"][1]["name"], "Renamed")
        self.assertIsNone(field.error_text)
        self.save.assert_called_once()

    def test_rename_to_duplicate_is_rejected(self):
        field = SimpleNamespace(value="Quote", error_text=None)
        with patch.object(self.view, "show_message") as mock_msg:
            self.view._on_rename(1, field)
        self.assertEqual(self.config["formats"][1]["name"], "Link only")
        self.assertTrue(field.error_text)
        mock_msg.assert_called_once()
        self.save.assert_not_called()

    def test_template_and_fetch_changes(self):
        self.view._on_template_change(0, "{{text}}")
        self.view._on_require_fetch_change(0, False)
        self.assertEqual(
            self.config["formats"][0],
            {"name": "Quote", "template": "{{text}}", "require_fetch": False},
        )
        self.assertEqual(self.save.call_count, 2)

    def test_select_format(self):
        self.view._on_format_selected(_event("3"))
        self.assertEqual(self.config["format_index"], 3)

    def test_add_format_picks_unique_name(self):
        self.view._on_add_format(None)
        self.view._on_add_format(None)
        names = [fmt["name"] for fmt in self.config["formats"]]
        self.assertEqual(names[-2:], ["New format", "New format 2"])
        self.assertEqual(len(self.view.format_rows.controls), len(names))

    def test_delete_format(self):
        self.config["format_index"] = 2
        self.view.delete_format(0)
        self.assertEqual(self.config["formats"][self.config["format_index"]]["name"], "Callout")
        self.assertEqual(len(self.view.format_rows.controls), 4)

    def test_delete_last_format_shows_message(self):
        self.config["formats"] = self.config["formats"][:1]
        with patch.object(self.view, "show_message") as mock_msg:
            self.view.delete_format(0)
        self.assertEqual(len(self.config["formats"]), 1)
        mock_msg.assert_called_once()
        self.save.assert_not_called()

    def test_save_errors_while_editing_are_tolerated(self):
        self.save.side_effect = ValueError("format name must be a non-empty string")
        self.view._on_rename(0, SimpleNamespace(value="", error_text=None))
        self.assertEqual(self.config["formats"][0]["name"], "")

    def test_on_hide_prunes_and_saves(self):
        self.config["formats"][0]["template"] = ""
        self.view.on_hide()
        self.assertEqual(len(self.config["formats"]), 4)
        self.save.assert_called_once_with(self.config)

    def test_on_hide_reports_invalid_settings(self):
        self.save.side_effect = ValueError("bad")
        with patch.object(self.view, "show_message") as mock_msg:
            self.view.on_hide()
        mock_msg.assert_called_once()


class TestEditorView(unittest.IsolatedAsyncioTestCase):

    async def test_paste_button_calls_handler(self):
        on_paste = AsyncMock()
        view = EditorView(on_paste)
        await view._on_paste_click(None)
        on_paste.assert_awaited_once_with(view.editor)

    def test_typing_syncs_buffer(self):
        view = EditorView(AsyncMock())
        view.text_field.value = "typed\ntext"
        view._on_change(None)
        self.assertEqual(view.editor.buffer.get_value(), "typed\ntext")
        self.assertEqual(view.editor.list_selections()[0].head, Position(1, 4))


class TestFletEditor(unittest.TestCase):

    def test_replacements_are_mirrored_into_the_field(self):
        field = SimpleNamespace(value="abc", page=None)
        editor = FletEditor(field)

        editor.replace_range("X", Position(0, 1), Position(0, 2), PASTE_ORIGIN)
        self.assertEqual(field.value, "aXc")

        editor.replace_selection("!", PASTE_ORIGIN)
        self.assertEqual(field.value, "aXc!")

    def test_update_only_when_mounted(self):
        field = MagicMock()
        field.value = ""
        editor = FletEditor(field)
        editor.replace_selection("x")
        field.update.assert_called_once()
