"""Settings View"""

import logging
from typing import Any, Callable, Dict, Optional

import flet as ft

import format_settings
from config_manager import ConfigManager
from format_settings import DuplicateFormatNameError, LastFormatError
from localization_manager import LocalizationManager as LM
from theme import Theme

from .base_view import BaseView

# pylint: disable=missing-class-docstring, too-many-instance-attributes


class SettingsView(BaseView):
    """
    Toggles and the editable list of paste formats.
    Every change is saved immediately; formats left without a name or
    template are dropped when the view is hidden.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        save: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        super().__init__(LM.get("settings"), ft.Icons.SETTINGS)
        self.config = config
        self.save = save or ConfigManager.save_config
        self.logger = logging.getLogger(__name__)

        self.notice_switch = ft.Switch(
            label=LM.get("notice_while_fetching"),
            value=self.config.get("notice_while_fetching", True),
            active_color=Theme.PRIMARY,
            on_change=lambda e: self._set_flag("notice_while_fetching", e.control.value),
        )
        self.highlight_only_switch = ft.Switch(
            label=LM.get("handle_highlight_url_only"),
            value=self.config.get("handle_highlight_url_only", True),
            active_color=Theme.PRIMARY,
            on_change=lambda e: self._set_flag(
                "handle_highlight_url_only", e.control.value
            ),
        )

        self.format_rows = ft.Column(spacing=12)
        self.format_dd = ft.Dropdown(
            label=LM.get("active_format"),
            on_change=self._on_format_selected,
        )
        self.add_btn = ft.ElevatedButton(
            LM.get("add_format"), icon=ft.Icons.ADD, on_click=self._on_add_format
        )

        self.content_column = ft.Column(spacing=16, scroll=ft.ScrollMode.AUTO, expand=True)
        self.content_column.controls.extend(
            [
                self.notice_switch,
                self.highlight_only_switch,
                ft.Text(
                    LM.get("handle_highlight_url_only_desc"),
                    color=Theme.TEXT_SECONDARY,
                    size=12,
                ),
                ft.Text(LM.get("paste_formats"), size=18, weight=ft.FontWeight.BOLD),
                ft.Text(LM.get("format_help"), color=Theme.TEXT_SECONDARY, size=12),
                self.format_rows,
                self.add_btn,
                self.format_dd,
            ]
        )
        self.add_control(self.content_column)
        self.rebuild_formats()

    def _build_format_row(self, index: int, fmt: Dict[str, Any]) -> ft.Row:
        name_field = ft.TextField(
            label=LM.get("format_name"),
            value=fmt["name"],
            width=220,
            **Theme.get_input_decoration(),
        )
        name_field.on_change = lambda e, i=index, f=name_field: self._on_rename(i, f)
        template_field = ft.TextField(
            label=LM.get("format_template"),
            value=fmt["template"],
            multiline=True,
            min_lines=3,
            expand=True,
            on_change=lambda e, i=index: self._on_template_change(i, e.control.value),
            **Theme.get_input_decoration(),
        )
        fetch_box = ft.Checkbox(
            label=LM.get("require_fetch"),
            value=fmt.get("require_fetch", True),
            on_change=lambda e, i=index: self._on_require_fetch_change(
                i, e.control.value
            ),
        )
        delete_btn = ft.IconButton(
            icon=ft.Icons.DELETE,
            tooltip=LM.get("delete"),
            on_click=lambda e, i=index: self.delete_format(i),
        )
        return ft.Row(
            [name_field, template_field, fetch_box, delete_btn],
            vertical_alignment=ft.CrossAxisAlignment.START,
        )

    def rebuild_formats(self):
        """Recreate the format rows and the active-format dropdown."""
        formats = self.config["formats"]
        self.format_rows.controls = [
            self._build_format_row(i, fmt) for i, fmt in enumerate(formats)
        ]
        self._rebuild_dropdown()
        self.refresh()

    def _rebuild_dropdown(self):
        # Keyed by index so renames and blank names do not break selection.
        self.format_dd.options = [
            ft.dropdown.Option(str(i), fmt["name"] or f"#{i + 1}")
            for i, fmt in enumerate(self.config["formats"])
        ]
        self.format_dd.value = str(self.config.get("format_index", 0))

    def _persist(self):
        try:
            self.save(self.config)
        except ValueError as e:
            # Blank names are allowed while editing; saved once complete.
            self.logger.debug("Settings not saved yet: %s", e)

    def _set_flag(self, key: str, value: bool):
        self.config[key] = bool(value)
        self._persist()

    def _on_rename(self, index: int, field: ft.TextField):
        try:
            format_settings.rename_format(self.config, index, field.value or "")
        except DuplicateFormatNameError:
            field.error_text = LM.get("duplicate_format_name")
            self.show_message(LM.get("duplicate_format_name"), error=True)
            self.refresh()
            return
        field.error_text = None
        self._rebuild_dropdown()
        self._persist()
        self.refresh()

    def _on_template_change(self, index: int, template: str):
        format_settings.set_template(self.config, index, template or "")
        self._persist()

    def _on_require_fetch_change(self, index: int, value: bool):
        format_settings.set_require_fetch(self.config, index, value)
        self._persist()

    def _on_format_selected(self, e):
        format_settings.select_format(self.config, int(e.control.value))
        self._persist()

    # pylint: disable=unused-argument
    def _on_add_format(self, e):
        base = LM.get("new_format")
        name = base
        suffix = 2
        while any(fmt["name"] == name for fmt in self.config["formats"]):
            name = f"{base} {suffix}"
            suffix += 1
        format_settings.add_format(self.config, name, "[{{title}}]({{url}})")
        self._persist()
        self.rebuild_formats()

    def delete_format(self, index: int):
        try:
            format_settings.delete_format(self.config, index)
        except LastFormatError:
            self.show_message(LM.get("delete_last_format"), error=True)
            return
        self._persist()
        self.rebuild_formats()

    def on_hide(self):
        """Drop incomplete formats and save when leaving the view."""
        removed = format_settings.prune_incomplete_formats(self.config)
        if removed:
            self.logger.info("Removed %d incomplete format(s)", removed)
            self.rebuild_formats()
        try:
            self.save(self.config)
        except ValueError as e:
            self.logger.error("Failed to save settings: %s", e)
            self.show_message(LM.get("settings_invalid", e), error=True)
