"""
AppController module.
Bridges the Flet views and the paste handler, and keeps the handler in
step with saved settings.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import flet as ft

from clipboard_reader import read_clipboard_event
from config_manager import ConfigManager
from format_settings import PasteSettings
from localization_manager import LocalizationManager as LM
from note_vault import NoteVault
from notifier import FletNotifier
from paste_handler import PasteHandler
from replace_selection import PASTE_ORIGIN
from title_fetcher import TitleFetcher
from views.editor_view import EditorView, FletEditor
from views.settings_view import SettingsView

logger = logging.getLogger(__name__)


class AppController:
    """
    Controller for the main application.
    Owns the paste handler and the views, and routes paste shortcuts.
    """

    def __init__(self, page: ft.Page, config: Dict[str, Any]):
        self.page = page
        self.config = config
        self.notifier = FletNotifier(page)

        settings = PasteSettings.from_config(config)
        self.fetcher = TitleFetcher(timeout=settings.request_timeout)
        self.handler = PasteHandler(
            settings,
            self.fetcher,
            self.notifier,
            capabilities=self._build_capabilities(settings),
        )
        ConfigManager.add_listener(self.on_config_saved)

        self.editor_view = EditorView(self.paste_into)
        self.settings_view = SettingsView(self.config)
        self.tabs: Optional[ft.Tabs] = None

    def _build_capabilities(self, settings: PasteSettings) -> Dict[str, Any]:
        return {"notes": NoteVault(settings.notes_path, on_created=self._on_note_created)}

    def _on_note_created(self, path: Path):
        self.notifier.notify(LM.get("note_created", path.name))

    def build(self) -> ft.Tabs:
        """Build the tab layout holding the editor and settings views."""
        self.tabs = ft.Tabs(
            selected_index=0,
            expand=True,
            on_change=self.on_tab_change,
            tabs=[
                ft.Tab(text=LM.get("editor"), content=self.editor_view),
                ft.Tab(text=LM.get("settings"), content=self.settings_view),
            ],
        )
        return self.tabs

    def on_tab_change(self, e):
        if e.control.selected_index != 1:
            self.settings_view.on_hide()

    def on_config_saved(self, config: Dict[str, Any]):
        """Apply saved settings to the paste handler."""
        try:
            settings = PasteSettings.from_config(config)
        except (KeyError, ValueError) as e:
            logger.error("Ignoring invalid settings update: %s", e)
            return
        self.handler.update_settings(settings)
        self.handler.capabilities = self._build_capabilities(settings)
        self.fetcher.timeout = settings.request_timeout

    async def on_keyboard(self, e: ft.KeyboardEvent):
        if e.key.upper() == "V" and e.ctrl and e.shift:
            await self.paste_into(self.editor_view.editor)

    async def paste_into(self, editor: FletEditor):
        """
        Paste the clipboard into ``editor``. Links are formatted by the
        paste handler; anything else is inserted as plain text.
        """
        evt = read_clipboard_event()
        if evt is None:
            self.notifier.notify(LM.get("clipboard_unavailable"))
            return

        task = self.handler.on_editor_paste(evt, editor)
        if task is not None:
            try:
                await task
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.error("Paste failed: %s", ex, exc_info=True)
            return

        if not evt.default_prevented:
            text = evt.get_data("text/plain")
            if text:
                editor.replace_selection(text, PASTE_ORIGIN)

    def cleanup(self):
        """Clean up resources on shutdown."""
        logger.info("Controller cleaning up...")
        ConfigManager.remove_listener(self.on_config_saved)
        self.fetcher.shutdown()
