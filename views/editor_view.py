"""Editor View"""

import logging
from typing import Awaitable, Callable, List, Optional

import flet as ft

from editor_buffer import Position, Selection, TextBuffer
from localization_manager import LocalizationManager as LM
from theme import Theme

from .base_view import BaseView

logger = logging.getLogger(__name__)


class FletEditor:
    """
    Editor surface backed by a TextBuffer and mirrored into a TextField.
    The field does not report its caret, so typing leaves the cursor at the
    end of the document.
    """

    def __init__(self, text_field: ft.TextField, buffer: Optional[TextBuffer] = None):
        self.text_field = text_field
        self.buffer = buffer or TextBuffer(text_field.value or "")

    def sync_from_field(self):
        self.buffer.set_value(self.text_field.value or "")

    def _push(self):
        self.text_field.value = self.buffer.get_value()
        if self.text_field.page:
            self.text_field.update()

    def list_selections(self) -> List[Selection]:
        return self.buffer.list_selections()

    def replace_range(
        self,
        text: str,
        from_: Position,
        to: Optional[Position] = None,
        origin: Optional[str] = None,
    ):
        self.buffer.replace_range(text, from_, to, origin)
        self._push()

    def replace_selection(self, text: str, origin: Optional[str] = None):
        self.buffer.replace_selection(text, origin)
        self._push()


# pylint: disable=missing-class-docstring
class EditorView(BaseView):
    def __init__(self, on_paste: Callable[[FletEditor], Awaitable[None]]):
        super().__init__(LM.get("editor"), ft.Icons.EDIT_NOTE)
        self.on_paste = on_paste

        self.text_field = ft.TextField(
            value="",
            multiline=True,
            min_lines=20,
            expand=True,
            text_style=ft.TextStyle(font_family=Theme.EDITOR_FONT),
            on_change=self._on_change,
            **Theme.get_input_decoration(hint_text=LM.get("editor_hint")),
        )
        self.editor = FletEditor(self.text_field)

        self.paste_btn = ft.ElevatedButton(
            LM.get("paste_link"),
            icon=ft.Icons.CONTENT_PASTE,
            on_click=self._on_paste_click,
        )

        self.add_control(self.text_field)
        self.add_control(ft.Row([self.paste_btn], alignment=ft.MainAxisAlignment.END))

    # pylint: disable=unused-argument
    def _on_change(self, e):
        self.editor.sync_from_field()

    async def _on_paste_click(self, e):
        logger.debug("Paste requested from button")
        await self.on_paste(self.editor)
