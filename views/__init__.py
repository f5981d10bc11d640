"""Views package for the LinkPaste application."""

from views.base_view import BaseView
from views.editor_view import EditorView, FletEditor
from views.settings_view import SettingsView

__all__ = [
    "BaseView",
    "EditorView",
    "FletEditor",
    "SettingsView",
]
