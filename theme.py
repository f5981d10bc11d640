"""
Application theme definitions and constants.
"""

from typing import Any, Dict, Optional

import flet as ft


class Theme:
    """Colors and theme factory for the editor and settings views."""

    # --- Colors ---
    PRIMARY = "#818CF8"  # Indigo 400
    ACCENT = "#F472B6"  # Pink 400

    BG_DARK = "#0F172A"  # Slate 900
    BG_CARD = "#1E293B"  # Slate 800
    BG_INPUT = "#020617"  # Slate 950

    TEXT_PRIMARY = "#F8FAFC"  # Slate 50
    TEXT_SECONDARY = "#94A3B8"  # Slate 400
    TEXT_MUTED = "#64748B"  # Slate 500

    ERROR = "#EF4444"  # Red 500
    BORDER = "#334155"  # Slate 700

    # Editor text uses a monospace face so Markdown lines up.
    EDITOR_FONT = "monospace"

    @staticmethod
    def get_theme() -> ft.Theme:
        """Returns the Flet Theme object configured with application colors."""
        return ft.Theme(
            color_scheme=ft.ColorScheme(
                primary=Theme.PRIMARY,
                secondary=Theme.ACCENT,
                surface=Theme.BG_CARD,
                error=Theme.ERROR,
                on_primary=Theme.BG_DARK,
                on_secondary=Theme.BG_DARK,
                on_surface=Theme.TEXT_PRIMARY,
                outline=Theme.BORDER,
            ),
            visual_density=ft.VisualDensity.COMFORTABLE,
        )

    @staticmethod
    def get_input_decoration(
        hint_text: str = "", prefix_icon: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Standard TextField decoration.
        Returns keyword arguments to be unpacked into a TextField.
        """
        return {
            "filled": True,
            "bgcolor": Theme.BG_INPUT,
            "hint_text": hint_text,
            "hint_style": ft.TextStyle(color=Theme.TEXT_MUTED),
            "border": ft.InputBorder.OUTLINE,
            "border_color": ft.Colors.TRANSPARENT,
            "focused_border_color": Theme.PRIMARY,
            "focused_border_width": 1,
            "content_padding": 12,
            "prefix_icon": prefix_icon,
            "dense": True,
            "border_radius": 8,
        }
