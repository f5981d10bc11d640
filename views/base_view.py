"""Base View Module"""

import flet as ft

from theme import Theme

# pylint: disable=missing-class-docstring


class BaseView(ft.Container):
    def __init__(self, title: str, icon: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.expand = True
        self.padding = 24
        self.bgcolor = Theme.BG_DARK
        self.content_col = ft.Column(expand=True, spacing=16)

        self.header = ft.Row(
            [
                ft.Icon(icon, size=28, color=Theme.PRIMARY) if icon else ft.Container(),
                ft.Text(
                    title, size=24, weight=ft.FontWeight.BOLD, color=Theme.TEXT_PRIMARY
                ),
            ],
            alignment=ft.MainAxisAlignment.START,
            spacing=12,
        )

        self.content_col.controls.append(self.header)
        self.content_col.controls.append(ft.Divider(color=Theme.BORDER))
        self.content = self.content_col

    # pylint: disable=missing-function-docstring
    def add_control(self, control):
        self.content_col.controls.append(control)

    def refresh(self):
        """Push changes to the page once the view is mounted."""
        if self.page:
            self.update()

    def show_message(self, message: str, error: bool = False):
        if self.page:
            self.page.open(
                ft.SnackBar(
                    content=ft.Text(message),
                    bgcolor=Theme.ERROR if error else None,
                )
            )
