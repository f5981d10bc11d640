"""
User notifications.

``FletNotifier`` shows transient snack bars in the desktop app;
``LogNotifier`` writes the same messages to the log for headless use.
"""

import logging
from typing import Optional, Protocol

import flet as ft

logger = logging.getLogger(__name__)

# Snack bars are hidden explicitly when no timeout is given.
PERSISTENT_DURATION_MS = 24 * 60 * 60 * 1000
DEFAULT_DURATION_MS = 4000


class Notice(Protocol):
    def hide(self): ...


class Notifier(Protocol):
    def notify(self, message: str, timeout: Optional[int] = None) -> Notice: ...


class LogNotice:
    def __init__(self, message: str):
        self.message = message
        self.hidden = False

    def hide(self):
        self.hidden = True


class LogNotifier:
    """Notifier that only logs."""

    def notify(self, message: str, timeout: Optional[int] = None) -> LogNotice:
        logger.info("Notice: %s", message)
        return LogNotice(message)


class SnackBarNotice:
    def __init__(self, page: ft.Page, snack_bar: ft.SnackBar):
        self.page = page
        self.snack_bar = snack_bar

    def hide(self):
        try:
            self.page.close(self.snack_bar)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to close notice: %s", e)


class FletNotifier:
    """
    Shows notices as snack bars on a Flet page.
    ``timeout`` is in milliseconds; 0 keeps the notice until it is hidden.
    """

    def __init__(self, page: ft.Page):
        self.page = page

    def notify(self, message: str, timeout: Optional[int] = None) -> SnackBarNotice:
        if timeout == 0:
            duration = PERSISTENT_DURATION_MS
        else:
            duration = timeout or DEFAULT_DURATION_MS
        snack_bar = ft.SnackBar(content=ft.Text(message), duration=duration)
        logger.debug("Showing notice: %s", message)
        self.page.open(snack_bar)
        return SnackBarNotice(self.page, snack_bar)
