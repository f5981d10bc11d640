"""
Clipboard reader module.

Builds paste events from the system clipboard.
"""

import logging
import threading
from typing import Dict, Optional

import pyperclip

logger = logging.getLogger(__name__)

_clipboard_lock = threading.Lock()


class ClipboardEvent:
    """
    A paste event. Handlers read the clipboard through ``get_data`` and
    call ``prevent_default`` when they take over the paste.
    """

    def __init__(self, data: Optional[Dict[str, str]] = None, default_prevented=False):
        self.clipboard_data = data
        self.default_prevented = default_prevented

    @classmethod
    def from_text(cls, text: Optional[str]) -> "ClipboardEvent":
        return cls(None if text is None else {"text/plain": text})

    def get_data(self, mime_type: str) -> Optional[str]:
        if self.clipboard_data is None:
            return None
        return self.clipboard_data.get(mime_type)

    def prevent_default(self):
        self.default_prevented = True


def read_clipboard_event() -> Optional[ClipboardEvent]:
    """
    Read the system clipboard into a paste event.
    Returns None when the clipboard cannot be accessed.
    """
    with _clipboard_lock:
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard access not available: %s", e)
            return None

    if not isinstance(content, str):
        logger.debug("Clipboard holds no text")
        return ClipboardEvent()
    logger.debug("Read %d characters from clipboard", len(content))
    return ClipboardEvent.from_text(content)
