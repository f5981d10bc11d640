"""
Asynchronous selection replacement.

The selections are read when the paste happens, before the replacement text
is ready. The text is then written into those ranges even if the user moved
the cursor while the page title was being fetched.
"""

import asyncio
import logging
from typing import Awaitable, List, Optional, Protocol, Sequence

from editor_buffer import Position, Selection

logger = logging.getLogger(__name__)

PASTE_ORIGIN = "input.paste"


class Editor(Protocol):
    def list_selections(self) -> List[Selection]: ...

    def replace_range(
        self,
        text: str,
        from_: Position,
        to: Optional[Position] = None,
        origin: Optional[str] = None,
    ): ...


async def apply_replacement(
    editor: Editor,
    selections: Sequence[Selection],
    pending_text: Awaitable[Optional[str]],
):
    """Await the text and write it into every snapshotted range."""
    text = await pending_text
    if text is None:
        logger.debug("No replacement text, leaving the document untouched")
        return

    # Last range first so earlier replacements do not shift the later ones.
    for selection in sorted(selections, key=lambda sel: sel.from_, reverse=True):
        editor.replace_range(text, selection.from_, selection.to, PASTE_ORIGIN)
    logger.debug("Replaced %d selection(s)", len(selections))


def replace_selection_async(
    editor: Editor, pending_text: Awaitable[Optional[str]]
) -> "asyncio.Task[None]":
    """
    Snapshot the current selections now and replace them once
    ``pending_text`` resolves. Must be called with a running event loop.
    """
    selections = tuple(editor.list_selections())
    return asyncio.ensure_future(apply_replacement(editor, selections, pending_text))
