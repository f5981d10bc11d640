"""
Note vault exposed to paste formats as ``notes``.

Lets a format create a Markdown note as a side effect, e.g.
``{{notes.create(text + ".md", f"[{title}]({url})") or ""}}``.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_INVALID_CHARS = re.compile(r'[\\/:*?"<>|\r\n\t]')
MAX_NAME_LENGTH = 200


class NoteVault:
    """Creates notes inside a single directory."""

    def __init__(
        self,
        directory: Path,
        on_created: Optional[Callable[[Path], None]] = None,
    ):
        self.directory = Path(directory)
        self.on_created = on_created

    def _note_path(self, name: str) -> Path:
        filename = _INVALID_CHARS.sub(" ", name).strip()
        if filename in ("", ".", "..") or filename.startswith(".."):
            raise ValueError(f"Invalid note name: {name!r}")
        if len(filename) > MAX_NAME_LENGTH:
            stem, dot, ext = filename.rpartition(".")
            if dot and len(ext) < 10:
                filename = stem[: MAX_NAME_LENGTH - len(ext) - 1].rstrip() + "." + ext
            else:
                filename = filename[:MAX_NAME_LENGTH]
        return self.directory / filename

    def create(self, name: str, content: str) -> None:
        """
        Write a new note. Existing notes are never overwritten.
        Returns None so a format can end with ``or ""``.
        """
        path = self._note_path(name)
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(path, "x", encoding="utf-8") as f:
            f.write(content)
        logger.info("Created note %s", path)

        if self.on_created:
            try:
                self.on_created(path)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Note created callback failed: %s", e)

    def exists(self, name: str) -> bool:
        return self._note_path(name).exists()
