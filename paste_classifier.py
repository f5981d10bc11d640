"""
Paste classifier module.

Decides whether pasted text is a link to a page or a link to a highlight
(a URL carrying a ``#:~:text=`` text fragment).
"""

import logging
import re
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)

# The highlighted text ends at the first line break of any kind.
LINK_PATTERN = re.compile(r"(https://[^#]*)(#:~:text=([^\r\n\u2028\u2029]*))?")

_ESCAPE_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class ClassificationError(ValueError):
    """Raised when the highlighted text of a link cannot be decoded."""

    def __init__(self, message: str, page_url: str):
        super().__init__(message)
        self.page_url = page_url


@dataclass(frozen=True)
class Ignore:
    """Clipboard text is not an https link."""


@dataclass(frozen=True)
class PlainUrl:
    page_url: str


@dataclass(frozen=True)
class Highlight:
    page_url: str
    highlight_url: str
    text: str


PasteResult = Union[Ignore, PlainUrl, Highlight]


def decode_uri_component(value: str) -> str:
    """
    Percent-decode ``value`` strictly.
    Every ``%`` must start a two-digit hex escape and the escaped bytes must
    form valid UTF-8, otherwise ValueError is raised.
    """
    if _BAD_ESCAPE.search(value):
        raise ValueError(f"malformed percent escape in {value!r}")

    def _decode(match: re.Match) -> str:
        raw = bytes.fromhex(match.group(0).replace("%", ""))
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"invalid UTF-8 sequence {match.group(0)}") from e

    return _ESCAPE_RUN.sub(_decode, value)


def classify(data: str) -> PasteResult:
    """
    Classify clipboard text.

    Raises:
        ClassificationError: if the text fragment is not valid percent-encoding.
    """
    match = LINK_PATTERN.match(data)
    if not match:
        return Ignore()

    page_url = match.group(1)
    if match.group(2) is None:
        return PlainUrl(page_url)

    try:
        text = decode_uri_component(match.group(3))
    except ValueError as e:
        raise ClassificationError(
            f"Could not decode highlighted text: {e}", page_url
        ) from e

    logger.debug("Classified highlight link for %s", page_url)
    return Highlight(page_url=page_url, highlight_url=match.group(0), text=text)
