"""
Paste handler module.

Turns a pasted link into formatted text: classifies the clipboard, fetches
the page title when needed, renders the active paste format, and writes the
result into the selections that were active when the paste happened.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from clipboard_reader import ClipboardEvent
from format_settings import PasteSettings
from localization_manager import LocalizationManager as LM
from notifier import Notifier
from paste_classifier import ClassificationError, Ignore, PlainUrl, classify
from replace_selection import Editor, replace_selection_async
from template_processor import ExpressionError, TemplateProcessor
from title_fetcher import FetchError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self, url: str) -> str: ...


class PasteHandler:
    """
    Handles editor paste events.
    Settings are replaced as a whole through ``update_settings``; a paste in
    flight keeps the settings it started with.
    """

    def __init__(
        self,
        settings: PasteSettings,
        fetcher: Fetcher,
        notifier: Notifier,
        capabilities: Optional[Dict[str, Any]] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher
        self.notifier = notifier
        self.capabilities = dict(capabilities or {})

    def update_settings(self, settings: PasteSettings):
        logger.debug("Paste settings updated (format %s)", settings.active_format.name)
        self.settings = settings

    def on_config_changed(self, config: Dict[str, Any]):
        """ConfigManager listener."""
        self.update_settings(PasteSettings.from_config(config))

    def on_editor_paste(
        self, evt: ClipboardEvent, editor: Editor
    ) -> "Optional[asyncio.Task[None]]":
        """
        Take over the paste if the clipboard holds a link we format.
        Returns the replacement task, or None when the default paste should
        go ahead. Must be called from the running event loop.
        """
        if evt.default_prevented:
            return None

        data = evt.get_data("text/plain")
        if not data:
            return None

        try:
            result = classify(data)
        except ClassificationError as e:
            logger.warning("Treating link as a page link: %s", e)
            result = PlainUrl(e.page_url)

        if isinstance(result, Ignore):
            return None

        settings = self.settings

        if isinstance(result, PlainUrl):
            if settings.handle_highlight_url_only:
                return None
            evt.prevent_default()
            pending = asyncio.ensure_future(self.format_plain(result.page_url, settings))
            return replace_selection_async(editor, pending)

        evt.prevent_default()
        pending = asyncio.ensure_future(
            self.format_highlight(
                result.page_url, result.highlight_url, result.text, settings
            )
        )
        return replace_selection_async(editor, pending)

    async def fetch_title(self, url: str, settings: Optional[PasteSettings] = None) -> str:
        """Fetch a page title, showing a notice meanwhile if enabled."""
        settings = settings or self.settings
        notice = None
        if settings.notice_while_fetching:
            notice = self.notifier.notify(LM.notice("fetching_title"), timeout=0)
        try:
            return await self.fetcher.fetch(url)
        finally:
            if notice is not None:
                notice.hide()

    async def _fetch_title_or_report(
        self, page_url: str, settings: Optional[PasteSettings]
    ) -> Optional[str]:
        """Fetch a title; failures are reported to the user and give None."""
        try:
            return await self.fetch_title(page_url, settings)
        except FetchError as e:
            logger.error("Could not fetch title of %s: %s", page_url, e)
            self.notifier.notify(LM.notice("fetch_failed", e))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unexpected error fetching title of %s: %s", page_url, e, exc_info=True)
            self.notifier.notify(LM.notice("fetch_failed", e))
        return None

    async def format_plain(
        self, page_url: str, settings: Optional[PasteSettings] = None
    ) -> Optional[str]:
        title = await self._fetch_title_or_report(page_url, settings)
        if title is None:
            return None
        return f"[{title}]({page_url})"

    def build_variables(self, page_url: str, highlight_url: str, text: str) -> Dict[str, Any]:
        variables = dict(self.capabilities)
        variables.update(
            pageUrl=page_url,
            highlightUrl=highlight_url,
            url=highlight_url,
            text=text,
        )
        return variables

    async def format_highlight(
        self,
        page_url: str,
        highlight_url: str,
        text: str,
        settings: Optional[PasteSettings] = None,
    ) -> Optional[str]:
        settings = settings or self.settings
        processor = TemplateProcessor(self.build_variables(page_url, highlight_url, text))
        fmt = settings.active_format

        if fmt.require_fetch:
            title = await self._fetch_title_or_report(page_url, settings)
            if title is None:
                return None
            processor.set_variable("title", title)

        try:
            return processor.eval_template(fmt.template)
        except ExpressionError as e:
            logger.error("Paste format %r is invalid: %s", fmt.name, e)
            self.notifier.notify(LM.notice("invalid_format", e))
            return None
