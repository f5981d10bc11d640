"""
Page title fetching module.
Downloads a page and extracts the text of its <title> element.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests
from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
MAX_RESPONSE_BYTES = 2 * 1024 * 1024
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class FetchError(Exception):
    """Raised when a page cannot be downloaded or parsed."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


def fetch_title(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Download ``url`` and return its title.
    A page without a <title> gives an empty string.
    """
    try:
        # Stream so an unexpectedly large response is not held in memory.
        with requests.get(
            url, headers={"User-Agent": USER_AGENT}, timeout=timeout, stream=True
        ) as response:
            response.raise_for_status()
            content = b""
            for chunk in response.iter_content(chunk_size=8192):
                content += chunk
                if len(content) > MAX_RESPONSE_BYTES:
                    raise FetchError(url, f"Response from {url} is too large")
    except (requests.RequestException, ValueError) as e:
        # urllib3 raises ValueError subclasses for URLs it cannot parse.
        logger.warning("Title fetch failed for %s: %s", url, e)
        raise FetchError(url, f"Could not fetch {url}: {e}") from e

    try:
        soup = BeautifulSoup(content, "html.parser")
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise FetchError(url, f"Could not parse {url}: {e}") from e

    title_tag = soup.find("title")
    if not isinstance(title_tag, Tag):
        logger.debug("No <title> in %s", url)
        return ""
    title = " ".join(title_tag.get_text().split())
    logger.info("Fetched title for %s: %s", url, title)
    return title


class TitleFetcher:
    """Runs ``fetch_title`` on worker threads for the asyncio host."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_workers: int = 2):
        self.timeout = timeout
        self._executor: Optional[ThreadPoolExecutor] = None
        self._max_workers = max_workers

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="TitleFetch"
            )
        return self._executor

    async def fetch(self, url: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._get_executor(), fetch_title, url, self.timeout
        )

    def shutdown(self):
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
