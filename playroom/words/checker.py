"""Dictionary existence checks against Wiktionary."""

from __future__ import annotations
import logging
from typing import Optional

import httpx

from ..engine_core.errors import SourceUnavailable
from ..engine_core.text import normalize_word


logger = logging.getLogger(__name__)

WIKTIONARY_HOSTS = {
    "en": "https://en.wiktionary.org",
    "fr": "https://fr.wiktionary.org",
}


class WiktionaryChecker:
    """
    Ask the Wiktionary query API whether a page exists for a word.

    Missing pages come back keyed "-1". Network and HTTP failures raise
    SourceUnavailable so the caller can reject the guess instead of
    guessing at validity.
    """

    def __init__(self, httpx_client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.httpx_client = httpx_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._owns_httpx_client = httpx_client is None

    async def is_word(self, word: str, language: str = "en") -> bool:
        normalized = normalize_word(word)
        if not normalized:
            return False

        base = WIKTIONARY_HOSTS.get(language, WIKTIONARY_HOSTS["en"])
        params = {"action": "query", "titles": normalized.lower(), "format": "json"}
        try:
            response = await self.httpx_client.get(f"{base}/w/api.php", params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Wiktionary lookup failed: %s", e)
            raise SourceUnavailable("Dictionary lookup failed") from e

        pages = data.get("query", {}).get("pages") if isinstance(data, dict) else None
        if not pages:
            return False
        return "-1" not in pages

    async def aclose(self) -> None:
        if self._owns_httpx_client:
            await self.httpx_client.aclose()
