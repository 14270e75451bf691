"""
Word sources - pluggable providers of one random target word.
"""

from __future__ import annotations
import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

import httpx

from ..engine_core.errors import SourceUnavailable
from ..engine_core.text import normalize_word


logger = logging.getLogger(__name__)

DEFAULT_WORD_API_URL = "https://random-word-api.herokuapp.com/word"


@dataclass(frozen=True)
class WordPick:
    word: str
    length: int

    @classmethod
    def from_raw(cls, raw: Any) -> WordPick:
        """Normalize a raw word; raises SourceUnavailable if nothing is left."""
        word = normalize_word(raw) if isinstance(raw, str) else ""
        if not word:
            raise SourceUnavailable(f"Unusable word: {raw!r}")
        return cls(word=word, length=len(word))


class WordSource:
    """Base class. Subclasses implement fetch()."""

    async def fetch(self, language: str = "en") -> WordPick:
        raise NotImplementedError

    async def aclose(self) -> None:
        pass


class ListWordSource(WordSource):
    """
    Random pick from an in-memory list.

    languages limits which languages this list can serve (None = any),
    so a French dictionary can sit in front of a network fallback.
    """

    def __init__(
        self,
        words: Iterable[str],
        languages: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.words = [w for w in (normalize_word(w) for w in words if isinstance(w, str)) if w]
        self.languages = frozenset(languages) if languages is not None else None
        self.rng = rng or random.Random()

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        languages: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None,
    ) -> ListWordSource:
        """
        Load a JSON dictionary.

        Accepts a bare list or an object holding the list under
        "words" (or "mots", the key French word lists ship with).
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("words", data.get("mots", []))
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of words")
        source = cls(data, languages=languages, rng=rng)
        logger.info("Loaded %d words from %s", len(source.words), path)
        return source

    async def fetch(self, language: str = "en") -> WordPick:
        if self.languages is not None and language not in self.languages:
            raise SourceUnavailable(f"No word list for language {language!r}")
        if not self.words:
            raise SourceUnavailable("Word list is empty")
        return WordPick.from_raw(self.rng.choice(self.words))


class RandomWordApiSource(WordSource):
    """Fetch one word from a random-word HTTP API (`GET <url>?lang=xx` -> ["word"])."""

    def __init__(
        self,
        url: str = DEFAULT_WORD_API_URL,
        httpx_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.url = url
        self.httpx_client = httpx_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._owns_httpx_client = httpx_client is None

    async def fetch(self, language: str = "en") -> WordPick:
        try:
            response = await self.httpx_client.get(self.url, params={"lang": language})
            response.raise_for_status()
            words = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Random word API failed: %s", e)
            raise SourceUnavailable("Failed to fetch random word from API") from e

        if not isinstance(words, list) or not words:
            logger.warning("Random word API returned no words")
            raise SourceUnavailable("No words returned from API")
        return WordPick.from_raw(words[0])

    async def aclose(self) -> None:
        if self._owns_httpx_client:
            await self.httpx_client.aclose()


class ChainedWordSource(WordSource):
    """Try each source in order; the first word wins."""

    def __init__(self, sources: Iterable[WordSource]):
        self.sources = list(sources)

    async def fetch(self, language: str = "en") -> WordPick:
        failures = []
        for source in self.sources:
            try:
                return await source.fetch(language)
            except SourceUnavailable as e:
                logger.debug("%s could not supply a word: %s", type(source).__name__, e)
                failures.append(str(e))
        raise SourceUnavailable("; ".join(failures) or "No word sources configured")

    async def aclose(self) -> None:
        for source in self.sources:
            await source.aclose()
