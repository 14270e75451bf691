"""
Environment configuration.

Read once at startup; tests build Config objects directly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os

from .words.source import DEFAULT_WORD_API_URL


def _flag(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Config:
    env: str = "development"
    log_level: str = "INFO"
    words_file: str | None = None
    word_api_url: str = DEFAULT_WORD_API_URL
    vault_dir: str | None = None
    check_words: bool = True
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Config:
        return cls(
            env=os.getenv("PLAYROOM_ENV", "development"),
            log_level=os.getenv("PLAYROOM_LOG_LEVEL", "INFO").upper(),
            words_file=os.getenv("PLAYROOM_WORDS_FILE") or None,
            word_api_url=os.getenv("PLAYROOM_WORD_API_URL", DEFAULT_WORD_API_URL),
            vault_dir=os.getenv("PLAYROOM_VAULT_DIR") or None,
            check_words=_flag(os.getenv("PLAYROOM_CHECK_WORDS"), True),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        )
