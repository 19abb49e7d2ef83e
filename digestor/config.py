"""Centralised settings for the Digestor service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Chat / summarisation model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "gemini")
    )
    google_api_key: str = field(
        default_factory=lambda: os.environ.get("GOOGLE_AI_API_KEY", "")
    )
    gemini_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_MODEL", "gemini-1.5-flash-8b")
    )
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "20.0"))
    )
    reader_relay_url: str = field(
        default_factory=lambda: os.environ.get("READER_RELAY_URL", "https://r.jina.ai/")
    )
    cors_proxy_url: str = field(
        default_factory=lambda: os.environ.get(
            "CORS_PROXY_URL", "https://api.allorigins.win/get"
        )
    )

    # ------------------------------------------------------------------
    # Extraction pipeline
    # ------------------------------------------------------------------
    max_content_chars: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_CHARS", "15000"))
    )
    min_summary_chars: int = field(
        default_factory=lambda: int(os.environ.get("MIN_SUMMARY_CHARS", "100"))
    )

    # ------------------------------------------------------------------
    # Reddit listings
    # ------------------------------------------------------------------
    post_limit: int = field(
        default_factory=lambda: int(os.environ.get("POST_LIMIT", "50"))
    )
    comment_limit: int = field(
        default_factory=lambda: int(os.environ.get("COMMENT_LIMIT", "100"))
    )
    allow_placeholder_fallback: bool = field(
        default_factory=lambda: _env_flag("ALLOW_PLACEHOLDER_FALLBACK", "true")
    )

    @property
    def llm_credential(self) -> str:
        """Credential for the active provider; Ollama needs none."""
        if self.llm_provider == "openai":
            return self.openai_api_key
        if self.llm_provider == "ollama":
            return "local"
        return self.google_api_key


# Module-level singleton; import this everywhere:
#   from digestor.config import settings
settings = Settings()
