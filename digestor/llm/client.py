"""Chat model factory.

Providers
---------
``gemini`` (default)
    Google Generative AI via ``langchain-google-genai``.
    Requires ``GOOGLE_AI_API_KEY``; configure the model with ``GEMINI_MODEL``.

``openai``
    Requires ``OPENAI_API_KEY``; configure via ``OPENAI_CHAT_MODEL``.

``ollama``
    Local Ollama server at ``OLLAMA_BASE_URL``; no credential needed.

The model is built once at process start and handed to
:class:`~digestor.llm.summarizer.Summarizer`; nothing here keeps state.
"""

from __future__ import annotations

from typing import Any

from digestor.config import Settings


def build_chat_model(settings: Settings) -> Any | None:
    """Return a LangChain chat model for ``settings.llm_provider``.

    Returns ``None`` when the provider's credential is missing, which callers
    treat as "summariser not configured".

    Raises:
        ValueError: If ``llm_provider`` names an unknown provider.
    """
    provider = settings.llm_provider
    if not settings.llm_credential:
        print(f"[llm] no credential for provider {provider!r}; summariser disabled.")
        return None

    if provider == "gemini":
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            google_api_key=settings.google_api_key,
            temperature=0,
        )

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model,
            api_key=settings.openai_api_key,
            temperature=0,
        )

    if provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=settings.ollama_chat_model,
            base_url=settings.ollama_base_url,
            temperature=0,
        )

    raise ValueError(f"Unknown LLM_PROVIDER {provider!r}. Use: gemini | openai | ollama")
