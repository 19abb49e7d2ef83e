"""Text-in / text-out wrapper around a LangChain chat model."""

from __future__ import annotations

from typing import Any

from digestor.errors import SummarizerFailure

SUMMARY_INSTRUCTION = (
    "You are an expert content summarizer. Create a comprehensive, well-structured "
    "summary of the provided web content. Your summary should:\n\n"
    "• Capture ALL key points, main ideas, and important details\n"
    "• Maintain logical flow and proper organization\n"
    "• Use clear, engaging, and readable language\n"
    "• Preserve context and nuance from the original\n"
    "• Structure content with proper paragraphs and transitions\n"
    "• Be detailed enough to understand the full scope without reading the original\n"
    "• Remove redundancy while keeping essential information\n\n"
    "Format the summary with clear paragraphs and good readability."
)

PERSONA_INSTRUCTION = (
    "You are an expert user researcher who creates detailed user personas. "
    "Always return valid JSON in the exact format requested. "
    "Be thorough but realistic in your analysis."
)


def _message_text(response: Any) -> str:
    """Flatten a chat response into a string.

    Some providers return ``content`` as a list of parts rather than a string.
    """
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        return "".join(parts)
    return str(content)


class Summarizer:
    """Call the chat model once with a system instruction and some content.

    ``provider`` is the label reported back to API clients (``"gemini"`` for
    the default configuration).
    """

    def __init__(self, model: Any, provider: str) -> None:
        self._model = model
        self.provider = provider

    def summarize(self, instruction: str, content: str) -> str:
        """Return the model's text for *content* under *instruction*.

        Raises:
            SummarizerFailure: If the model raises or returns an empty string.
        """
        from langchain_core.messages import HumanMessage, SystemMessage

        messages = [SystemMessage(content=instruction), HumanMessage(content=content)]
        try:
            response = self._model.invoke(messages)
        except Exception as exc:
            raise SummarizerFailure(f"{self.provider} call failed: {exc}") from exc

        text = _message_text(response)
        if not text.strip():
            raise SummarizerFailure(f"{self.provider} returned an empty response")
        return text
