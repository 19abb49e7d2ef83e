"""Language-model collaborators — chat model construction and summarisation."""

from digestor.llm.client import build_chat_model
from digestor.llm.summarizer import PERSONA_INSTRUCTION, SUMMARY_INSTRUCTION, Summarizer

__all__ = ["build_chat_model", "Summarizer", "SUMMARY_INSTRUCTION", "PERSONA_INSTRUCTION"]
