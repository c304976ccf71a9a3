"""Prompt construction for the escalation fixer."""

from .builder import FixPromptBuilder, PromptMessage, PromptRequest
from .constants import FIX_SYSTEM_PROMPT, MAX_FILES_PER_BATCH

__all__ = [
    "FIX_SYSTEM_PROMPT",
    "FixPromptBuilder",
    "MAX_FILES_PER_BATCH",
    "PromptMessage",
    "PromptRequest",
]
