"""LLM escalation helpers for genfix."""

from .fixer import (
    CodeFixer,
    EscalationError,
    EscalationRequest,
    EscalationResponse,
    FixedFile,
)
from .runner import LLMRequest, LLMRunner

__all__ = [
    "CodeFixer",
    "EscalationError",
    "EscalationRequest",
    "EscalationResponse",
    "FixedFile",
    "LLMRequest",
    "LLMRunner",
]
