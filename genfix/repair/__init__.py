"""Syntax repair passes for LLM-generated JSX/TSX."""

from .base import PassResult, RepairPass, VOID_ELEMENTS
from .pipeline import RepairOutcome, RepairReport, SyntaxRepairer, default_passes, repair_content

__all__ = [
    "PassResult",
    "RepairOutcome",
    "RepairPass",
    "RepairReport",
    "SyntaxRepairer",
    "VOID_ELEMENTS",
    "default_passes",
    "repair_content",
]
