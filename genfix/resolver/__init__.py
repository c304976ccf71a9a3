"""Import resolution and placeholder generation."""

from .completion import CompletionResult, complete_imports
from .imports import ImportResolver, ImportValidationResult, PathIndex, resolve_candidate

__all__ = [
    "CompletionResult",
    "ImportResolver",
    "ImportValidationResult",
    "PathIndex",
    "complete_imports",
    "resolve_candidate",
]
