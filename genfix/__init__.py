"""genfix: turn raw LLM output into a buildable React/Vite project."""

from __future__ import annotations

from .models import SourceFile

__version__ = "0.1.0"

__all__ = ["SourceFile", "__version__"]
