"""Export presence check; reports only, never edits."""

from __future__ import annotations

import logging
import posixpath
import re

from ..logging import get_logger
from .base import PassResult, RepairPass

_ANY_EXPORT = re.compile(
    r"^\s*export\s+(?:default\b|\{|\*|(?:async\s+)?function\b|const\b|let\b|var\b|class\b|interface\b|type\b|enum\b|abstract\b)",
    re.MULTILINE,
)
_ENTRY_BASENAMES = {"main", "index", "vite.config", "vite-env.d"}


def is_component_path(path: str) -> bool:
    """Component-like files are TSX/JSX modules outside type folders and entry points."""
    lowered = path.lower()
    if not lowered.endswith((".tsx", ".jsx")):
        return False
    if "/types/" in f"/{lowered}" or lowered.endswith(".d.ts"):
        return False
    stem = posixpath.splitext(posixpath.basename(lowered))[0]
    return stem not in _ENTRY_BASENAMES


def has_export(content: str) -> bool:
    return bool(_ANY_EXPORT.search(content))


class ExportCheckPass(RepairPass):
    """Warn when a component file exports nothing."""

    name = "export-check"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("repair")

    def supports(self, path: str) -> bool:
        return is_component_path(path)

    def apply(self, content: str, path: str) -> PassResult:
        if has_export(content):
            return PassResult(content=content)
        message = f"No export found in {path}"
        self._logger.warning(message)
        return PassResult(content=content, warnings=[message])


__all__ = ["ExportCheckPass", "has_export", "is_component_path"]
