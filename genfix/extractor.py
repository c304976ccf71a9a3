"""Split raw LLM output into SourceFile records."""

from __future__ import annotations

import logging
import random
import re
from typing import List, Optional, Pattern, Sequence, Set, Tuple

from .logging import get_logger
from .models import SourceFile, language_for_path, normalize_path

_PATH = r"(?:\.{0,2}/)?[\w@$.\[\]()+-]*[\w\]\)](?:/[\w@$.\[\]()+-]+)*\.[A-Za-z][A-Za-z0-9]*"
_LABEL = r"(?:file(?:name)?\s*:\s*)?"

CODE_BLOCK_PATTERN = re.compile(r"```[ \t]*([\w.+#-]+)?[^\n]*\n(.*?)```", re.DOTALL)

# Leading-line markers inside the block; checked in order.
_MARKER_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(rf"^/\*\*?\s*@file\s+({_PATH})"),
    re.compile(rf"^//\s*{_LABEL}({_PATH})"),
    re.compile(rf"^#\s*{_LABEL}({_PATH})"),
    re.compile(rf"^/\*\s*{_LABEL}({_PATH})\s*\*/"),
    re.compile(rf"^\{{/\*\s*{_LABEL}({_PATH})\s*\*/\}}"),
    re.compile(rf"^<!--\s*{_LABEL}({_PATH})\s*-->"),
)

# Markdown just before the block; anchored to the end of that span.
_CONTEXT_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\*\*`?([^\s*`]+\.[A-Za-z][A-Za-z0-9]*)`?\*\*:?\s*$"),
    re.compile(r"`([^\s`]+\.[A-Za-z][A-Za-z0-9]*)`:?\s*$"),
    re.compile(r"\"([^\s\"]+\.[A-Za-z][A-Za-z0-9]*)\":?\s*$"),
    re.compile(r":\s*([^\s:]+\.[A-Za-z][A-Za-z0-9]*)\s*$"),
    re.compile(r"(?:^|\n)#{1,6}\s+([^\s#]+\.[A-Za-z][A-Za-z0-9]*)\s*$"),
    re.compile(r"(?:^|\s)([\w@.-]*/[\w@./-]*\.[A-Za-z][A-Za-z0-9]*):?\s*$"),
)

_EXPORT_NAME_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"export\s+default\s+(?:async\s+)?function\s+([A-Za-z_]\w*)"),
    re.compile(r"export\s+default\s+class\s+([A-Za-z_]\w*)"),
    re.compile(r"^export\s+default\s+([A-Z]\w*)\s*;?\s*$", re.MULTILINE),
)

_ENTRY_NAMES = {"page", "home", "app", "index", "landing"}

_SCRIPT_LANGUAGES = {"tsx", "jsx", "ts", "js", "typescript", "javascript"}
_TYPESCRIPT_LANGUAGES = {"tsx", "ts", "typescript"}

_EXTENSION_BY_LANGUAGE = {
    "tsx": "tsx",
    "jsx": "jsx",
    "ts": "ts",
    "typescript": "ts",
    "js": "js",
    "javascript": "js",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "json": "json",
    "markdown": "md",
    "md": "md",
    "bash": "sh",
    "sh": "sh",
    "shell": "sh",
    "yaml": "yml",
    "yml": "yml",
    "svg": "svg",
}


class FileExtractor:
    """Find fenced code blocks and decide a path for each one."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._logger = logger or get_logger("extract")

    def extract(self, text: str) -> List[SourceFile]:
        files: List[SourceFile] = []
        used: Set[str] = set()
        previous_end = 0
        for match in CODE_BLOCK_PATTERN.finditer(text):
            context = text[previous_end:match.start()]
            previous_end = match.end()
            language = (match.group(1) or "").lower()
            body = match.group(2).strip()
            if not body:
                continue

            path, body = self._from_marker(body)
            source = "marker"
            if path is None:
                path = self._from_context(context)
                source = "context"
            if path is None:
                path = self._from_export(body, language)
                source = "inferred"
            if path is None:
                path = self._fallback(body, language, used)
                source = "fallback"

            if not body.strip():
                self._logger.debug("Dropping empty block for %s", path)
                continue

            path = normalize_path(path)
            if path in used and source in {"inferred", "fallback"}:
                path = self._unique(path, used)
            used.add(path)
            self._logger.debug("Extracted %s (%s)", path, source)
            files.append(
                SourceFile(
                    path=path,
                    content=body + "\n",
                    language=language or language_for_path(path),
                )
            )
        return files

    @staticmethod
    def _from_marker(body: str) -> Tuple[Optional[str], str]:
        first_line, _, rest = body.partition("\n")
        stripped = first_line.strip()
        for pattern in _MARKER_PATTERNS:
            match = pattern.match(stripped)
            if match:
                return match.group(1), rest.strip()
        return None, body

    @staticmethod
    def _from_context(context: str) -> Optional[str]:
        context = context.strip()
        if not context:
            return None
        for pattern in _CONTEXT_PATTERNS:
            match = pattern.search(context)
            if match:
                return match.group(1)
        return None

    def _from_export(self, body: str, language: str) -> Optional[str]:
        if language not in _SCRIPT_LANGUAGES:
            return None
        name = _exported_name(body)
        if not name:
            return None
        ext = "tsx" if language in _TYPESCRIPT_LANGUAGES else "jsx"
        lowered = name.lower()
        if lowered in _ENTRY_NAMES:
            return f"app/page.{ext}"
        if "login" in lowered:
            return f"app/login/page.{ext}"
        return f"components/{name}.{ext}"

    def _fallback(self, body: str, language: str, used: Set[str]) -> str:
        head = body.lstrip()[:200].lower()
        if language == "html" or head.startswith(("<!doctype html", "<html")):
            return "index.html" if "index.html" not in used else self._unique("index.html", used)
        if language == "css":
            return "src/index.css" if "src/index.css" not in used else self._unique("src/index.css", used)
        if language in _SCRIPT_LANGUAGES:
            ext = "tsx" if language in _TYPESCRIPT_LANGUAGES else "jsx"
            return self._unique(f"src/components/Component.{ext}", used)
        ext = _EXTENSION_BY_LANGUAGE.get(language, "txt")
        return self._unique(f"file.{ext}", used)

    def _unique(self, path: str, used: Set[str]) -> str:
        stem, dot, ext = path.rpartition(".")
        if not dot:
            stem, ext = path, ""
        while True:
            suffix = self._rng.randint(1000, 9999)
            candidate = f"{stem}-{suffix}.{ext}" if ext else f"{stem}-{suffix}"
            if candidate not in used:
                return candidate


def _exported_name(body: str) -> Optional[str]:
    for pattern in _EXPORT_NAME_PATTERNS:
        match = pattern.search(body)
        if match:
            return match.group(1)
    return None


def extract_files(text: str, *, rng: random.Random | None = None) -> List[SourceFile]:
    """Convenience wrapper around :class:`FileExtractor`."""
    return FileExtractor(rng=rng).extract(text)


def count_code_blocks(text: str) -> int:
    return sum(1 for match in CODE_BLOCK_PATTERN.finditer(text) if match.group(2).strip())


__all__ = ["CODE_BLOCK_PATTERN", "FileExtractor", "count_code_blocks", "extract_files"]
