"""Rewrite Next.js-style files into a Vite React project layout."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Iterable, List, Pattern, Set, Tuple

from .logging import get_logger
from .models import SourceFile, language_for_path

_ENTRY_PATTERN = re.compile(r"^(?:src/)?(?:app/page|pages/index|page|App)\.(tsx|jsx|ts|js)$")
_NESTED_PAGE_PATTERN = re.compile(r"^(?:src/)?app/([\w-]+)/page\.(tsx|jsx|ts|js)$")
_ROOT_MAIN_PATTERN = re.compile(r"^(main|index)\.(tsx|jsx)$")
_SOURCE_FOLDERS = ("components", "lib", "hooks", "utils", "services", "context")

_CLIENT_DIRECTIVE = re.compile(r"""^[ \t]*(['"])use client\1[ \t]*;?[ \t]*(?:\r?\n|$)""", re.MULTILINE)

_NEXT_IMPORT = re.compile(
    r"""^[ \t]*import\s+(\w+)\s+from\s+(['"])next/(head|link|image)\2[ \t]*;?[ \t]*(?:\r?\n|$)""",
    re.MULTILINE,
)
_IMPORT_BINDINGS = re.compile(r"""import\s+([^'";]+?)\s+from\s+(['"])([^'"]+)\2""")
_ALIAS_IMPORT = re.compile(r"""(\bfrom\s+|\bimport\s*\(\s*|^\s*import\s+)(['"])@/([^'"]+)\2""", re.MULTILINE)

# Attribute text that tolerates `=>` inside braces and `>` inside quotes.
_ATTRS = r"""(?:"[^"\n]*"|'[^'\n]*'|\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}|[^<>"'{}])*"""
_HREF_ATTRIBUTE = re.compile(r"\bhref\s*=")

_TAILWIND_CDN = re.compile(
    r"""[ \t]*<script\b[^>]*\bsrc=["']https?://cdn\.tailwindcss\.com[^"']*["'][^>]*>\s*</script>[ \t]*\r?\n?""",
    re.IGNORECASE,
)
_TAILWIND_INLINE_CONFIG = re.compile(
    r"""[ \t]*<script\b[^>]*>\s*tailwind\.config\s*=.*?</script>[ \t]*\r?\n?""",
    re.IGNORECASE | re.DOTALL,
)
_MAIN_SCRIPT = re.compile(r"""(src=["'])/?src/main\.jsx?(["'])""")


class PathTranslator:
    """Best-effort rewrite of framework conventions; rules never raise."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("translate")

    def translate(self, file: SourceFile) -> SourceFile:
        path = self._translate_path(file.path)
        content = file.content
        if path != file.path:
            self._logger.debug("Mapped %s -> %s", file.path, path)

        if _ENTRY_PATTERN.match(file.path) or _NESTED_PAGE_PATTERN.match(file.path):
            content = _CLIENT_DIRECTIVE.sub("", content)

        if path == "index.html":
            content = self._rewrite_html_entry(content)
        elif path.endswith((".tsx", ".jsx", ".ts", ".js")):
            content = self._rewrite_framework_components(content)
            content = self._rewrite_alias_imports(content, path)

        if path == file.path and content == file.content:
            return file
        language = file.language if path == file.path else language_for_path(path)
        return SourceFile(path=path, content=content, language=language)

    def translate_files(self, files: Iterable[SourceFile]) -> List[SourceFile]:
        return [self.translate(file) for file in files]

    @staticmethod
    def _translate_path(path: str) -> str:
        entry = _ENTRY_PATTERN.match(path)
        if entry:
            return "src/App.jsx" if entry.group(1) in ("jsx", "js") else "src/App.tsx"

        nested = _NESTED_PAGE_PATTERN.match(path)
        if nested:
            name, ext = nested.groups()
            ext = {"ts": "tsx", "js": "jsx"}.get(ext, ext)
            return f"src/pages/{name[:1].upper()}{name[1:]}.{ext}"

        if _ROOT_MAIN_PATTERN.match(path):
            return f"src/{path}"

        head, _, rest = path.partition("/")
        if rest and head in _SOURCE_FOLDERS:
            return f"src/{path}"
        if rest and head == "app":
            return f"src/{rest}"
        return path

    def _rewrite_html_entry(self, content: str) -> str:
        updated = _MAIN_SCRIPT.sub(r"\1/src/main.tsx\2", content)
        updated = _TAILWIND_CDN.sub("", updated)
        updated = _TAILWIND_INLINE_CONFIG.sub("", updated)
        if updated != content:
            self._logger.debug("Rewrote index.html entry and removed CDN includes")
        return updated

    def _rewrite_framework_components(self, content: str) -> str:
        removed = {}
        for match in _NEXT_IMPORT.finditer(content):
            removed[match.group(3)] = match.group(1)
        content = _NEXT_IMPORT.sub("", content)
        bound_elsewhere = _bound_names(content)

        head_name = removed.get("head", "Head")
        if head_name not in bound_elsewhere:
            content = re.sub(
                rf"<{head_name}(?:\s[^>]*)?>(.*?)</{head_name}\s*>",
                r"<>\1</>",
                content,
                flags=re.DOTALL,
            )

        link_name = removed.get("link", "Link")
        # A router import that binds the same name keeps its own Link.
        if link_name not in bound_elsewhere:
            content = _rewrite_links(content, link_name)

        image_name = removed.get("image", "Image")
        if image_name not in bound_elsewhere:
            content = re.sub(rf"<{image_name}(?=[\s/>])", "<img", content)
            content = re.sub(rf"</{image_name}\s*>", "", content)
        return content

    @staticmethod
    def _rewrite_alias_imports(content: str, path: str) -> str:
        directory = posixpath.dirname(path) or "."

        def replace(match: "re.Match[str]") -> str:
            target = posixpath.join("src", match.group(3))
            relative = posixpath.relpath(target, directory)
            if not relative.startswith("."):
                relative = f"./{relative}"
            return f"{match.group(1)}{match.group(2)}{relative}{match.group(2)}"

        return _ALIAS_IMPORT.sub(replace, content)


def _bound_names(content: str) -> Set[str]:
    """Names imported from modules other than next/*."""
    names: Set[str] = set()
    for clause, _, module in _IMPORT_BINDINGS.findall(content):
        if module.startswith("next/"):
            continue
        for token in re.split(r"[{},\s]+", clause):
            if token and token not in {"as", "type", "*"}:
                names.add(token)
    return names


def _rewrite_links(content: str, name: str) -> str:
    pattern = re.compile(rf"<{name}(\s{_ATTRS})?>")

    def replace(match: "re.Match[str]") -> str:
        attrs = match.group(1) or ""
        if attrs.rstrip().endswith("/"):
            if not _HREF_ATTRIBUTE.search(attrs):
                return match.group(0)
        return f"<a{attrs}>"

    content = pattern.sub(replace, content)
    return re.sub(rf"</{name}\s*>", "</a>", content)


def translate_files(files: Iterable[SourceFile]) -> List[SourceFile]:
    """Convenience wrapper around :class:`PathTranslator`."""
    return PathTranslator().translate_files(files)


__all__ = ["PathTranslator", "translate_files"]
