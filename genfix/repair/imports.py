"""Import statement hygiene."""

from __future__ import annotations

import re
from typing import List

from .base import PassResult, RepairPass

_BARE_SPECIFIER = re.compile(
    r"""^([ \t]*import\s+[^'"\n]*?\s+from\s+)(?!['"])([A-Za-z@.][\w@/.\-]*)[ \t]*;?[ \t]*$""",
    re.MULTILINE,
)
_UNTERMINATED_IMPORT = re.compile(
    r"""^([ \t]*import\s[^\n;]*?\sfrom\s+(['"])[^'"\n]+\2)[ \t]*$""",
    re.MULTILINE,
)
_UNTERMINATED_SIDE_EFFECT = re.compile(
    r"""^([ \t]*import\s+(['"])[^'"\n]+\2)[ \t]*$""",
    re.MULTILINE,
)
_UNTERMINATED_CLAUSE_END = re.compile(
    r"""^([ \t]*\}\s*from\s+(['"])[^'"\n]+\2)[ \t]*$""",
    re.MULTILINE,
)
_CLIENT_DIRECTIVE = re.compile(
    r"""^[ \t]*(['"])use client\1[ \t]*;?[ \t]*(?:\r?\n|$)""", re.MULTILINE
)


class ImportHygienePass(RepairPass):
    """Quote bare specifiers, terminate imports, drop the client directive."""

    name = "import-hygiene"

    def apply(self, content: str, path: str) -> PassResult:
        fixes: List[str] = []

        content, count = _BARE_SPECIFIER.subn(r"\1'\2';", content)
        if count:
            fixes.append(f"Quoted {count} bare import specifier(s)")

        terminated = 0
        for pattern in (_UNTERMINATED_IMPORT, _UNTERMINATED_SIDE_EFFECT, _UNTERMINATED_CLAUSE_END):
            content, count = pattern.subn(r"\1;", content)
            terminated += count
        if terminated:
            fixes.append(f"Added missing semicolon to {terminated} import(s)")

        content, count = _CLIENT_DIRECTIVE.subn("", content)
        if count:
            fixes.append("Removed 'use client' directive")
        return PassResult(content=content, fixes=fixes)


__all__ = ["ImportHygienePass"]
