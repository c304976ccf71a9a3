"""JSX markup normalisation passes."""

from __future__ import annotations

import re
from typing import List

from .base import ATTRIBUTES, JSX_EXTENSIONS, PassResult, RepairPass, inside_template_literal, VOID_ELEMENTS

_VOID_TAG = re.compile(
    rf"<({'|'.join(VOID_ELEMENTS)})\b({ATTRIBUTES})\s*(/?)>(\s*</\1\s*>)?"
)
_HTML_CLASS = re.compile(r"""(\s)class=(["'{])""")


class SelfClosingPass(RepairPass):
    """Self-close void elements with a single space before ``/>``."""

    name = "self-closing"

    def apply(self, content: str, path: str) -> PassResult:
        fixes: List[str] = []

        def close(match: "re.Match[str]") -> str:
            tag, attrs = match.group(1), match.group(2).rstrip()
            replacement = f"<{tag}{attrs} />"
            if replacement != match.group(0):
                fixes.append(f"Self-closed <{tag}> element")
            return replacement

        return PassResult(content=_VOID_TAG.sub(close, content), fixes=fixes)


class ClassNamePass(RepairPass):
    """Rewrite HTML ``class`` attributes to JSX ``className``."""

    name = "class-name"

    def supports(self, path: str) -> bool:
        return path.lower().endswith(JSX_EXTENSIONS)

    def apply(self, content: str, path: str) -> PassResult:
        lines = content.split("\n")
        count = 0
        for index, line in enumerate(lines):
            updated = _HTML_CLASS.sub(
                lambda m: m.group(0)
                if inside_template_literal(line, m.start())
                else f"{m.group(1)}className={m.group(2)}",
                line,
            )
            if updated != line:
                count += 1
                lines[index] = updated
        fixes = [f"Converted class to className on {count} line(s)"] if count else []
        return PassResult(content="\n".join(lines), fixes=fixes)


__all__ = ["ClassNamePass", "SelfClosingPass"]
