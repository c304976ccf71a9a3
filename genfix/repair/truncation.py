"""Conservative repair of tags cut off at a line boundary."""

from __future__ import annotations

import re
from typing import List

from .base import PassResult, RepairPass, VOID_ELEMENTS

# `<tag ... attr="value` with the quote never closed on the line.
_OPEN_ATTRIBUTE = re.compile(r"""<([A-Za-z][\w.]*)\s[^<>]*?\b[\w:-]+=(["'])[^"'<>]*$""")
# `<tag ... attr="value"` with the tag never closed on the line.
_OPEN_TAG = re.compile(r"""<([A-Za-z][\w.]*)\s(?:[^<>"'{}]|"[^"]*"|'[^']*'|\{[^{}]*\})*$""")


class TruncationPass(RepairPass):
    """Close a truncated attribute or tag when the next line makes it unambiguous."""

    name = "truncation"

    def apply(self, content: str, path: str) -> PassResult:
        lines = content.split("\n")
        fixes: List[str] = []
        for index, line in enumerate(lines):
            stripped = line.rstrip()
            if not stripped or not _next_line_confirms(lines, index):
                continue
            open_attribute = _OPEN_ATTRIBUTE.search(stripped)
            if open_attribute:
                tag, quote = open_attribute.group(1), open_attribute.group(2)
                lines[index] = stripped + quote + _tag_end(tag)
                fixes.append(f"Line {index + 1}: closed truncated attribute on <{tag}>")
                continue
            open_tag = _OPEN_TAG.search(stripped)
            if (
                open_tag
                and stripped.endswith(("\"", "'"))
                and lines[index + 1].lstrip().startswith("<")
            ):
                tag = open_tag.group(1)
                lines[index] = stripped + _tag_end(tag)
                fixes.append(f"Line {index + 1}: closed truncated <{tag}> tag")
        return PassResult(content="\n".join(lines), fixes=fixes)


def _next_line_confirms(lines: List[str], index: int) -> bool:
    """The next line opens a tag or is blank, and real content follows."""
    if index + 1 >= len(lines):
        return False
    if not any(line.strip() for line in lines[index + 1:]):
        return False
    following = lines[index + 1].strip()
    return not following or following.startswith("<")


def _tag_end(tag: str) -> str:
    return " />" if tag in VOID_ELEMENTS else ">"


__all__ = ["TruncationPass"]
