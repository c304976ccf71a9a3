"""Whole-file whitespace and fence cleanup."""

from __future__ import annotations

import re
from typing import List

from .base import PassResult, RepairPass

_FENCE_LINE = re.compile(r"^[ \t]*```[\w.+#-]*[ \t]*$")
_BLANK_RUN = re.compile(r"\n(?:[ \t]*\n){2,}")


class CleanupPass(RepairPass):
    """Drop leaked fences, collapse blank runs, end with one newline."""

    name = "cleanup"

    def apply(self, content: str, path: str) -> PassResult:
        if not content.strip():
            return PassResult(content=content)
        fixes: List[str] = []

        lines = content.split("\n")
        removed = 0
        while lines and (_FENCE_LINE.match(lines[0]) or not lines[0].strip()):
            if _FENCE_LINE.match(lines[0]):
                removed += 1
            lines.pop(0)
        while lines and (_FENCE_LINE.match(lines[-1]) or not lines[-1].strip()):
            if _FENCE_LINE.match(lines[-1]):
                removed += 1
            lines.pop()
        if removed:
            fixes.append(f"Removed {removed} leaked code fence line(s)")
        updated = "\n".join(lines)

        collapsed = _BLANK_RUN.sub("\n\n", updated)
        if collapsed != updated:
            fixes.append("Collapsed consecutive blank lines")

        result = collapsed.rstrip() + "\n"
        if not fixes and result != content:
            fixes.append("Normalised trailing newline")
        return PassResult(content=result, fixes=fixes)


__all__ = ["CleanupPass"]
