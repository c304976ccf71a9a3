"""Shared types for syntax repair passes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

VOID_ELEMENTS = (
    "img",
    "input",
    "br",
    "hr",
    "link",
    "meta",
    "source",
    "track",
    "area",
    "base",
    "col",
    "embed",
    "wbr",
)

# Attribute text that tolerates `=>` inside braces and `>` inside quotes.
ATTRIBUTES = r"""(?:"[^"\n]*"|'[^'\n]*'|\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}|[^<>"'{}/]|/(?!>))*?"""

JSX_EXTENSIONS = (".tsx", ".jsx", ".js")


@dataclass
class PassResult:
    """Outcome of one pass over one file."""

    content: str
    fixes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class RepairPass(ABC):
    """A narrowly scoped, idempotent textual transform."""

    name: str = ""

    def supports(self, path: str) -> bool:
        return True

    @abstractmethod
    def apply(self, content: str, path: str) -> PassResult:
        """Return the repaired content and a description of each fix."""


def inside_template_literal(line: str, index: int) -> bool:
    """Whether ``index`` sits inside a backtick string opened on the same line."""
    return line[:index].count("`") % 2 == 1


__all__ = [
    "ATTRIBUTES",
    "JSX_EXTENSIONS",
    "PassResult",
    "RepairPass",
    "VOID_ELEMENTS",
    "inside_template_literal",
]
