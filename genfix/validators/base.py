"""Shared validation result types and the source scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Protocol, Sequence

from ..models import SourceFile, ValidationFinding

_BRACKETS = "{}()[]"


@dataclass
class ValidationResult:
    """Outcome of validating one file."""

    valid: bool
    errors: List[str] = field(default_factory=list)


class Validator(Protocol):
    """Protocol implemented by file-set validators."""

    name: str

    def validate(self, files: Sequence[SourceFile]) -> List[ValidationFinding]:
        ...


@dataclass
class ScanCounts:
    """Bracket and quote tallies taken outside comments, strings and templates."""

    brackets: Dict[str, int]
    double_quotes: int = 0
    single_quotes: int = 0

    def balance(self, opening: str, closing: str) -> int:
        return self.brackets[opening] - self.brackets[closing]


def _is_apostrophe(content: str, index: int) -> bool:
    before = content[index - 1] if index > 0 else ""
    after = content[index + 1] if index + 1 < len(content) else ""
    return before.isalnum() and after.isalpha()


def scan_source(content: str) -> ScanCounts:
    """Tally brackets and quotes, tracking backslash escapes explicitly."""
    counts = ScanCounts(brackets={char: 0 for char in _BRACKETS})
    state = ""
    index = 0
    length = len(content)
    while index < length:
        char = content[index]
        following = content[index + 1] if index + 1 < length else ""
        if not state:
            if char == "/" and following == "/":
                newline = content.find("\n", index)
                index = length if newline < 0 else newline
                continue
            if char == "/" and following == "*":
                end = content.find("*/", index + 2)
                index = length if end < 0 else end + 2
                continue
            if char == "`":
                state = "`"
            elif char == '"':
                counts.double_quotes += 1
                state = char
            elif char == "'" and not _is_apostrophe(content, index):
                counts.single_quotes += 1
                state = char
            elif char in counts.brackets:
                counts.brackets[char] += 1
            index += 1
            continue

        if char == "\\":
            index += 2
            continue
        if char == state:
            if state == '"':
                counts.double_quotes += 1
            elif state == "'":
                counts.single_quotes += 1
            state = ""
        elif char == "\n" and state == "'":
            # Single-quoted strings cannot span lines; leave the count odd.
            state = ""
        index += 1
    return counts


def findings_from(results: Iterable[tuple[str, ValidationResult]]) -> List[ValidationFinding]:
    return [
        ValidationFinding(path=path, messages=list(result.errors))
        for path, result in results
        if not result.valid
    ]


__all__ = [
    "ScanCounts",
    "ValidationResult",
    "Validator",
    "findings_from",
    "scan_source",
]
