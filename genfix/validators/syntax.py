"""Read-only syntax checks that flag truncated or malformed generated code."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from ..logging import get_logger
from ..models import SourceFile, ValidationFinding, is_source_path
from ..repair.exports import has_export, is_component_path
from .base import ValidationResult, findings_from, scan_source

_BARE_IMPORT = re.compile(
    r"""^\s*import\s+[^'"\n]*?\sfrom\s+(?!['"])([\w@/.\-]+)""", re.MULTILINE
)
_PLACEHOLDERS = (
    re.compile(
        r"(?://|/\*|\{/\*)\s*\.{3}\s*(?:rest|existing|remaining|other|more|previous|same)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?://|/\*|\{/\*)\s*(?:rest of (?:the )?(?:code|component|file|implementation|content)|existing code|remaining code)",
        re.IGNORECASE,
    ),
    re.compile(r"^\s*(?://|\{/\*|/\*)\s*\.{3}\s*(?:\*/\}?)?\s*$", re.MULTILINE),
)
_OPEN_CLASSNAME_AT_END = re.compile(r"className=[\"'][^\"']*$")
_OPEN_ATTRIBUTE_AT_END = re.compile(r"\w+=[\"'][^\"']*$")
_OPEN_TAG_AT_END = re.compile(r"<[A-Za-z][A-Za-z0-9.]*[^/>]*$")
_SUSPICIOUS_ENDINGS = ("=", "{", "(")

_PAIRS = (("{", "}", "braces"), ("(", ")", "parentheses"), ("[", "]", "brackets"))


class SyntaxValidator:
    """Pure ``(content, path) -> ValidationResult`` checks for script files."""

    name = "syntax"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("validate")

    def check(self, content: str, path: str) -> ValidationResult:
        if not is_source_path(path):
            return ValidationResult(valid=True)
        errors: List[str] = []

        for match in _BARE_IMPORT.finditer(content):
            errors.append(f"Unquoted import specifier '{match.group(1)}'")

        counts = scan_source(content)
        for opening, closing, label in _PAIRS:
            if counts.balance(opening, closing):
                errors.append(
                    f"Unbalanced {label}: {counts.brackets[opening]} opening, "
                    f"{counts.brackets[closing]} closing"
                )
        if counts.double_quotes % 2:
            errors.append("Unbalanced double quotes")
        if counts.single_quotes % 2:
            errors.append("Unbalanced single quotes")

        if any(pattern.search(content) for pattern in _PLACEHOLDERS):
            errors.append("Placeholder comment found (incomplete code)")

        if is_component_path(path) and not has_export(content):
            errors.append(f"No export found in {path}")

        errors.extend(self._truncation_signals(content))

        if errors:
            self._logger.debug("%s: %s", path, "; ".join(errors))
        return ValidationResult(valid=not errors, errors=errors)

    @staticmethod
    def _truncation_signals(content: str) -> List[str]:
        trimmed = content.strip()
        if not trimmed:
            return []
        errors: List[str] = []
        lines = trimmed.split("\n")
        tail = "\n".join(lines[-5:])
        if _OPEN_CLASSNAME_AT_END.search(tail):
            errors.append("className attribute left open at end of file")
        elif _OPEN_ATTRIBUTE_AT_END.search(tail) and not trimmed.endswith(">"):
            errors.append("Attribute value left open at end of file")
        if _OPEN_TAG_AT_END.search(lines[-1]):
            errors.append("JSX tag left open on the last line")
        if trimmed.endswith(_SUSPICIOUS_ENDINGS):
            errors.append("Code appears truncated (suspicious ending)")
        return errors

    def validate(self, files: Sequence[SourceFile]) -> List[ValidationFinding]:
        return findings_from((file.path, self.check(file.content, file.path)) for file in files)


def validate_files(files: Iterable[SourceFile]) -> List[ValidationFinding]:
    """Convenience wrapper around :class:`SyntaxValidator`."""
    return SyntaxValidator().validate(list(files))


__all__ = ["SyntaxValidator", "validate_files"]
