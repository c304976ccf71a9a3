"""Passes that rebuild mangled template-literal attributes."""

from __future__ import annotations

import re
from typing import List

from .base import PassResult, RepairPass, inside_template_literal

_UNTERMINATED_INTERPOLATION = re.compile(
    r'\b(?:className|class)="([^"\n]*)\$\{"?([^`]*?)\}`\}'
)
_QUOTED_INTERPOLATION = re.compile(r'\b(?:className|class)="([^"\n]*)\$\{([^`]*?)\}"')

_BACKTICK_IN_QUOTES = re.compile(r'className="([^"]*`[^"]*)"')
_TRAILING_BACKTICK = re.compile(r'className="([^"`]*)`\s*$')
_LEAKED_WITH_INTERPOLATION = re.compile(
    r'className="([^"]*\$\{[^}]+\}[^"]*)"\s+([^`"<>]+?)\s*`\}'
)
_LEAKED_PLAIN = re.compile(r'className="([^"]+)"\s+([A-Za-z][^`"<>]*?)\s*`\}')
_QUOTED_TEMPLATE = re.compile(r'(\s)([A-Za-z][\w-]*)="([^"]*\$\{[^}]+\}[^"]*)"')
_OPEN_CLASSNAME = re.compile(r'className="[^"]*$')


class TemplateLiteralPass(RepairPass):
    """Rebuild class attributes whose interpolation spans several lines."""

    name = "template-literals"

    def apply(self, content: str, path: str) -> PassResult:
        fixes: List[str] = []

        def rebuild(match: "re.Match[str]") -> str:
            before, expression = match.group(1), match.group(2)
            if "\n" not in expression:
                return match.group(0)
            fixes.append("Rebuilt multi-line className interpolation as a template literal")
            return "className={`" + before + "${" + expression + "}`}"

        content = _UNTERMINATED_INTERPOLATION.sub(rebuild, content)
        content = _QUOTED_INTERPOLATION.sub(rebuild, content)
        return PassResult(content=content, fixes=fixes)


class AttributeLeakagePass(RepairPass):
    """Line-level fixes for attribute values that leaked past their quote."""

    name = "attribute-leakage"

    def apply(self, content: str, path: str) -> PassResult:
        lines = content.split("\n")
        fixes: List[str] = []
        for index, line in enumerate(lines):
            number = index + 1
            original = line

            line = _sub_outside_templates(
                _BACKTICK_IN_QUOTES,
                lambda m: 'className="' + m.group(1).replace("`", "") + '"',
                line,
            )
            if line != original:
                fixes.append(f"Line {number}: removed stray backticks inside className")

            before = line
            line = _sub_outside_templates(
                _TRAILING_BACKTICK, lambda m: 'className="' + m.group(1) + '"', line
            )
            if line != before:
                fixes.append(f"Line {number}: replaced trailing backtick with a closing quote")

            before = line
            line = _LEAKED_WITH_INTERPOLATION.sub(
                lambda m: "className={`" + m.group(1) + " " + m.group(2).strip() + "`}", line
            )
            if line == before and "={`" not in line:
                line = _LEAKED_PLAIN.sub(_merge_plain_leak, line)
            if line != before:
                fixes.append(f"Line {number}: merged leaked class tokens back into className")

            before = line
            line = _sub_outside_templates(
                _QUOTED_TEMPLATE,
                lambda m: m.group(1) + m.group(2) + "={`" + m.group(3) + "`}",
                line,
            )
            if line != before:
                fixes.append(f"Line {number}: converted interpolated attribute to a template literal")

            if (
                _OPEN_CLASSNAME.search(line)
                and "/>" not in line
                and not line.rstrip().endswith(">")
                and index + 1 < len(lines)
                and lines[index + 1].lstrip().startswith("/>")
            ):
                line = line.rstrip() + '"'
                fixes.append(f"Line {number}: closed className before self-closing tag")

            lines[index] = line
        return PassResult(content="\n".join(lines), fixes=fixes)


def _merge_plain_leak(match: "re.Match[str]") -> str:
    merged = f"{match.group(1)} {match.group(2).strip()}"
    if "${" in merged:
        return "className={`" + merged + "`}"
    return f'className="{merged}"'


def _sub_outside_templates(pattern: "re.Pattern[str]", replace, line: str) -> str:
    def guarded(match: "re.Match[str]") -> str:
        if inside_template_literal(line, match.start()):
            return match.group(0)
        return replace(match)

    return pattern.sub(guarded, line)


__all__ = ["AttributeLeakagePass", "TemplateLiteralPass"]
