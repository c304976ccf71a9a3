"""Tests for genfix.repair.truncation."""

from __future__ import annotations

from genfix.repair.truncation import TruncationPass
from genfix.validators.syntax import SyntaxValidator


def test_open_attribute_closed_when_next_line_starts_a_tag() -> None:
    content = (
        "    <section>\n"
        '      <div className="px-4\n'
        "        <p>Hello</p>\n"
        "      </div>\n"
        "    </section>\n"
    )

    result = TruncationPass().apply(content, "src/App.tsx")

    assert result.content.split("\n")[1] == '      <div className="px-4">'
    assert result.fixes == ["Line 2: closed truncated attribute on <div>"]


def test_open_attribute_on_last_line_is_left_for_the_validator() -> None:
    content = (
        "export default function App() {\n"
        "  return (\n"
        '  <div className="px-4\n'
    )

    result = TruncationPass().apply(content, "src/App.tsx")

    assert result.content == content
    assert result.fixes == []

    errors = SyntaxValidator().check(result.content, "src/App.tsx").errors
    assert "className attribute left open at end of file" in errors


def test_open_attribute_not_closed_when_next_line_is_text() -> None:
    content = (
        '<p className="lead\n'
        "  more words\n"
        "</p>\n"
    )

    result = TruncationPass().apply(content, "src/App.tsx")

    assert result.content == content


def test_void_element_closed_with_self_closing_slash() -> None:
    content = (
        '<img src="/logo.png" alt="Logo\n'
        "<h1>Title</h1>\n"
    )

    result = TruncationPass().apply(content, "src/App.tsx")

    assert result.content.startswith('<img src="/logo.png" alt="Logo" />\n')


def test_open_tag_with_complete_attributes_is_closed() -> None:
    content = (
        '<div className="grid"\n'
        "  <span>One</span>\n"
        "</div>\n"
    )

    result = TruncationPass().apply(content, "src/App.tsx")

    assert result.content.startswith('<div className="grid">\n')
    assert result.fixes == ["Line 1: closed truncated <div> tag"]


def test_truncation_pass_is_idempotent() -> None:
    content = (
        '<div className="px-4\n'
        "  <p>Hi</p>\n"
        "</div>\n"
    )
    repair = TruncationPass()

    once = repair.apply(content, "src/App.tsx").content
    twice = repair.apply(once, "src/App.tsx")

    assert twice.content == once
    assert twice.fixes == []
