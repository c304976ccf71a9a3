"""Tests for the escalation prompt builder."""

from __future__ import annotations

from pathlib import Path

from genfix.models import SourceFile
from genfix.prompting import FIX_SYSTEM_PROMPT, FixPromptBuilder


def test_fix_prompt_lists_files_and_findings() -> None:
    files = [
        SourceFile(path="src/App.tsx", content="export default function App() {\n\n"),
        SourceFile(path="src/lib/api.ts", content="export const api = 1;\n"),
    ]

    request = FixPromptBuilder().build(
        files, findings={"src/App.tsx": ["Unbalanced braces: 1 opening, 0 closing"]}
    )

    assert request.system == FIX_SYSTEM_PROMPT
    assert request.paths == ["src/App.tsx", "src/lib/api.ts"]
    prompt = request.prompt
    assert "--- FILE: src/App.tsx ---\n```tsx\nexport default function App() {\n```" in prompt
    assert "--- FILE: src/lib/api.ts ---\n```typescript\n" in prompt
    assert "- Unbalanced braces: 1 opening, 0 closing" in prompt
    assert prompt.count("Known problems:") == 1
    assert "Only return files" not in prompt


def test_fix_prompt_mentions_allowed_paths() -> None:
    request = FixPromptBuilder().build(
        [SourceFile(path="src/App.tsx", content="x")],
        allowed_paths=["src/App.tsx", "src/main.tsx"],
    )

    assert "Only return files from this list: src/App.tsx, src/main.tsx." in request.prompt


def test_fix_prompt_uses_custom_templates(tmp_path: Path) -> None:
    (tmp_path / "fix_request.j2").write_text(
        "{% for file in files %}{{ file.path }};{% endfor %}", encoding="utf-8"
    )

    request = FixPromptBuilder(tmp_path, system_prompt="be brief").build(
        [SourceFile(path="a.ts", content=""), SourceFile(path="b.ts", content="")]
    )

    assert request.system == "be brief"
    assert request.prompt == "a.ts;b.ts;\n"
    assert [message.role for message in request.messages] == ["system", "user"]
