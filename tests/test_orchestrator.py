"""Tests for genfix.orchestrator."""

from __future__ import annotations

import http.client
import json
from pathlib import Path

from genfix.config import EscalationConfig, GenFixConfig, RepairConfig
from genfix.llm import CodeFixer, LLMRunner
from genfix.models import SourceFile
from genfix.orchestrator import Pipeline
from tests._fixtures.project_builder import source

HERO_RESPONSE = (
    "Here is the hero section.\n\n"
    "```tsx\n"
    "// src/components/Hero.tsx\n"
    'export default function Hero(){ return <img src="x"> }\n'
    "```\n"
)

BROKEN_MATH = SourceFile(
    path="src/lib/math.ts",
    content="export const add = (a: number, b: number) => {\n  return a + b;\n",
)
FIXED_MATH = "export const add = (a: number, b: number) => {\n  return a + b;\n};\n"


def _pipeline_with_reply(reply, calls=None, config=None) -> Pipeline:
    def fake_runner(request):
        if calls is not None:
            calls.append(request)
        if isinstance(reply, Exception):
            raise reply
        return reply

    runner = LLMRunner(base_url=None, api_key=None, runner=fake_runner)
    return Pipeline(config, fixer=CodeFixer(runner))


def _file(result, path: str) -> SourceFile:
    matches = [file for file in result.files if file.path == path]
    assert len(matches) == 1
    return matches[0]


def test_run_text_extracts_and_repairs() -> None:
    result = Pipeline().run_text(HERO_RESPONSE)

    hero = _file(result, "src/components/Hero.tsx")
    assert hero.content == 'export default function Hero(){ return <img src="x" /> }\n'
    assert result.fixes_by_file["src/components/Hero.tsx"] == ["Self-closed <img> element"]
    assert result.valid
    manifest = json.loads(_file(result, "package.json").content)
    assert "react" in manifest["dependencies"]


def test_missing_imports_are_stubbed_and_packages_added() -> None:
    files = [
        source(
            "src/App.tsx",
            """
            import clsx from 'clsx';
            import Badge from './widgets/Badge';

            export default function App() {
              return <Badge className={clsx('p-4')} />;
            }
            """,
        )
    ]

    result = Pipeline().run_files(files)

    assert result.stubs_generated == 1
    assert "export default Badge;" in _file(result, "src/widgets/Badge.tsx").content
    manifest = json.loads(_file(result, "package.json").content)
    assert "clsx" in manifest["dependencies"]
    assert "clsx" in result.added_packages


def test_unsupported_packages_are_warned() -> None:
    files = [SourceFile(path="src/App.tsx", content="import styled from 'styled-components';\n")]

    result = Pipeline().run_files(files)

    assert "Unsupported package import: styled-components" in result.warnings


def test_disabled_passes_are_skipped(tmp_path: Path) -> None:
    config = GenFixConfig(root=tmp_path, repair=RepairConfig(disabled_passes=["self-closing"]))

    result = Pipeline(config).run_text(HERO_RESPONSE)

    assert '<img src="x">' in _file(result, "src/components/Hero.tsx").content


def test_escalation_is_off_by_default() -> None:
    calls = []
    pipeline = _pipeline_with_reply(json.dumps({"files": []}), calls)

    result = pipeline.run_files([BROKEN_MATH])

    assert calls == []
    assert result.escalation is None
    assert "src/lib/math.ts" in result.summary()["findings"]


def test_escalation_fix_is_accepted() -> None:
    calls = []
    reply = json.dumps(
        {"files": [{"path": "src/lib/math.ts", "content": FIXED_MATH, "fixes": ["Closed arrow function body"]}]}
    )
    pipeline = _pipeline_with_reply(reply, calls)

    result = pipeline.run_files([BROKEN_MATH], escalate=True)

    assert len(calls) == 1
    assert "--- FILE: src/lib/math.ts ---" in calls[0].prompt
    assert "package.json" not in calls[0].prompt
    assert _file(result, "src/lib/math.ts").content == FIXED_MATH
    assert result.fixes_by_file["src/lib/math.ts"][-1] == "Closed arrow function body"
    assert result.valid
    assert result.summary()["escalation"] == {"fixed": ["src/lib/math.ts"], "error": None}


def test_escalation_fix_with_more_errors_is_rejected() -> None:
    worse = "export const add = (a: number, b: number) => {{\n  return [a + b;\n"
    reply = json.dumps({"files": [{"path": "src/lib/math.ts", "content": worse}]})

    result = _pipeline_with_reply(reply).run_files([BROKEN_MATH], escalate=True)

    assert _file(result, "src/lib/math.ts").content == BROKEN_MATH.content
    assert not result.valid
    assert "src/lib/math.ts" not in result.fixes_by_file


def test_escalation_failure_keeps_local_result(tmp_path: Path) -> None:
    config = GenFixConfig(root=tmp_path, escalation=EscalationConfig(enabled=True))
    pipeline = _pipeline_with_reply(RuntimeError("provider unavailable"), config=config)

    result = pipeline.run_files([BROKEN_MATH])

    assert _file(result, "src/lib/math.ts").content == BROKEN_MATH.content
    assert "Escalation failed: provider unavailable" in result.warnings
    assert result.summary()["escalation"] == {"fixed": [], "error": "provider unavailable"}


def test_summary_is_json_serialisable() -> None:
    result = _pipeline_with_reply("not json").run_files([BROKEN_MATH], escalate=True)

    summary = json.loads(json.dumps(result.summary()))

    assert summary["files"] == 2
    assert summary["valid"] is False
    assert summary["escalation"]["error"] == "Fixer reply contains no JSON object"


def test_dropped_connection_keeps_local_result(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise http.client.RemoteDisconnected("Remote end closed connection without response")

    monkeypatch.setattr("genfix.llm.runner.urlopen", fake_urlopen)
    runner = LLMRunner(base_url="https://openrouter.ai/api/v1", api_key="k")
    pipeline = Pipeline(fixer=CodeFixer(runner))

    result = pipeline.run_files([BROKEN_MATH], escalate=True)

    assert _file(result, "src/lib/math.ts").content == BROKEN_MATH.content
    assert (
        "Escalation failed: LLM HTTP runner failed: RemoteDisconnected: "
        "Remote end closed connection without response"
    ) in result.warnings


def test_relocated_files_are_reported() -> None:
    files = [
        SourceFile(path="app/page.tsx", content="export default function Page() { return null }\n"),
        SourceFile(path="components/Card.tsx", content="export default function Card() { return null }\n"),
        SourceFile(path="src/lib/util.ts", content="export const one = 1;\n"),
    ]

    result = Pipeline().run_files(files)

    assert result.moved == {
        "app/page.tsx": "src/App.tsx",
        "components/Card.tsx": "src/components/Card.tsx",
    }
    assert result.summary()["moved"] == result.moved
    assert "app/page.tsx" not in [file.path for file in result.files]
