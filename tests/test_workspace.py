"""Tests for genfix.workspace."""

from __future__ import annotations

from pathlib import Path

import pytest

from genfix.models import SourceFile
from genfix.workspace import load_project, remove_files, write_project


def test_load_project_skips_generated_and_lock_files(project_builder) -> None:
    project_builder.write(
        {
            "package.json": "{}\n",
            "package-lock.json": "{}\n",
            "src/App.tsx": "export default function App() { return null }\n",
            "node_modules/react/index.js": "module.exports = {};\n",
            "dist/assets/index.js": "console.log(1);\n",
            ".genfix.yml": "escalation:\n  enabled: false\n",
        }
    )

    files = project_builder.load()

    assert [file.path for file in files] == ["package.json", "src/App.tsx"]


def test_load_project_honours_exclude_patterns(project_builder) -> None:
    project_builder.write(
        {
            "README.md": "# demo\n",
            "public/robots.txt": "User-agent: *\n",
            "src/main.tsx": "import './index.css';\n",
        }
    )

    files = load_project(project_builder.path(), exclude=["public/", "*.md"])

    assert [file.path for file in files] == ["src/main.tsx"]


def test_load_project_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_project(tmp_path / "missing")


def test_write_project_only_touches_changed_files(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "App.tsx").write_text("same\n", encoding="utf-8")

    written = write_project(
        tmp_path,
        [
            SourceFile(path="src/App.tsx", content="same\n"),
            SourceFile(path="src/components/Card.tsx", content="export default 1;\n"),
        ],
    )

    card = tmp_path / "src" / "components" / "Card.tsx"
    assert written == [card.resolve()]
    assert card.read_text(encoding="utf-8") == "export default 1;\n"


def test_write_project_refuses_escaping_paths(tmp_path: Path) -> None:
    root = tmp_path / "project"
    root.mkdir()

    with pytest.raises(RuntimeError, match="outside the project"):
        write_project(root, [SourceFile(path="../evil.ts", content="x")])

    assert not (tmp_path / "evil.ts").exists()


def test_remove_files_deletes_existing_paths(tmp_path: Path) -> None:
    (tmp_path / "app").mkdir()
    page = tmp_path / "app" / "page.tsx"
    page.write_text("export default 1;\n", encoding="utf-8")

    removed = remove_files(tmp_path, ["app/page.tsx", "app/missing.tsx"])

    assert removed == [page.resolve()]
    assert not page.exists()


def test_remove_files_refuses_escaping_paths(tmp_path: Path) -> None:
    root = tmp_path / "project"
    root.mkdir()
    outside = tmp_path / "keep.ts"
    outside.write_text("x\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="outside the project"):
        remove_files(root, ["../keep.ts"])

    assert outside.exists()
