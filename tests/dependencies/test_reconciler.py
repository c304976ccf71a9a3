"""Tests for genfix.dependencies."""

from __future__ import annotations

import json

from genfix.dependencies import (
    DependencyReconciler,
    KNOWN_PACKAGES,
    is_allowed_import,
    package_root,
)
from genfix.dependencies.reconciler import imported_packages
from genfix.models import SourceFile
from tests._fixtures.project_builder import source


def _manifest(files) -> dict:
    manifest = [file for file in files if file.path == "package.json"]
    assert len(manifest) == 1
    return json.loads(manifest[0].content)


def test_package_root() -> None:
    assert package_root("react-dom/client") == "react-dom"
    assert package_root("@tanstack/react-query") == "@tanstack/react-query"
    assert package_root("@hookform/resolvers/zod") == "@hookform/resolvers"
    assert package_root("./local") is None
    assert package_root("@/components/ui") is None
    assert package_root("node:fs") is None


def test_is_allowed_import() -> None:
    assert is_allowed_import("react")
    assert is_allowed_import("react-icons/fa")
    assert is_allowed_import("./Button")
    assert not is_allowed_import("styled-components")
    assert not is_allowed_import("@mui/material")


def test_manifest_created_with_imported_known_packages() -> None:
    files = [
        source(
            "src/App.tsx",
            """
            import { Star } from 'lucide-react';
            import clsx from 'clsx';
            export default function App() { return <Star className={clsx('a')} /> }
            """,
        )
    ]

    result = DependencyReconciler().reconcile(files)
    data = _manifest(result.files)

    assert result.created
    assert data["dependencies"]["lucide-react"] == KNOWN_PACKAGES["lucide-react"]
    assert data["dependencies"]["clsx"] == KNOWN_PACKAGES["clsx"]
    assert data["dependencies"]["react"] == "^18.2.0"
    assert result.added == {
        "lucide-react": KNOWN_PACKAGES["lucide-react"],
        "clsx": KNOWN_PACKAGES["clsx"],
    }


def test_existing_entries_never_change() -> None:
    manifest = {
        "name": "shop",
        "dependencies": {"react": "^17.0.0", "clsx": "1.0.0"},
        "devDependencies": {"framer-motion": "^10.0.0"},
    }
    files = [
        SourceFile(path="package.json", content=json.dumps(manifest)),
        source(
            "src/App.tsx",
            """
            import React from 'react';
            import clsx from 'clsx';
            import { motion } from 'framer-motion';
            import axios from 'axios';
            import styled from 'styled-components';
            """,
        ),
    ]

    result = DependencyReconciler().reconcile(files)
    data = _manifest(result.files)

    assert data["name"] == "shop"
    assert data["dependencies"]["react"] == "^17.0.0"
    assert data["dependencies"]["clsx"] == "1.0.0"
    assert data["devDependencies"] == {"framer-motion": "^10.0.0"}
    assert "framer-motion" not in data["dependencies"]
    assert data["dependencies"]["axios"] == KNOWN_PACKAGES["axios"]
    assert "styled-components" not in data["dependencies"]
    assert result.added == {"axios": KNOWN_PACKAGES["axios"]}
    assert result.unsupported == ["styled-components"]
    assert [file.path for file in result.files] == ["package.json", "src/App.tsx"]


def test_manifest_left_untouched_when_nothing_to_add() -> None:
    original = '{\n    "dependencies": {"react": "^18.2.0"}\n}'
    files = [
        SourceFile(path="package.json", content=original),
        SourceFile(path="src/App.tsx", content="import React from 'react';\n"),
    ]

    result = DependencyReconciler().reconcile(files)

    assert result.files[0].content == original
    assert not result.added


def test_malformed_manifest_is_resynthesised() -> None:
    files = [
        SourceFile(path="package.json", content='{"dependencies": {"react": '),
        SourceFile(path="src/App.tsx", content="import { z } from 'zod';\n"),
    ]

    result = DependencyReconciler().reconcile(files)
    data = _manifest(result.files)

    assert result.recovered
    assert data["dependencies"]["zod"] == KNOWN_PACKAGES["zod"]
    assert data["type"] == "module"


def test_configured_pins_extend_the_table() -> None:
    files = [SourceFile(path="src/App.tsx", content="import confetti from 'canvas-confetti';\n")]

    result = DependencyReconciler({"canvas-confetti": "^1.9.2"}).reconcile(files)

    assert _manifest(result.files)["dependencies"]["canvas-confetti"] == "^1.9.2"


def test_imported_packages_ignores_non_source_files() -> None:
    files = [
        SourceFile(path="README.md", content="import x from 'lodash'\n"),
        SourceFile(path="src/a.ts", content="const m = await import('date-fns');\nrequire('uuid');\n"),
    ]

    assert imported_packages(files) == ["date-fns", "uuid"]
