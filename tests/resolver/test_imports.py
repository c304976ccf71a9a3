"""Tests for genfix.resolver."""

from __future__ import annotations

from genfix.models import SourceFile
from genfix.resolver import ImportResolver, PathIndex, complete_imports, resolve_candidate
from genfix.resolver.imports import imported_symbol, parse_clause
from tests._fixtures.project_builder import source


def test_resolve_candidate_joins_and_defaults_to_tsx() -> None:
    assert resolve_candidate("src/App.tsx", "./widgets/Badge") == "src/widgets/Badge.tsx"
    assert resolve_candidate("src/pages/Home.tsx", "../lib/api.ts") == "src/lib/api.ts"
    assert resolve_candidate("src/App.tsx", "./index.css") == "src/index.css"
    assert resolve_candidate("App.tsx", "../../shared/x") == "shared/x.tsx"


def test_parse_clause_variants() -> None:
    clause = parse_clause("React, { useState, type FC, Component as C }")
    assert clause.default == "React"
    assert clause.named == ["useState", "FC", "Component"]

    namespace = parse_clause("* as utils")
    assert namespace.namespace == "utils"
    assert imported_symbol(namespace, "./utils") == "utils"

    assert imported_symbol(parse_clause(""), "./styles/theme.css") == "theme"


def test_path_index_matches_extensionless_and_index_modules() -> None:
    index = PathIndex(["src/components/Button.tsx", "src/hooks/index.ts", "src/data/items.json"])

    assert index.lookup("src/components/Button.tsx") == "src/components/Button.tsx"
    assert index.lookup("components/Button.tsx") == "src/components/Button.tsx"
    assert index.lookup("src/components/Button.jsx") == "src/components/Button.tsx"
    assert index.lookup("src/hooks.tsx") == "src/hooks/index.ts"
    assert index.lookup("src/data/items.json") == "src/data/items.json"
    assert index.lookup("src/components/Missing.tsx") is None


def test_missing_default_import_reported_with_stub() -> None:
    files = [
        source(
            "src/App.tsx",
            """
            import Badge from './widgets/Badge';

            export default function App() {
              return <Badge />;
            }
            """,
        )
    ]

    validation = ImportResolver().validate(files)

    assert not validation.valid
    assert len(validation.missing_imports) == 1
    missing = validation.missing_imports[0]
    assert missing.imported_name == "Badge"
    assert missing.suggested_path == "src/widgets/Badge.tsx"
    assert missing.source_file == "src/App.tsx"

    result = complete_imports(files)

    assert result.stubs_generated == 1
    stub = result.stubs[0]
    assert stub.path == "src/widgets/Badge.tsx"
    assert "export default Badge;" in stub.content


def test_all_import_forms_are_checked() -> None:
    files = [
        source(
            "src/main.tsx",
            """
            import './index.css';
            import { Header, Footer } from './components/layout/Chrome';
            import * as api from './lib/api';
            export { Button } from './components/ui/Button';
            const Lazy = import('./pages/Lazy');
            import logo from './assets/logo.png';
            import React from 'react';
            """,
        ),
        SourceFile(path="src/lib/api.ts", content="export const get = () => null;\n"),
    ]

    validation = ImportResolver().validate(files)
    specifiers = sorted(item.raw_specifier for item in validation.missing_imports)

    assert specifiers == [
        "./components/layout/Chrome",
        "./components/ui/Button",
        "./index.css",
        "./pages/Lazy",
    ]


def test_completion_resolves_every_import() -> None:
    files = [
        source(
            "src/App.tsx",
            """
            import './App.css';
            import data from './data/items.json';
            import { Navbar } from './components/layout/Navbar';
            import { useCart, formatPrice } from './lib/cart';
            import Card, { CardTitle } from './components/ui/Card';
            import Pricing from './sections/Pricing';
            """,
        ),
        source(
            "src/sections/Faq.tsx",
            """
            import Pricing from './Pricing';
            import { Navbar } from '../components/layout/Navbar';
            export default function Faq() { return null }
            """,
        ),
    ]

    result = complete_imports(files)
    again = ImportResolver().validate(result.files)

    assert again.valid
    assert again.missing_imports == []
    paths = {stub.path for stub in result.stubs}
    assert paths == {
        "src/App.css",
        "src/data/items.json",
        "src/components/layout/Navbar.tsx",
        "src/lib/cart.ts",
        "src/components/ui/Card.tsx",
        "src/sections/Pricing.tsx",
    }


def test_nothing_generated_when_all_imports_exist() -> None:
    files = [
        SourceFile(path="src/App.tsx", content="import Nav from './components/Nav';\n"),
        SourceFile(path="src/components/Nav.jsx", content="export default function Nav() {}\n"),
    ]

    result = complete_imports(files)

    assert result.validation.valid
    assert result.stubs == []
    assert result.files == files


def test_jsx_importer_keeps_explicit_extension() -> None:
    files = [
        source(
            "src/App.jsx",
            """
            import Card from './ui/Card.jsx';

            export default function App() {
              return <Card />;
            }
            """,
        )
    ]

    result = complete_imports(files)

    assert [stub.path for stub in result.stubs] == ["src/ui/Card.jsx"]
    assert ImportResolver().validate(result.files).valid
