"""Tests for genfix.translator."""

from __future__ import annotations

from genfix.models import SourceFile
from genfix.translator import PathTranslator, translate_files
from tests._fixtures.project_builder import source


def _paths(paths):
    return [file.path for file in translate_files(SourceFile(path=p, content="") for p in paths)]


def test_entry_and_page_paths_are_mapped() -> None:
    assert _paths(
        [
            "app/page.tsx",
            "src/app/page.jsx",
            "pages/index.js",
            "App.tsx",
            "app/login/page.tsx",
            "app/about-us/page.js",
        ]
    ) == [
        "src/App.tsx",
        "src/App.jsx",
        "src/App.jsx",
        "src/App.tsx",
        "src/pages/Login.tsx",
        "src/pages/About-us.jsx",
    ]


def test_source_folders_and_root_main_move_under_src() -> None:
    assert _paths(
        [
            "components/Hero.tsx",
            "lib/utils.ts",
            "hooks/useAuth.ts",
            "main.tsx",
            "app/globals.css",
            "src/components/Nav.tsx",
            "index.html",
            "package.json",
        ]
    ) == [
        "src/components/Hero.tsx",
        "src/lib/utils.ts",
        "src/hooks/useAuth.ts",
        "src/main.tsx",
        "src/globals.css",
        "src/components/Nav.tsx",
        "index.html",
        "package.json",
    ]


def test_client_directive_removed_from_pages() -> None:
    file = source(
        "app/page.tsx",
        """
        'use client';
        export default function Page() { return null }
        """,
    )

    translated = PathTranslator().translate(file)

    assert translated.path == "src/App.tsx"
    assert "use client" not in translated.content
    assert translated.content.startswith("export default function Page()")


def test_next_components_rewritten_to_plain_html() -> None:
    file = source(
        "components/Hero.tsx",
        """
        import Head from 'next/head';
        import Link from 'next/link';
        import Image from 'next/image';

        export default function Hero() {
          return (
            <div>
              <Head><title>Hi</title></Head>
              <Link href="/about" className="underline">About</Link>
              <Image src="/hero.png" alt="Hero" width={400} height={300} />
            </div>
          );
        }
        """,
    )

    translated = PathTranslator().translate(file)
    content = translated.content

    assert "next/" not in content
    assert "<><title>Hi</title></>" in content
    assert '<a href="/about" className="underline">About</a>' in content
    assert '<img src="/hero.png" alt="Hero" width={400} height={300} />' in content


def test_link_left_alone_when_router_is_imported() -> None:
    file = source(
        "src/components/Nav.tsx",
        """
        import { Link } from 'react-router-dom';

        export default function Nav() {
          return <Link to="/home">Home</Link>;
        }
        """,
    )

    translated = PathTranslator().translate(file)

    assert translated is file


def test_alias_imports_become_relative() -> None:
    file = source(
        "components/ui/Card.tsx",
        """
        import { cn } from '@/lib/utils';
        import Button from "@/components/ui/Button";
        export default function Card() { return null }
        """,
    )

    translated = PathTranslator().translate(file)

    assert translated.path == "src/components/ui/Card.tsx"
    assert "from '../../lib/utils'" in translated.content
    assert 'from "./Button"' in translated.content


def test_index_html_entry_rewritten() -> None:
    file = source(
        "index.html",
        """
        <html>
          <head>
            <script src="https://cdn.tailwindcss.com"></script>
            <script>
              tailwind.config = { theme: {} }
            </script>
          </head>
          <body>
            <div id="root"></div>
            <script type="module" src="/src/main.jsx"></script>
          </body>
        </html>
        """,
    )

    translated = PathTranslator().translate(file)

    assert "cdn.tailwindcss.com" not in translated.content
    assert "tailwind.config" not in translated.content
    assert 'src="/src/main.tsx"' in translated.content
    assert '<div id="root"></div>' in translated.content


def test_self_closing_link_without_href_is_kept() -> None:
    file = source(
        "src/components/Nav.tsx",
        """
        import Link from 'next/link';

        export default function Nav() {
          return (
            <nav>
              <Link className="h-4" />
              <Link href="/a">A</Link>
            </nav>
          );
        }
        """,
    )

    content = PathTranslator().translate(file).content

    assert "next/link" not in content
    assert '<Link className="h-4" />' in content
    assert '<a href="/a">A</a>' in content


def test_next_link_rewritten_beside_router_link() -> None:
    file = source(
        "src/components/Nav.tsx",
        """
        import NextLink from 'next/link';
        import { Link, useNavigate } from 'react-router-dom';

        export default function Nav() {
          const navigate = useNavigate();
          return (
            <nav onClick={() => navigate('/')}>
              <Link to="/home">Home</Link>
              <NextLink href="/about">About</NextLink>
            </nav>
          );
        }
        """,
    )

    content = PathTranslator().translate(file).content

    assert "next/link" not in content
    assert "import { Link, useNavigate } from 'react-router-dom';" in content
    assert '<Link to="/home">Home</Link>' in content
    assert '<a href="/about">About</a>' in content
    assert "NextLink" not in content
