"""Static package tables for manifest reconciliation."""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

# Known-good version pins for packages the generated code tends to import.
KNOWN_PACKAGES: Dict[str, str] = {
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
    "lucide-react": "^0.344.0",
    "react-hot-toast": "^2.4.1",
    "clsx": "^2.1.0",
    "tailwind-merge": "^2.2.1",
    "framer-motion": "^11.0.8",
    "class-variance-authority": "^0.7.0",
    "react-hook-form": "^7.51.0",
    "zod": "^3.22.4",
    "@hookform/resolvers": "^3.3.4",
    "axios": "^1.6.7",
    "@tanstack/react-query": "^5.24.1",
    "react-router-dom": "^6.22.3",
    "date-fns": "^3.3.1",
    "uuid": "^9.0.1",
}

# Import specifiers the preview runtime supports.
ALLOWED_PACKAGES: Tuple[str, ...] = (
    "react",
    "react-dom",
    "react-dom/client",
    "react/jsx-runtime",
    "react-router-dom",
    "clsx",
    "tailwind-merge",
    "framer-motion",
    "lucide-react",
    "react-icons",
    "react-icons/fa",
    "react-icons/fi",
    "react-icons/md",
    "react-icons/bi",
    "react-icons/bs",
    "react-icons/hi",
    "@supabase/supabase-js",
    "axios",
    "swr",
    "@tanstack/react-query",
    "react-hook-form",
    "zod",
    "@hookform/resolvers/zod",
    "date-fns",
    "uuid",
    "lodash",
    "canvas-confetti",
    "@headlessui/react",
    "react-hot-toast",
    "recharts",
    "chart.js",
    "react-chartjs-2",
)

MANIFEST_PATH = "package.json"


def base_manifest() -> Dict[str, object]:
    """Minimal Vite + React + Tailwind manifest."""
    return {
        "name": "vite-project",
        "private": True,
        "version": "0.0.0",
        "type": "module",
        "scripts": {
            "dev": "vite",
            "build": "tsc && vite build",
            "lint": "eslint . --ext ts,tsx --report-unused-disable-directives --max-warnings 0",
            "preview": "vite preview",
        },
        "dependencies": {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
        },
        "devDependencies": {
            "@types/react": "^18.2.64",
            "@types/react-dom": "^18.2.21",
            "@vitejs/plugin-react": "^4.2.1",
            "typescript": "^5.2.2",
            "vite": "^5.1.4",
            "autoprefixer": "^10.4.18",
            "postcss": "^8.4.35",
            "tailwindcss": "^3.4.1",
        },
    }


def package_root(specifier: str) -> Optional[str]:
    """Return the installable package name for a bare import specifier."""
    specifier = specifier.strip()
    if not specifier or specifier.startswith((".", "/", "@/", "~/", "#")):
        return None
    if re.match(r"^[a-z]+:", specifier):
        return None
    parts = specifier.split("/")
    if specifier.startswith("@"):
        if len(parts) < 2 or not parts[1]:
            return None
        return f"{parts[0]}/{parts[1]}"
    return parts[0]


def is_allowed_import(specifier: str) -> bool:
    """Relative imports are always fine; bare ones must be on the allow-list."""
    if specifier.startswith((".", "/")):
        return True
    if specifier in ALLOWED_PACKAGES:
        return True
    root = package_root(specifier)
    return root is not None and root in ALLOWED_PACKAGES and specifier.startswith(f"{root}/")


__all__ = [
    "ALLOWED_PACKAGES",
    "KNOWN_PACKAGES",
    "MANIFEST_PATH",
    "base_manifest",
    "is_allowed_import",
    "package_root",
]
