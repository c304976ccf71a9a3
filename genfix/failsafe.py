"""Fail-safe placeholder modules for imports the model never produced."""

from __future__ import annotations

import logging
import posixpath
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader

from .logging import get_logger
from .models import MissingImport, SourceFile

_LAYOUT_HINTS = ("Header", "Footer", "Sidebar", "Navbar", "Nav", "Layout", "Topbar")
_UI_HINTS = ("Button", "Card", "Input", "Modal", "Badge", "Dialog", "Dropdown", "Tooltip")

_STYLESHEET_EXTENSIONS = (".css", ".scss", ".sass", ".less")
_EXPLICIT_SCRIPT = re.compile(r"\.(?:tsx?|jsx?)$")
_UNTYPED_EXTENSIONS = (".js", ".jsx")

_STUB_TEMPLATES: Dict[str, str] = {
    "layout": "layout.tsx.j2",
    "ui": "ui.tsx.j2",
    "feature": "feature.tsx.j2",
    "module": "module.ts.j2",
    "stylesheet": "stylesheet.css.j2",
    "data": "data.json.j2",
    "image": "image.svg.j2",
}


@dataclass
class _StubTarget:
    path: str
    specifier: str
    importer: str
    symbol: str
    names: List[str] = field(default_factory=list)
    role: str = ""


def pascal_case(name: str) -> str:
    parts = [part for part in re.split(r"[^A-Za-z0-9]+", name) if part]
    result = "".join(part[:1].upper() + part[1:] for part in parts)
    if not result or result[0].isdigit():
        result = f"Component{result}"
    return result


def _is_module_like(symbol: str, names: Sequence[str]) -> bool:
    """Nothing capitalised is imported, so no component is expected."""
    return not any(name[:1].isupper() for name in (symbol, *names))


def stub_role(symbol: str, path: str, names: Sequence[str] = ()) -> str:
    """Pick the placeholder flavour from the target path and imported names."""
    lowered = path.lower()
    if lowered.endswith(_STYLESHEET_EXTENSIONS):
        return "stylesheet"
    if lowered.endswith(".json"):
        return "data"
    if lowered.endswith(".svg"):
        return "image"
    if _is_module_like(symbol, names):
        return "module"
    if "/layout/" in f"/{lowered}" or any(hint in symbol for hint in _LAYOUT_HINTS):
        return "layout"
    if "/ui/" in f"/{lowered}" or any(hint in symbol for hint in _UI_HINTS):
        return "ui"
    return "feature"


def stub_path(suggested: str, role: str) -> str:
    if role == "module":
        return re.sub(r"\.(?:tsx|jsx|js)$", ".ts", suggested)
    return re.sub(r"\.(?:jsx|js)$", ".tsx", suggested)


class StubGenerator:
    """Render one placeholder module per distinct missing target path."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates") / "stubs"
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._logger = logger or get_logger("resolve")

    def generate(
        self,
        missing: Iterable[MissingImport],
        existing_paths: Iterable[str] = (),
    ) -> List[SourceFile]:
        grouped: "OrderedDict[str, _StubTarget]" = OrderedDict()
        for item in missing:
            target = grouped.get(item.suggested_path)
            if target is None:
                target = _StubTarget(
                    path=item.suggested_path,
                    specifier=item.raw_specifier,
                    importer=item.source_file,
                    symbol=item.imported_name,
                )
                grouped[item.suggested_path] = target
            for name in item.names:
                if name not in target.names:
                    target.names.append(name)

        taken = set(existing_paths)
        stubs: List[SourceFile] = []
        for target in grouped.values():
            target.role = stub_role(target.symbol, target.path, target.names)
            if not _EXPLICIT_SCRIPT.search(target.specifier):
                target.path = stub_path(target.path, target.role)
            if target.path in taken:
                continue
            taken.add(target.path)
            stub = self.render(target)
            self._logger.info("Generated %s placeholder %s", target.role, stub.path)
            stubs.append(stub)
        return stubs

    def render(self, target: _StubTarget) -> SourceFile:
        role = target.role or stub_role(target.symbol, target.path, target.names)
        template = self._env.get_template(_STUB_TEMPLATES[role])
        if role == "module":
            name = _module_default_name(target)
            extras = [n for n in target.names if n != name]
        else:
            name = pascal_case(target.symbol)
            extras = [n for n in target.names if n != name]
        content = template.render(
            name=name,
            extras=extras,
            specifier=target.specifier,
            importer=target.importer,
            typed=not target.path.endswith(_UNTYPED_EXTENSIONS),
        )
        return SourceFile(path=target.path, content=content.rstrip() + "\n")


def _module_default_name(target: _StubTarget) -> str:
    base = posixpath.basename(target.path).split(".")[0]
    parts = [part for part in re.split(r"[^A-Za-z0-9]+", base) if part]
    name = parts[0].lower() + "".join(p[:1].upper() + p[1:] for p in parts[1:]) if parts else "module"
    if not re.match(r"[A-Za-z_$]", name):
        name = f"module{name}"
    if name in target.names:
        name = f"{name}Module"
    return name


__all__ = ["StubGenerator", "pascal_case", "stub_path", "stub_role"]
