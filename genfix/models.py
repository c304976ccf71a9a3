"""Core data models shared across genfix components."""

from __future__ import annotations

import json
import posixpath
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

_LANGUAGE_BY_SUFFIX = {
    ".tsx": "tsx",
    ".ts": "typescript",
    ".jsx": "jsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".css": "css",
    ".scss": "scss",
    ".html": "html",
    ".json": "json",
    ".md": "markdown",
    ".svg": "svg",
    ".txt": "text",
}

SOURCE_EXTENSIONS = (".tsx", ".jsx", ".ts", ".js")
SCRIPT_EXTENSION_PATTERN = re.compile(r"\.(?:tsx?|jsx?)$")


def normalize_path(path: str) -> str:
    """Return a slash-separated virtual path without leading ``/`` or ``./``."""
    cleaned = path.strip().replace("\\", "/")
    cleaned = re.sub(r"/{2,}", "/", cleaned)
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned.lstrip("/")


def language_for_path(path: str) -> str:
    _, suffix = posixpath.splitext(path.lower())
    return _LANGUAGE_BY_SUFFIX.get(suffix, "text")


def is_source_path(path: str) -> bool:
    return path.lower().endswith(SOURCE_EXTENSIONS)


def strip_script_extension(path: str) -> str:
    return SCRIPT_EXTENSION_PATTERN.sub("", path)


@dataclass
class SourceFile:
    """A file in the virtual project tree."""

    path: str
    content: str
    language: str = ""

    def __post_init__(self) -> None:
        self.path = normalize_path(self.path)
        if not self.language:
            self.language = language_for_path(self.path)

    def with_content(self, content: str) -> "SourceFile":
        return SourceFile(path=self.path, content=content, language=self.language)

    def with_path(self, path: str) -> "SourceFile":
        return SourceFile(path=path, content=self.content, language=language_for_path(path))


@dataclass
class ImportReference:
    """A relative import found in a source file."""

    source_file: str
    raw_specifier: str
    imported_name: str
    candidate_path: str
    names: List[str] = field(default_factory=list)
    resolved_path: Optional[str] = None


@dataclass
class MissingImport:
    """A relative import whose target is absent from the file set."""

    source_file: str
    raw_specifier: str
    imported_name: str
    suggested_path: str
    names: List[str] = field(default_factory=list)


@dataclass
class ValidationFinding:
    """Defects detected in a single file."""

    path: str
    messages: List[str]


class ManifestError(ValueError):
    """Raised when a package manifest cannot be parsed."""


@dataclass
class DependencyManifest:
    """Parsed package.json document."""

    data: Dict[str, Any]

    @classmethod
    def from_text(cls, text: str) -> "DependencyManifest":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"package.json is not valid JSON: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise ManifestError("package.json must contain an object at the root")
        for section in ("dependencies", "devDependencies"):
            if section in data and not isinstance(data[section], dict):
                raise ManifestError(f"package.json '{section}' must be an object")
        return cls(data=data)

    @property
    def dependencies(self) -> Dict[str, str]:
        return self.data.setdefault("dependencies", {})

    @property
    def dev_dependencies(self) -> Dict[str, str]:
        return self.data.get("devDependencies") or {}

    def has(self, name: str) -> bool:
        return name in self.dependencies or name in self.dev_dependencies

    def add(self, name: str, version: str) -> bool:
        """Declare ``name`` unless either section already does."""
        if self.has(name):
            return False
        self.dependencies[name] = version
        return True

    def to_text(self) -> str:
        return json.dumps(self.data, indent=2) + "\n"


def merge_files(files: Iterable[SourceFile]) -> List[SourceFile]:
    """Collapse duplicate paths, last write wins, first-seen order kept."""
    merged: Dict[str, SourceFile] = {}
    for file in files:
        merged[file.path] = file
    return list(merged.values())


__all__ = [
    "DependencyManifest",
    "ImportReference",
    "ManifestError",
    "MissingImport",
    "SOURCE_EXTENSIONS",
    "SourceFile",
    "ValidationFinding",
    "is_source_path",
    "language_for_path",
    "merge_files",
    "normalize_path",
    "strip_script_extension",
]
