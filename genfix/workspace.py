"""Load a project directory into SourceFile records and write it back."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .logging import get_logger
from .models import SourceFile

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".next",
    ".turbo",
    ".cache",
    "node_modules",
    "dist",
    "build",
    "coverage",
    "__pycache__",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    ".genfix.yml",
    "Thumbs.db",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
}

_MAX_FILE_BYTES = 1_000_000

_LOGGER = get_logger("workspace")


def load_project(root: Path, exclude: Sequence[str] | None = None) -> List[SourceFile]:
    """Read every text file under ``root`` into a SourceFile list."""
    root = root.expanduser().resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Project directory not found: {root}")

    patterns = list(exclude or [])
    files: List[SourceFile] = []
    for path in _iter_files(root, patterns):
        rel_path = path.relative_to(root).as_posix()
        if path.stat().st_size > _MAX_FILE_BYTES:
            _LOGGER.debug("Skipping %s: larger than %d bytes", rel_path, _MAX_FILE_BYTES)
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            _LOGGER.debug("Skipping %s: not UTF-8 text", rel_path)
            continue
        files.append(SourceFile(path=rel_path, content=content))
    return files


def write_project(root: Path, files: Iterable[SourceFile]) -> List[Path]:
    """Write files below ``root``; returns the paths whose content changed."""
    root = root.expanduser().resolve()
    written: List[Path] = []
    for file in files:
        target = (root / file.path).resolve()
        if root != target and root not in target.parents:
            raise RuntimeError(f"Refusing to write outside the project: {file.path}")
        if target.exists() and target.read_text(encoding="utf-8", errors="replace") == file.content:
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(file.content, encoding="utf-8")
        written.append(target)
    return written


def remove_files(root: Path, paths: Iterable[str]) -> List[Path]:
    """Delete project-relative ``paths`` below ``root``; returns what was removed."""
    root = root.expanduser().resolve()
    removed: List[Path] = []
    for rel_path in paths:
        target = (root / rel_path).resolve()
        if root == target or root not in target.parents:
            raise RuntimeError(f"Refusing to remove outside the project: {rel_path}")
        if not target.is_file():
            continue
        target.unlink()
        _LOGGER.debug("Removed %s", rel_path)
        removed.append(target)
    return removed


def _iter_files(root: Path, patterns: Sequence[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in _EXCLUDED_DIRS
            and not _is_excluded(_join(rel_dir, name), patterns, is_dir=True)
        )
        for name in sorted(filenames):
            if name in _EXCLUDED_FILES:
                continue
            if _is_excluded(_join(rel_dir, name), patterns, is_dir=False):
                continue
            yield current / name


def _join(rel_dir: str, name: str) -> str:
    return name if rel_dir in ("", ".") else f"{rel_dir}/{name}"


def _is_excluded(rel_path: str, patterns: Sequence[str], *, is_dir: bool) -> bool:
    for raw in patterns:
        pattern = raw.strip().lstrip("/")
        if not pattern:
            continue
        if pattern.endswith("/"):
            if not is_dir:
                continue
            pattern = pattern[:-1]
        if "/" in pattern:
            if fnmatchcase(rel_path, pattern):
                return True
        elif any(fnmatchcase(part, pattern) for part in rel_path.split("/")):
            return True
    return False


__all__ = ["load_project", "remove_files", "write_project"]
