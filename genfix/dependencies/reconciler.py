"""Bring package.json in line with the packages the code imports."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from ..logging import get_logger
from ..models import DependencyManifest, ManifestError, SourceFile, is_source_path
from .packages import KNOWN_PACKAGES, MANIFEST_PATH, base_manifest, is_allowed_import, package_root

_SPECIFIER_PATTERNS = (
    re.compile(r"""\bfrom\s*['"]([^'"\n]+)['"]"""),
    re.compile(r"""\bimport\s*['"]([^'"\n]+)['"]"""),
    re.compile(r"""\bimport\(\s*['"]([^'"\n]+)['"]\s*\)"""),
    re.compile(r"""\brequire\(\s*['"]([^'"\n]+)['"]\s*\)"""),
)


@dataclass
class ReconcileResult:
    """Updated files plus what changed in the manifest."""

    files: List[SourceFile]
    added: Dict[str, str] = field(default_factory=dict)
    created: bool = False
    recovered: bool = False
    unsupported: List[str] = field(default_factory=list)


def iter_specifiers(content: str) -> List[str]:
    found: List[str] = []
    for pattern in _SPECIFIER_PATTERNS:
        found.extend(match.group(1) for match in pattern.finditer(content))
    return found


def imported_packages(files: Iterable[SourceFile]) -> List[str]:
    """Package roots referenced by source files, in first-seen order."""
    seen: Dict[str, None] = {}
    for file in files:
        if not is_source_path(file.path):
            continue
        for specifier in iter_specifiers(file.content):
            root = package_root(specifier)
            if root:
                seen.setdefault(root, None)
    return list(seen)


class DependencyReconciler:
    """Adds known packages to the manifest; never removes or re-pins."""

    def __init__(
        self,
        known_packages: Mapping[str, str] | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.known_packages: Dict[str, str] = dict(KNOWN_PACKAGES)
        if known_packages:
            self.known_packages.update(known_packages)
        self._logger = logger or get_logger("deps")

    def reconcile(self, files: Sequence[SourceFile]) -> ReconcileResult:
        result = ReconcileResult(files=list(files))
        index = self._manifest_index(result.files)
        manifest = self._load(result, index)

        for root in imported_packages(result.files):
            version = self.known_packages.get(root)
            if version is None:
                continue
            if manifest.add(root, version):
                result.added[root] = version
                self._logger.info("Added %s@%s to %s", root, version, MANIFEST_PATH)

        result.unsupported = self._unsupported(result.files)

        if result.added or result.created or result.recovered:
            updated = SourceFile(path=MANIFEST_PATH, content=manifest.to_text(), language="json")
            if index is None:
                result.files.append(updated)
            else:
                result.files[index] = updated
        return result

    @staticmethod
    def _manifest_index(files: Sequence[SourceFile]) -> Optional[int]:
        for position in range(len(files) - 1, -1, -1):
            if files[position].path == MANIFEST_PATH:
                return position
        return None

    def _load(self, result: ReconcileResult, index: Optional[int]) -> DependencyManifest:
        if index is None:
            result.created = True
            self._logger.info("No %s found; synthesising a minimal manifest", MANIFEST_PATH)
            return DependencyManifest(data=base_manifest())
        try:
            return DependencyManifest.from_text(result.files[index].content)
        except ManifestError as exc:
            result.recovered = True
            self._logger.warning("%s; discarding it and synthesising a minimal manifest", exc)
            return DependencyManifest(data=base_manifest())

    def _unsupported(self, files: Iterable[SourceFile]) -> List[str]:
        flagged: Set[str] = set()
        for file in files:
            if not is_source_path(file.path):
                continue
            for specifier in iter_specifiers(file.content):
                if package_root(specifier) and not is_allowed_import(specifier):
                    if specifier not in flagged:
                        self._logger.debug("Unsupported import %s in %s", specifier, file.path)
                    flagged.add(specifier)
        return sorted(flagged)


__all__ = ["DependencyReconciler", "ReconcileResult", "imported_packages", "iter_specifiers"]
