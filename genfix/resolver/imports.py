"""Relative import parsing and existence checks over a virtual file set."""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import (
    ImportReference,
    MissingImport,
    SourceFile,
    is_source_path,
    strip_script_extension,
)

_STATIC_IMPORT = re.compile(
    r"""\bimport\s+(?:type\s+)?(?P<clause>[\w$]+(?:\s*,\s*(?:\{[^}]*\}|\*\s*as\s+[\w$]+))?|\{[^}]*\}|\*\s*as\s+[\w$]+)\s*from\s*(?P<quote>['"])(?P<spec>[^'"\n]+)(?P=quote)"""
)
_SIDE_EFFECT_IMPORT = re.compile(r"""\bimport\s*(['"])(?P<spec>[^'"\n]+)\1""")
_REEXPORT = re.compile(
    r"""\bexport\s+(?:type\s+)?(?P<clause>\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*(['"])(?P<spec>[^'"\n]+)\2"""
)
_DYNAMIC_IMPORT = re.compile(r"""\bimport\(\s*(['"])(?P<spec>[^'"\n]+)\1\s*\)""")

_RESOLVABLE_EXTENSION = re.compile(r"\.(?:tsx?|jsx?|mjs|cjs|css|scss|sass|less|json|svg)$", re.IGNORECASE)
_BINARY_ASSET = re.compile(r"\.(?:png|jpe?g|gif|webp|avif|ico|bmp|woff2?|ttf|otf|mp4|webm|mp3|wav)$", re.IGNORECASE)

SOURCE_ROOT = "src/"


@dataclass
class ImportClause:
    """Bindings introduced by one import statement."""

    default: Optional[str] = None
    named: List[str] = field(default_factory=list)
    namespace: Optional[str] = None


@dataclass
class ImportValidationResult:
    """Outcome of checking every relative import in a file set."""

    valid: bool
    missing_imports: List[MissingImport]
    references: List[ImportReference] = field(default_factory=list)


def parse_clause(clause: str) -> ImportClause:
    parsed = ImportClause()
    clause = clause.strip()
    if not clause:
        return parsed
    braced = re.search(r"\{([^}]*)\}", clause)
    if braced:
        for item in braced.group(1).split(","):
            item = re.sub(r"^\s*type\s+", "", item).strip()
            if not item:
                continue
            original = re.split(r"\s+as\s+", item)[0].strip()
            if original and original != "default":
                parsed.named.append(original)
            elif original == "default":
                parsed.default = re.split(r"\s+as\s+", item)[-1].strip()
    namespace = re.search(r"\*\s*as\s+([\w$]+)", clause)
    if namespace:
        parsed.namespace = namespace.group(1)
    leading = re.match(r"([\w$]+)\s*(?:,|$)", clause)
    if leading:
        parsed.default = leading.group(1)
    return parsed


def imported_symbol(clause: ImportClause, specifier: str) -> str:
    """Name used for stubs: first named import, else default, else the module basename."""
    if clause.named:
        return clause.named[0]
    if clause.default:
        return clause.default
    if clause.namespace:
        return clause.namespace
    base = posixpath.basename(strip_script_extension(specifier.rstrip("/")))
    base = re.sub(r"\.[^.]+$", "", base)
    return base if re.match(r"[A-Za-z_$]", base or "") else "Component"


def resolve_candidate(source_path: str, specifier: str) -> str:
    """Join ``specifier`` onto the importer's directory; default to ``.tsx``."""
    base = posixpath.dirname(source_path)
    joined = posixpath.normpath(posixpath.join(base, specifier) if base else specifier)
    while joined.startswith("../"):
        joined = joined[3:]
    if joined in ("", ".", ".."):
        joined = "index"
    if not _RESOLVABLE_EXTENSION.search(joined):
        joined = f"{joined}.tsx"
    return joined


def suggested_path(candidate: str) -> str:
    return candidate if candidate.startswith(SOURCE_ROOT) else f"{SOURCE_ROOT}{candidate}"


def _strip_source_root(path: str) -> str:
    return path[len(SOURCE_ROOT):] if path.startswith(SOURCE_ROOT) else path


class PathIndex:
    """Every spelling under which an existing file may be imported."""

    def __init__(self, paths: Iterable[str]) -> None:
        self._variants: Dict[str, str] = {}
        for path in paths:
            for variant in self._spellings(path):
                self._variants.setdefault(variant, path)

    @staticmethod
    def _spellings(path: str) -> Tuple[str, ...]:
        stripped = _strip_source_root(path)
        return (path, stripped, strip_script_extension(path), strip_script_extension(stripped))

    def lookup(self, candidate: str) -> Optional[str]:
        bare = strip_script_extension(candidate)
        options = (
            candidate,
            bare,
            f"{SOURCE_ROOT}{candidate}",
            f"{SOURCE_ROOT}{bare}",
            _strip_source_root(candidate),
            strip_script_extension(_strip_source_root(candidate)),
            f"{bare}/index",
            f"{SOURCE_ROOT}{bare}/index",
        )
        for option in options:
            if option in self._variants:
                return self._variants[option]
        return None

    def __contains__(self, candidate: str) -> bool:
        return self.lookup(candidate) is not None


def iter_relative_imports(file: SourceFile) -> Iterator[Tuple[str, ImportClause]]:
    """Yield ``(specifier, clause)`` for each relative import, re-export or dynamic import."""
    content = file.content
    seen_spans: List[Tuple[int, int]] = []
    for match in _STATIC_IMPORT.finditer(content):
        seen_spans.append(match.span())
        if match.group("spec").startswith("."):
            yield match.group("spec"), parse_clause(match.group("clause"))
    for match in _REEXPORT.finditer(content):
        if match.group("spec").startswith("."):
            clause = match.group("clause")
            yield match.group("spec"), parse_clause(clause if clause.startswith("{") else "")
    for match in _SIDE_EFFECT_IMPORT.finditer(content):
        if any(start <= match.start() < end for start, end in seen_spans):
            continue
        if match.group("spec").startswith("."):
            yield match.group("spec"), ImportClause()
    for match in _DYNAMIC_IMPORT.finditer(content):
        if match.group("spec").startswith("."):
            yield match.group("spec"), ImportClause()


class ImportResolver:
    """Find relative imports whose target module is absent."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("resolve")

    def references(self, files: Sequence[SourceFile]) -> List[ImportReference]:
        index = PathIndex(file.path for file in files)
        references: List[ImportReference] = []
        for file in files:
            if not is_source_path(file.path):
                continue
            for specifier, clause in iter_relative_imports(file):
                if _BINARY_ASSET.search(specifier):
                    self._logger.debug("Skipping asset import %s in %s", specifier, file.path)
                    continue
                candidate = resolve_candidate(file.path, specifier)
                references.append(
                    ImportReference(
                        source_file=file.path,
                        raw_specifier=specifier,
                        imported_name=imported_symbol(clause, specifier),
                        candidate_path=candidate,
                        names=list(clause.named),
                        resolved_path=index.lookup(candidate),
                    )
                )
        return references

    def validate(self, files: Sequence[SourceFile]) -> ImportValidationResult:
        references = self.references(files)
        missing = [
            MissingImport(
                source_file=reference.source_file,
                raw_specifier=reference.raw_specifier,
                imported_name=reference.imported_name,
                suggested_path=suggested_path(reference.candidate_path),
                names=list(reference.names),
            )
            for reference in references
            if reference.resolved_path is None
        ]
        for item in missing:
            self._logger.info(
                "Missing import %s in %s (expected %s)",
                item.raw_specifier,
                item.source_file,
                item.suggested_path,
            )
        return ImportValidationResult(
            valid=not missing, missing_imports=missing, references=references
        )


__all__ = [
    "ImportClause",
    "ImportResolver",
    "ImportValidationResult",
    "PathIndex",
    "imported_symbol",
    "iter_relative_imports",
    "parse_clause",
    "resolve_candidate",
    "suggested_path",
]
