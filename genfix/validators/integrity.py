"""Cross-file check that imported names are actually exported."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set

from ..logging import get_logger
from ..models import SourceFile, ValidationFinding, is_source_path
from ..resolver.imports import PathIndex, iter_relative_imports, resolve_candidate

_DEFAULT_EXPORT = re.compile(r"\bexport\s+default\b|\bas\s+default\b")
_DECLARED_EXPORT = re.compile(
    r"\bexport\s+(?:declare\s+)?(?:async\s+)?(?:function\*?|const|let|var|class|interface|type|enum|abstract\s+class)\s+([\w$]+)"
)
_EXPORT_LIST = re.compile(r"\bexport\s+(?:type\s+)?\{([^}]*)\}")
_EXPORT_ALL = re.compile(r"\bexport\s+\*\s+from\b")


@dataclass
class ModuleExports:
    """Names a module makes available to importers."""

    default: bool = False
    names: Set[str] = field(default_factory=set)
    wildcard: bool = False


def collect_exports(content: str) -> ModuleExports:
    exports = ModuleExports(default=bool(_DEFAULT_EXPORT.search(content)))
    exports.names.update(_DECLARED_EXPORT.findall(content))
    for group in _EXPORT_LIST.findall(content):
        for item in group.split(","):
            item = re.sub(r"^\s*type\s+", "", item).strip()
            if item:
                exports.names.add(re.split(r"\s+as\s+", item)[-1].strip())
    exports.wildcard = bool(_EXPORT_ALL.search(content))
    return exports


class IntegrityValidator:
    """Flag named or default imports the target module does not export."""

    name = "integrity"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("validate")

    def validate(self, files: Sequence[SourceFile]) -> List[ValidationFinding]:
        by_path: Dict[str, SourceFile] = {file.path: file for file in files}
        index = PathIndex(by_path)
        exports_cache: Dict[str, ModuleExports] = {}
        findings: List[ValidationFinding] = []

        for file in files:
            if not is_source_path(file.path):
                continue
            messages: List[str] = []
            for specifier, clause in iter_relative_imports(file):
                target_path = index.lookup(resolve_candidate(file.path, specifier))
                if target_path is None or not is_source_path(target_path):
                    continue
                if target_path not in exports_cache:
                    exports_cache[target_path] = collect_exports(by_path[target_path].content)
                exports = exports_cache[target_path]
                if clause.default and not exports.default:
                    messages.append(
                        f"Default import '{clause.default}' from '{specifier}' but {target_path} has no default export"
                    )
                if exports.wildcard:
                    continue
                for name in clause.named:
                    if name not in exports.names:
                        messages.append(f"'{name}' is not exported by {target_path}")
            if messages:
                self._logger.debug("%s: %s", file.path, "; ".join(messages))
                findings.append(ValidationFinding(path=file.path, messages=messages))
        return findings


__all__ = ["IntegrityValidator", "ModuleExports", "collect_exports"]
