"""Ordered syntax repair over one or many files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from ..logging import get_logger
from ..models import SourceFile, is_source_path
from .base import RepairPass
from .cleanup import CleanupPass
from .exports import ExportCheckPass
from .imports import ImportHygienePass
from .markup import ClassNamePass, SelfClosingPass
from .templates import AttributeLeakagePass, TemplateLiteralPass
from .truncation import TruncationPass


def default_passes(logger: logging.Logger | None = None) -> List[RepairPass]:
    """Passes in execution order; template rebuilding must precede markup fixes."""
    return [
        TemplateLiteralPass(),
        AttributeLeakagePass(),
        SelfClosingPass(),
        ClassNamePass(),
        ImportHygienePass(),
        TruncationPass(),
        ExportCheckPass(logger=logger),
        CleanupPass(),
    ]


@dataclass
class RepairOutcome:
    """Repaired content for a single file."""

    path: str
    content: str
    fixes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class RepairReport:
    """Aggregate result of repairing a file set."""

    files: List[SourceFile]
    fixes_by_file: Dict[str, List[str]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def total_fixes(self) -> int:
        return sum(len(fixes) for fixes in self.fixes_by_file.values())


class SyntaxRepairer:
    """Runs the repair passes in a fixed order."""

    def __init__(
        self,
        passes: Sequence[RepairPass] | None = None,
        *,
        disabled: Iterable[str] = (),
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or get_logger("repair")
        selected = list(passes) if passes is not None else default_passes(self._logger)
        skipped = set(disabled)
        self.passes: Tuple[RepairPass, ...] = tuple(p for p in selected if p.name not in skipped)

    @property
    def pass_names(self) -> List[str]:
        return [repair_pass.name for repair_pass in self.passes]

    def repair(self, path: str, content: str) -> RepairOutcome:
        outcome = RepairOutcome(path=path, content=content)
        if not is_source_path(path):
            return outcome
        for repair_pass in self.passes:
            if not repair_pass.supports(path):
                continue
            result = repair_pass.apply(outcome.content, path)
            outcome.content = result.content
            outcome.fixes.extend(result.fixes)
            outcome.warnings.extend(result.warnings)
        if outcome.fixes:
            self._logger.debug("%s: %d fix(es)", path, len(outcome.fixes))
        return outcome

    def repair_files(self, files: Iterable[SourceFile]) -> RepairReport:
        report = RepairReport(files=[])
        for file in files:
            outcome = self.repair(file.path, file.content)
            report.files.append(file.with_content(outcome.content))
            if outcome.fixes:
                report.fixes_by_file[file.path] = outcome.fixes
            report.warnings.extend(outcome.warnings)
        if report.fixes_by_file:
            self._logger.info(
                "Applied %d fix(es) across %d file(s)",
                report.total_fixes,
                len(report.fixes_by_file),
            )
        return report


def repair_content(path: str, content: str) -> RepairOutcome:
    """Repair a single file with the default passes."""
    return SyntaxRepairer().repair(path, content)


__all__ = ["RepairOutcome", "RepairReport", "SyntaxRepairer", "default_passes", "repair_content"]
