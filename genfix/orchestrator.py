"""Pipeline orchestration: extract, translate, repair, resolve, reconcile, validate."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .config import EscalationConfig, GenFixConfig
from .dependencies import DependencyReconciler
from .extractor import FileExtractor
from .failsafe import StubGenerator
from .llm import CodeFixer, EscalationRequest, EscalationResponse, LLMRunner
from .logging import get_logger
from .models import SourceFile, ValidationFinding, is_source_path, merge_files
from .repair import SyntaxRepairer
from .resolver import ImportResolver, complete_imports
from .translator import PathTranslator
from .validators import IntegrityValidator, SyntaxValidator, Validator


@dataclass
class PipelineResult:
    """Output of one pipeline run."""

    files: List[SourceFile]
    findings: List[ValidationFinding] = field(default_factory=list)
    stubs_generated: int = 0
    fixes_by_file: Dict[str, List[str]] = field(default_factory=dict)
    added_packages: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    escalation: Optional[EscalationResponse] = None
    moved: Dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.findings

    def summary(self) -> Dict[str, object]:
        """JSON-serialisable overview of the run."""
        escalation: Optional[Dict[str, object]] = None
        if self.escalation is not None:
            escalation = {
                "fixed": [file.path for file in self.escalation.fixed],
                "error": self.escalation.error,
            }
        return {
            "files": len(self.files),
            "valid": self.valid,
            "stubs_generated": self.stubs_generated,
            "fixes": sum(len(fixes) for fixes in self.fixes_by_file.values()),
            "fixes_by_file": {path: list(fixes) for path, fixes in self.fixes_by_file.items()},
            "added_packages": dict(self.added_packages),
            "findings": {finding.path: list(finding.messages) for finding in self.findings},
            "warnings": list(self.warnings),
            "moved": dict(self.moved),
            "escalation": escalation,
        }


class Pipeline:
    """Coordinates the repair stages over an in-memory file set."""

    def __init__(
        self,
        config: GenFixConfig | None = None,
        *,
        extractor: FileExtractor | None = None,
        translator: PathTranslator | None = None,
        repairer: SyntaxRepairer | None = None,
        resolver: ImportResolver | None = None,
        stub_generator: StubGenerator | None = None,
        reconciler: DependencyReconciler | None = None,
        validators: Optional[Iterable[Validator]] = None,
        fixer: CodeFixer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger("pipeline")
        self.extractor = extractor or FileExtractor()
        self.translator = translator or PathTranslator()
        disabled = config.repair.disabled_passes if config else []
        self.repairer = repairer or SyntaxRepairer(disabled=disabled)
        self.resolver = resolver or ImportResolver()
        self.stub_generator = stub_generator or StubGenerator()
        known = config.dependencies.known_packages if config else None
        self.reconciler = reconciler or DependencyReconciler(known)
        self.syntax_validator = SyntaxValidator()
        if validators is not None:
            self.validators: List[Validator] = list(validators)
        else:
            self.validators = [self.syntax_validator, IntegrityValidator()]
        self._fixer = fixer

    @property
    def escalation_config(self) -> EscalationConfig:
        return self.config.escalation if self.config else EscalationConfig()

    def run_text(self, text: str, **options: object) -> PipelineResult:
        """Extract files from LLM output and run the full pipeline on them."""
        files = self.extractor.extract(text)
        self.logger.info("Extracted %d file(s)", len(files))
        return self.run_files(files, **options)  # type: ignore[arg-type]

    def run_files(
        self,
        files: Sequence[SourceFile],
        *,
        escalate: Optional[bool] = None,
        strict_scope: Optional[bool] = None,
        allowed_paths: Optional[Sequence[str]] = None,
        abort: threading.Event | None = None,
    ) -> PipelineResult:
        """Run stages 2-6 and the optional escalation step."""
        settings = self.escalation_config
        if escalate is None:
            escalate = settings.enabled
        if strict_scope is None:
            strict_scope = settings.strict_scope

        current = merge_files(files)
        translated = self.translator.translate_files(current)
        moved = {
            before.path: after.path
            for before, after in zip(current, translated)
            if before.path != after.path
        }
        current = merge_files(translated)

        report = self.repairer.repair_files(current)
        current = report.files
        result = PipelineResult(
            files=current, fixes_by_file=dict(report.fixes_by_file), moved=moved
        )
        if moved:
            self.logger.info("Relocated %d file(s) to Vite paths", len(moved))
        result.warnings.extend(report.warnings)

        current = self._complete(current, result)
        current = self._reconcile(current, result)
        findings = self.validate(current)

        if escalate and findings:
            current = self._escalate(
                current,
                findings,
                result,
                strict_scope=strict_scope,
                allowed_paths=allowed_paths,
                abort=abort,
            )
            current = self._complete(current, result)
            current = self._reconcile(current, result)
            findings = self.validate(current)

        result.files = current
        result.findings = findings
        if findings:
            self.logger.warning("%d file(s) still have findings", len(findings))
        self.logger.info(
            "Pipeline finished: %d file(s), %d fix(es), %d stub(s)",
            len(current),
            sum(len(fixes) for fixes in result.fixes_by_file.values()),
            result.stubs_generated,
        )
        return result

    def validate(self, files: Sequence[SourceFile]) -> List[ValidationFinding]:
        """Run every validator and merge findings per path."""
        merged: Dict[str, List[str]] = {}
        for validator in self.validators:
            for finding in validator.validate(files):
                merged.setdefault(finding.path, []).extend(finding.messages)
        return [ValidationFinding(path=path, messages=messages) for path, messages in merged.items()]

    def _complete(self, files: List[SourceFile], result: PipelineResult) -> List[SourceFile]:
        completion = complete_imports(
            files, resolver=self.resolver, generator=self.stub_generator
        )
        result.stubs_generated += completion.stubs_generated
        return completion.files

    def _reconcile(self, files: List[SourceFile], result: PipelineResult) -> List[SourceFile]:
        reconciled = self.reconciler.reconcile(files)
        result.added_packages.update(reconciled.added)
        for specifier in reconciled.unsupported:
            message = f"Unsupported package import: {specifier}"
            if message not in result.warnings:
                result.warnings.append(message)
        return reconciled.files

    def _escalate(
        self,
        files: List[SourceFile],
        findings: Sequence[ValidationFinding],
        result: PipelineResult,
        *,
        strict_scope: bool,
        allowed_paths: Optional[Sequence[str]],
        abort: threading.Event | None,
    ) -> List[SourceFile]:
        fixer = self._resolve_fixer()
        flagged = {finding.path: list(finding.messages) for finding in findings}
        outgoing = [file for file in files if file.path in flagged and is_source_path(file.path)]
        if not outgoing:
            return files

        request = EscalationRequest(
            files=outgoing,
            strict_scope=strict_scope,
            allowed_paths=allowed_paths,
            findings=flagged,
        )
        response = fixer.escalate(request, abort=abort)
        result.escalation = response
        result.warnings.extend(response.warnings)
        if response.error:
            result.warnings.append(f"Escalation failed: {response.error}")

        by_path = {file.path: index for index, file in enumerate(files)}
        updated = list(files)
        for fixed in response.fixed:
            index = by_path.get(fixed.path)
            if index is None:
                continue
            before = self.syntax_validator.check(updated[index].content, fixed.path)
            after = self.syntax_validator.check(fixed.content, fixed.path)
            if len(after.errors) > len(before.errors):
                self.logger.warning(
                    "Rejected escalated %s: %d error(s) vs %d locally",
                    fixed.path,
                    len(after.errors),
                    len(before.errors),
                )
                continue
            updated[index] = fixed.to_source()
            result.fixes_by_file.setdefault(fixed.path, []).extend(fixed.fixes)
        return updated

    def _resolve_fixer(self) -> CodeFixer:
        if self._fixer is None:
            settings = self.escalation_config
            runner_kwargs: Dict[str, object] = {}
            if settings.base_url:
                runner_kwargs["base_url"] = settings.base_url
            if settings.api_key:
                runner_kwargs["api_key"] = settings.api_key
            if settings.temperature is not None:
                runner_kwargs["temperature"] = settings.temperature
            if settings.max_tokens is not None:
                runner_kwargs["max_tokens"] = settings.max_tokens
            if settings.request_timeout is not None:
                runner_kwargs["request_timeout"] = settings.request_timeout
            runner = LLMRunner(settings.model, **runner_kwargs)  # type: ignore[arg-type]
            timeout = (settings.request_timeout or 90.0) + 30.0
            self._fixer = CodeFixer(runner, batch_size=settings.batch_size, timeout=timeout)
        return self._fixer


__all__ = ["Pipeline", "PipelineResult"]
