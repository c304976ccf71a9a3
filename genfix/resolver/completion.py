"""Resolve imports and fill every gap with a generated placeholder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..failsafe import StubGenerator
from ..models import SourceFile
from .imports import ImportResolver, ImportValidationResult


@dataclass
class CompletionResult:
    """Files after stub insertion plus the pre-insertion validation."""

    files: List[SourceFile]
    validation: ImportValidationResult
    stubs: List[SourceFile] = field(default_factory=list)

    @property
    def stubs_generated(self) -> int:
        return len(self.stubs)


def complete_imports(
    files: Sequence[SourceFile],
    *,
    resolver: ImportResolver | None = None,
    generator: StubGenerator | None = None,
) -> CompletionResult:
    """Validate relative imports and append one stub per missing target."""
    resolver = resolver or ImportResolver()
    validation = resolver.validate(files)
    if validation.valid:
        return CompletionResult(files=list(files), validation=validation)
    generator = generator or StubGenerator()
    stubs = generator.generate(
        validation.missing_imports, existing_paths=[file.path for file in files]
    )
    return CompletionResult(files=[*files, *stubs], validation=validation, stubs=stubs)


__all__ = ["CompletionResult", "complete_imports"]
