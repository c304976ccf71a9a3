"""Read-only validators for generated project files."""

from .base import ScanCounts, ValidationResult, Validator, scan_source
from .integrity import IntegrityValidator, collect_exports
from .syntax import SyntaxValidator, validate_files

__all__ = [
    "IntegrityValidator",
    "ScanCounts",
    "SyntaxValidator",
    "ValidationResult",
    "Validator",
    "collect_exports",
    "scan_source",
    "validate_files",
]
