"""Dependency manifest reconciliation."""

from .packages import ALLOWED_PACKAGES, KNOWN_PACKAGES, base_manifest, is_allowed_import, package_root
from .reconciler import DependencyReconciler, ReconcileResult

__all__ = [
    "ALLOWED_PACKAGES",
    "DependencyReconciler",
    "KNOWN_PACKAGES",
    "ReconcileResult",
    "base_manifest",
    "is_allowed_import",
    "package_root",
]
