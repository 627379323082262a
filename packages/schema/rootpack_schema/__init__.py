"""
rootpack Schema Package

Pydantic models for Composer manifests, the installed-package snapshot and
the reconciliation report.
"""

from rootpack_common import ValidationError, SnapshotError

from .composer_v1 import (
    MAPPING_FIELDS,
    ComponentManifest,
    RootManifest,
    InstalledPackage,
    ReconciledPackage,
    ReconciliationReport,
    is_platform_package,
)

__all__ = [
    "MAPPING_FIELDS",
    "ComponentManifest",
    "RootManifest",
    "InstalledPackage",
    "ReconciledPackage",
    "ReconciliationReport",
    "is_platform_package",
    "ValidationError",
    "SnapshotError",
]
