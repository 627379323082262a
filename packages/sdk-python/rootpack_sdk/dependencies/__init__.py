"""
rootpack Dependency Engine
==========================

Provides:
- Merging component manifests under first-wins rules
- Building the root composer.json
- Reconciling the root manifest against installed packages
"""

from .builder import AlterHook, RootManifestBuilder, filter_platform_packages
from .merger import ManifestMerger, MergedRequirementSet
from .reconciler import PackageReconciler, installed_version
from .stability import resolve_minimum_stability, resolve_prefer_stable, stability_rank

__all__ = [
    # Stability
    "resolve_minimum_stability",
    "resolve_prefer_stable",
    "stability_rank",
    # Merging
    "ManifestMerger",
    "MergedRequirementSet",
    # Building
    "AlterHook",
    "RootManifestBuilder",
    "filter_platform_packages",
    # Reconciliation
    "PackageReconciler",
    "installed_version",
]
