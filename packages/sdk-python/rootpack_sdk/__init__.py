"""rootpack SDK - Composer dependency management for Drupal extensions.

This package provides tools for:
- Discovering extensions and loading their composer.json
- Merging them with the core manifest into the root composer.json
- Reconciling the root manifest with the packages Composer installed
- Regenerating the root manifest safely and running Composer

Example:
    >>> from rootpack_sdk import PackageManager
    >>> manager = PackageManager()
    >>> manager.rebuild_root_package()
    >>> manager.needs_update()

Package Structure:
    rootpack_sdk/
    ├── dependencies/   - Merger, builder and reconciler
    ├── utils/          - App root detection, locking, resolver runner
    ├── discovery.py    - Extension discovery
    ├── installed.py    - Installed snapshot loading
    ├── manifests.py    - JSON manifest files
    └── package_manager.py
"""

from rootpack_common import ROOTPACK_VERSION

# Dependency engine
from .dependencies import (
    AlterHook,
    ManifestMerger,
    MergedRequirementSet,
    PackageReconciler,
    RootManifestBuilder,
    filter_platform_packages,
    resolve_minimum_stability,
    resolve_prefer_stable,
)

# Files and discovery
from .discovery import DiscoveredExtension, ExtensionDiscovery, load_extension_packages
from .installed import load_installed_packages, parse_installed_packages
from .manifests import JsonManifestFile, encode_document

# Orchestration
from .package_manager import PackageManager

# Utilities
from .utils import ComposerRunner, ExclusionLock, FileLock, NullLock, ResolverResult, find_app_root

__version__ = ROOTPACK_VERSION

__all__ = [
    # Dependency engine
    "AlterHook",
    "ManifestMerger",
    "MergedRequirementSet",
    "PackageReconciler",
    "RootManifestBuilder",
    "filter_platform_packages",
    "resolve_minimum_stability",
    "resolve_prefer_stable",
    # Files and discovery
    "DiscoveredExtension",
    "ExtensionDiscovery",
    "load_extension_packages",
    "load_installed_packages",
    "parse_installed_packages",
    "JsonManifestFile",
    "encode_document",
    # Orchestration
    "PackageManager",
    # Utilities
    "ComposerRunner",
    "ExclusionLock",
    "FileLock",
    "NullLock",
    "ResolverResult",
    "find_app_root",
]
