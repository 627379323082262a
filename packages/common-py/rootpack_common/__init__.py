"""
rootpack Common Package

Shared utilities and primitives used across all rootpack packages.

This package provides:
- Exception classes for consistent error handling
- Constants for stability ranks, root package identity and defaults
- A structured logger
- Settings loaded from the environment and rootpack.yaml

Usage:
    from rootpack_common import ValidationError, get_logger, load_settings

    settings = load_settings("/var/www/drupal")
    logger = get_logger(__name__)
"""

# Error classes
from .errors import (
    RootpackError,
    ValidationError,
    NotFoundError,
    SnapshotError,
    LockTimeoutError,
    ManifestWriteError,
    ResolverError,
)

# Constants
from .constants import (
    ROOTPACK_VERSION,
    STABILITY_RANKS,
    DEFAULT_MINIMUM_STABILITY,
    DEFAULT_PREFER_STABLE,
    AUTOLOAD_MAPPING_STYLES,
    AUTOLOAD_LIST_STYLES,
    NAMESPACE_SEPARATOR,
    UNRELEASED_VERSION,
    LOG_LEVELS,
    RootPackage,
    Scripts,
    Defaults,
)

# Logger
from .logger import (
    RootpackLogger,
    get_logger,
    configure_logging,
    set_operation_id,
    get_operation_id,
    clear_operation_id,
)

# Settings
from .config import RootpackSettings, load_settings

__version__ = ROOTPACK_VERSION

__all__ = [
    # Errors
    "RootpackError",
    "ValidationError",
    "NotFoundError",
    "SnapshotError",
    "LockTimeoutError",
    "ManifestWriteError",
    "ResolverError",
    # Constants
    "ROOTPACK_VERSION",
    "STABILITY_RANKS",
    "DEFAULT_MINIMUM_STABILITY",
    "DEFAULT_PREFER_STABLE",
    "AUTOLOAD_MAPPING_STYLES",
    "AUTOLOAD_LIST_STYLES",
    "NAMESPACE_SEPARATOR",
    "UNRELEASED_VERSION",
    "LOG_LEVELS",
    "RootPackage",
    "Scripts",
    "Defaults",
    # Logger
    "RootpackLogger",
    "get_logger",
    "configure_logging",
    "set_operation_id",
    "get_operation_id",
    "clear_operation_id",
    # Settings
    "RootpackSettings",
    "load_settings",
]
