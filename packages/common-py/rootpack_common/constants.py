"""
rootpack Shared Constants

Single source of truth for fixed values used across rootpack packages:
stability ranks, identity of the generated root package, the maintenance
script bindings and the default file locations.

Usage:
    from rootpack_common.constants import STABILITY_RANKS, RootPackage

    if STABILITY_RANKS[a] < STABILITY_RANKS[b]:
        ...
"""

# =============================================================================
# VERSION INFORMATION
# =============================================================================

ROOTPACK_VERSION = "0.1.0"
"""Current rootpack release"""


# =============================================================================
# STABILITY
# =============================================================================

STABILITY_RANKS = {
    "dev": 0,
    "alpha": 1,
    "beta": 2,
    "RC": 3,
    "rc": 3,
    "stable": 4,
}
"""Minimum-stability flags ordered from least to most finished"""

DEFAULT_MINIMUM_STABILITY = "stable"
DEFAULT_PREFER_STABLE = True


# =============================================================================
# MANIFEST STRUCTURE
# =============================================================================

AUTOLOAD_MAPPING_STYLES = ("psr-0", "psr-4")
"""Autoload styles mapping a namespace to a path (or list of paths)"""

AUTOLOAD_LIST_STYLES = ("classmap", "files")
"""Autoload styles holding a flat list of paths"""

NAMESPACE_SEPARATOR = "/"
"""Package names without this separator are platform packages (php, ext-*)"""

UNRELEASED_VERSION = "dev-master"
"""Version marker of packages installed from a floating branch"""


class RootPackage:
    """Fixed properties of the generated root manifest."""

    NAME = "drupal/drupal"
    TYPE = "project"
    LICENSE = "GPL-2.0+"
    SELF_VERSION = "self.version"
    CORE_SUBDIR = "core"
    INTERNAL_LIBRARY_PREFIX = "lib/"
    PARENT_DIR_PREFIX = "../"
    INSTALLER_PACKAGE = "composer/installers"
    INSTALLER_CONSTRAINT = "^1.0.20"
    CONFIG = {
        "preferred-install": "dist",
        "autoloader-suffix": "Drupal8",
    }
    GENERATOR = "Generated by rootpack"
    SELF_NAMESPACE = "Drupal\\composer_manager\\Composer\\"


class Scripts:
    """Maintenance commands re-injected into the root manifest scripts."""

    POST_INSTALL = "post-install-cmd"
    REBUILD = "drupal-rebuild"
    INSTALL = "drupal-install"
    UPDATE = "drupal-update"

    BINDINGS = {
        POST_INSTALL: "rootpack status",
        REBUILD: "rootpack rebuild",
        INSTALL: "rootpack install",
        UPDATE: "rootpack update",
    }


# =============================================================================
# DEFAULT LOCATIONS AND TIMEOUTS
# =============================================================================


class Defaults:
    """Default file locations (relative to the app root) and bounds."""

    CORE_MANIFEST = "composer.core.json"
    ROOT_MANIFEST = "composer.json"
    INSTALLED_SNAPSHOT = "core/vendor/composer/installed.json"
    EXTENSION_MANIFEST = "composer.json"
    SETTINGS_FILE = "rootpack.yaml"
    LOCK_NAME = "rebuild_root_package"
    LOCK_TIMEOUT = 10.0
    LOCK_POLL_INTERVAL = 0.1
    RESOLVER_BINARY = "composer"
    RESOLVER_TIMEOUT = 600
    LOG_LEVEL = "info"


LOG_LEVELS = ["debug", "info", "warning", "error"]
"""Valid log levels for configuration"""
