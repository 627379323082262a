"""
Package Manager
===============

Ties discovery, merging, building, writing and reconciliation together for
one app root.

Loaded documents (core manifest, extension manifests, installed snapshot)
and the reconciliation report are cached per instance; call ``reset`` to
pick up changes on disk.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rootpack_common import (
    Defaults,
    LockTimeoutError,
    RootpackSettings,
    clear_operation_id,
    load_settings,
    set_operation_id,
)
from rootpack_common.logger import get_logger
from rootpack_schema import (
    ComponentManifest,
    InstalledPackage,
    ReconciliationReport,
    RootManifest,
)

from .dependencies import PackageReconciler, RootManifestBuilder
from .discovery import ExtensionDiscovery, load_extension_packages
from .installed import load_installed_packages
from .manifests import JsonManifestFile
from .utils import ComposerRunner, ExclusionLock, FileLock, ResolverResult

logger = get_logger(__name__)


class PackageManager:
    """
    Manages the Composer packages of a Drupal app root.

    Args:
        settings: Settings for the app root (defaults to load_settings())
        builder: Root manifest builder
        lock: Exclusion lock guarding the write of the root manifest
        discovery: Extension discovery
        runner: Resolver runner
    """

    def __init__(
        self,
        settings: Optional[RootpackSettings] = None,
        builder: Optional[RootManifestBuilder] = None,
        lock: Optional[ExclusionLock] = None,
        discovery: Optional[ExtensionDiscovery] = None,
        runner: Optional[ComposerRunner] = None,
    ):
        self.settings = settings or load_settings()
        self.root = Path(self.settings.root)
        self.builder = builder or RootManifestBuilder(self.root, core_subdir=self.settings.core_subdir)
        self.lock = lock or FileLock(self.root)
        self.discovery = discovery or ExtensionDiscovery(self.root)
        self.runner = runner or ComposerRunner(
            self.root,
            binary=self.settings.resolver_binary,
            timeout=self.settings.resolver_timeout,
        )

        self._core_package: Optional[ComponentManifest] = None
        self._extension_packages: Optional[Dict[str, ComponentManifest]] = None
        self._installed_packages: Optional[List[InstalledPackage]] = None
        self._required_packages: Optional[ReconciliationReport] = None

        self.last_root_package: Optional[RootManifest] = None
        self.root_package_written = False

    def reset(self) -> None:
        """Drop every cached document."""
        self._core_package = None
        self._extension_packages = None
        self._installed_packages = None
        self._required_packages = None

    def get_core_package(self) -> ComponentManifest:
        """
        Load the core manifest (composer.core.json).

        Raises:
            NotFoundError: If the core manifest does not exist
            ValidationError: If it is not a valid manifest
        """
        if self._core_package is None:
            path = self.settings.core_manifest_path
            self._core_package = ComponentManifest.from_document(JsonManifestFile.read(path))
            logger.debug("Loaded core manifest", path=str(path), name=self._core_package.name)
        return self._core_package

    def get_extension_packages(self) -> Dict[str, ComponentManifest]:
        """Manifests of discovered extensions keyed by extension name."""
        if self._extension_packages is None:
            extensions = self.discovery.scan()
            self._extension_packages = load_extension_packages(self.root, extensions)
            logger.info(
                "Loaded extension manifests",
                extensions=len(extensions),
                manifests=len(self._extension_packages),
            )
        return self._extension_packages

    def get_installed_packages(self) -> List[InstalledPackage]:
        """
        Load the installed snapshot.

        Raises:
            NotFoundError: If the snapshot does not exist
            SnapshotError: If it is malformed
        """
        if self._installed_packages is None:
            self._installed_packages = load_installed_packages(self.settings.installed_snapshot_path)
        return self._installed_packages

    def get_root_package(self) -> RootManifest:
        """Build a fresh root manifest; the one on disk may be out of date."""
        root_package = self.builder.build(
            self.get_core_package(),
            list(self.get_extension_packages().values()),
        )
        self.last_root_package = root_package
        return root_package

    def get_required_packages(self) -> ReconciliationReport:
        """Reconcile the root manifest against the installed snapshot."""
        if self._required_packages is None:
            reconciler = PackageReconciler(
                self.get_core_package(),
                list(self.get_extension_packages().values()),
            )
            self._required_packages = reconciler.reconcile(
                self.get_root_package(),
                self.get_installed_packages(),
            )
        return self._required_packages

    def needs_update(self) -> bool:
        """True if a package is missing or no longer required."""
        return self.get_required_packages().needs_update

    def rebuild_root_package(self) -> int:
        """
        Regenerate and write the root manifest.

        Only one process may do so at a time. It is rare that a conflict
        happens, so waiting is bounded by ``settings.lock_timeout``.

        Returns:
            Number of bytes written

        Raises:
            LockTimeoutError: If another process holds the lock (retryable)
            ManifestWriteError: If the manifest could not be written;
                ``last_root_package`` still holds the built manifest
        """
        self.root_package_written = False
        operation_id = set_operation_id()
        try:
            with self.lock.hold(Defaults.LOCK_NAME, self.settings.lock_timeout):
                root_package = self.get_root_package()
                written = JsonManifestFile.write(
                    self.settings.root_manifest_path,
                    root_package.to_document(),
                )
                self.root_package_written = True
        except LockTimeoutError:
            self.reset()
            raise
        finally:
            clear_operation_id()

        # The report depends on the manifest just written.
        self._required_packages = None
        logger.info(
            "Rebuilt root manifest",
            path=str(self.settings.root_manifest_path),
            bytes=written,
            operation_id=operation_id,
        )
        return written

    def run_resolver(self, command: str) -> ResolverResult:
        """
        Regenerate the root manifest, then run ``composer <command>``.

        Raises:
            ResolverError: If the resolver fails
        """
        self.rebuild_root_package()
        result = self.runner.run(command)
        # The installed snapshot changed on disk.
        self.reset()
        return result
