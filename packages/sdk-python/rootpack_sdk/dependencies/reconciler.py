"""
Package Reconciliation
======================

Cross-references the root manifest's requirements with the resolver's
installed snapshot.

For every package that is either required or installed the report tells:
- constraint: the requested constraint ("" when nobody requires it anymore)
- description / homepage / require / version: installed data ("" if missing)
- required_by: the manifests and packages depending on it

required_by is built in two passes:
1. Direct: the core manifest if it requires the package, otherwise the
   first component manifest requiring it (later components are not
   recorded; the transitive pass partially compensates)
2. Transitive, one level: every package is recorded as a dependent of each
   of its own installed requirements
"""

from typing import Dict, List, Sequence

from rootpack_common import UNRELEASED_VERSION
from rootpack_common.logger import get_logger
from rootpack_schema import (
    ComponentManifest,
    InstalledPackage,
    ReconciledPackage,
    ReconciliationReport,
    RootManifest,
)

logger = get_logger(__name__)


def installed_version(package: InstalledPackage) -> str:
    """Version of an installed package, with the commit for unreleased ones."""
    version = package.version
    if version == UNRELEASED_VERSION and package.source_reference:
        version = f"{version}#{package.source_reference}"
    return version


class PackageReconciler:
    """
    Builds ReconciliationReport objects.

    Args:
        core_package: The core manifest
        extension_packages: Component manifests in discovery order
    """

    def __init__(
        self,
        core_package: ComponentManifest,
        extension_packages: Sequence[ComponentManifest],
    ):
        self.core_package = core_package
        self.extension_packages = list(extension_packages)

    def reconcile(
        self,
        root_package: RootManifest,
        installed_packages: Sequence[InstalledPackage],
    ) -> ReconciliationReport:
        """
        Reconcile the root manifest against the installed snapshot.

        Args:
            root_package: Freshly built root manifest
            installed_packages: Records of the installed snapshot

        Returns:
            ReconciliationReport sorted by package name
        """
        packages: Dict[str, ReconciledPackage] = {
            package_name: ReconciledPackage(constraint=constraint)
            for package_name, constraint in root_package.require.items()
        }

        for installed in installed_packages:
            entry = packages.get(installed.name)
            if entry is None:
                # No longer required; it will be removed by the next update.
                entry = packages[installed.name] = ReconciledPackage(constraint="")
            entry.description = installed.description
            entry.homepage = installed.homepage
            entry.require = dict(installed.require)
            entry.version = installed_version(installed)

        self._add_direct_dependents(packages)
        self._add_package_dependents(packages)

        report = ReconciliationReport(packages=self._normalize(packages))
        logger.info(
            "Reconciled packages",
            packages=len(report),
            missing=len(report.missing()),
            orphaned=len(report.orphaned()),
        )
        return report

    def _add_direct_dependents(self, packages: Dict[str, ReconciledPackage]) -> None:
        for package_name, entry in packages.items():
            if package_name in self.core_package.requirements:
                _append_unique(entry.required_by, self.core_package.name)
                continue
            for extension_package in self.extension_packages:
                if extension_package.name and package_name in extension_package.requirements:
                    _append_unique(entry.required_by, extension_package.name)
                    break

    @staticmethod
    def _add_package_dependents(packages: Dict[str, ReconciledPackage]) -> None:
        for package_name, entry in packages.items():
            for dependency_name in entry.require:
                dependency = packages.get(dependency_name)
                if dependency is not None:
                    _append_unique(dependency.required_by, package_name)

    @staticmethod
    def _normalize(packages: Dict[str, ReconciledPackage]) -> Dict[str, ReconciledPackage]:
        normalized: Dict[str, ReconciledPackage] = {}
        for package_name in sorted(packages):
            entry = packages[package_name]
            entry.require = {name: entry.require[name] for name in sorted(entry.require)}
            normalized[package_name] = entry
        return normalized


def _append_unique(values: List[str], value: str) -> None:
    if value and value not in values:
        values.append(value)
