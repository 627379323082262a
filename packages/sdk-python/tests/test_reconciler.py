"""
Tests for PackageReconciler.
"""

import pytest

from fixtures.drupal_site import (
    CORE_PACKAGE,
    EXTENSION_PACKAGES,
    INSTALLED_PACKAGES,
    ROOT_PACKAGE,
    YAML_REFERENCE,
)
from rootpack_schema import ComponentManifest, InstalledPackage, RootManifest
from rootpack_sdk.dependencies import PackageReconciler, RootManifestBuilder, installed_version


def installed(records):
    return [InstalledPackage.from_record(record) for record in records]


def root(require):
    return RootManifest(
        name="drupal/drupal",
        type="project",
        license="GPL-2.0+",
        require=require,
        minimum_stability="stable",
        prefer_stable=True,
    )


@pytest.fixture
def reconciler():
    return PackageReconciler(
        ComponentManifest.from_document(CORE_PACKAGE),
        [ComponentManifest.from_document(document) for document in EXTENSION_PACKAGES.values()],
    )


@pytest.fixture
def report(reconciler):
    return reconciler.reconcile(
        RootManifest.from_document(ROOT_PACKAGE),
        installed(INSTALLED_PACKAGES),
    )


class TestRequiredPackages:
    """Reconciling the fixture site"""

    def test_full_report(self, report):
        assert report.to_dict() == {
            "symfony/config": {
                "constraint": "2.6.*",
                "description": "",
                "homepage": "",
                "require": {},
                "required_by": ["drupal/test2"],
                "version": "",
            },
            "symfony/css-selector": {
                "constraint": "2.6.*",
                "description": "",
                "homepage": "",
                "require": {},
                "required_by": ["drupal/commerce_kickstart"],
                "version": "",
            },
            "symfony/dependency-injection": {
                "constraint": "2.6.*",
                "description": "Symfony DependencyInjection Component",
                "homepage": "http://symfony.com",
                "require": {},
                "required_by": ["drupal/core"],
                "version": "v2.6.3",
            },
            "symfony/event-dispatcher": {
                "constraint": "",
                "description": "Symfony EventDispatcher Component",
                "homepage": "http://symfony.com",
                "require": {"symfony/yaml": "dev-master"},
                "required_by": [],
                "version": "v2.6.3",
            },
            "symfony/intl": {
                "constraint": "2.6.*",
                "description": "",
                "homepage": "",
                "require": {},
                "required_by": ["drupal/test1"],
                "version": "",
            },
            "symfony/yaml": {
                "constraint": "",
                "description": "",
                "homepage": "",
                "require": {},
                "required_by": ["symfony/event-dispatcher"],
                "version": f"dev-master#{YAML_REFERENCE}",
            },
        }

    def test_sorted_by_name(self, report):
        assert list(report) == sorted(report)

    def test_needs_update(self, report):
        assert report.needs_update
        assert report.missing() == ["symfony/config", "symfony/css-selector", "symfony/intl"]
        assert report.orphaned() == ["symfony/event-dispatcher", "symfony/yaml"]

    def test_every_required_package_present(self, report):
        for package_name in ROOT_PACKAGE["require"]:
            assert package_name in report

    def test_every_installed_package_present(self, report):
        for record in INSTALLED_PACKAGES:
            assert record["name"] in report


class TestScenarios:
    def test_missing_and_orphaned(self):
        reconciler = PackageReconciler(
            ComponentManifest.from_document({"name": "drupal/core", "require": {"symfony/css-selector": "2.6.*"}}),
            [
                ComponentManifest.from_document({"name": "drupal/a", "require": {"symfony/intl": "2.6.*"}}),
                ComponentManifest.from_document({"name": "drupal/b", "require": {"symfony/config": "2.6.*"}}),
            ],
        )
        report = reconciler.reconcile(
            root({
                "symfony/css-selector": "2.6.*",
                "symfony/intl": "2.6.*",
                "symfony/config": "2.6.*",
            }),
            installed([{"name": "symfony/dependency-injection", "version": "v2.6.3"}]),
        )

        assert len(report) == 4
        assert report.missing() == ["symfony/config", "symfony/css-selector", "symfony/intl"]
        assert report["symfony/dependency-injection"].constraint == ""
        assert report["symfony/dependency-injection"].version == "v2.6.3"
        assert report.needs_update

    def test_everything_installed(self):
        reconciler = PackageReconciler(
            ComponentManifest.from_document({"name": "drupal/core", "require": {"a/a": "1.*"}}),
            [],
        )
        report = reconciler.reconcile(
            root({"a/a": "1.*", "b/b": "2.*"}),
            installed([
                {"name": "a/a", "version": "1.2.0", "require": {"b/b": "2.*"}},
                {"name": "b/b", "version": "2.0.1"},
            ]),
        )

        # No manifest requires b/b directly; the transitive pass credits a/a.
        assert report["b/b"].required_by == ["a/a"]
        assert not report.needs_update

    def test_installer_pin_is_missing_not_orphaned(self, tmp_path):
        core = ComponentManifest.from_document({"name": "drupal/core", "require": {"a/a": "1.*"}})
        built = RootManifestBuilder(tmp_path).build(core, [])

        report = PackageReconciler(core, []).reconcile(
            built,
            installed([{"name": "a/a", "version": "1.2.0"}]),
        )

        assert report["composer/installers"].constraint == "^1.0.20"
        assert report["composer/installers"].required_by == []
        assert report.orphaned() == []
        assert report.missing() == ["composer/installers"]
        assert report.needs_update

    def test_first_component_only(self):
        """Only the first component requiring a package is recorded"""
        reconciler = PackageReconciler(
            ComponentManifest.from_document({"name": "drupal/core", "require": {}}),
            [
                ComponentManifest.from_document({"name": "drupal/a", "require": {"x/y": "1.*"}}),
                ComponentManifest.from_document({"name": "drupal/b", "require": {"x/y": "1.*"}}),
            ],
        )
        report = reconciler.reconcile(root({"x/y": "1.*"}), [])

        assert report["x/y"].required_by == ["drupal/a"]

    def test_core_takes_precedence(self):
        reconciler = PackageReconciler(
            ComponentManifest.from_document({"name": "drupal/core", "require": {"x/y": "1.*"}}),
            [ComponentManifest.from_document({"name": "drupal/a", "require": {"x/y": "1.*"}})],
        )
        report = reconciler.reconcile(root({"x/y": "1.*"}), [])

        assert report["x/y"].required_by == ["drupal/core"]

    def test_no_duplicate_dependents(self):
        reconciler = PackageReconciler(
            ComponentManifest.from_document({"name": "drupal/core", "require": {"a/a": "1.*", "b/b": "1.*"}}),
            [],
        )
        report = reconciler.reconcile(
            root({"a/a": "1.*", "b/b": "1.*"}),
            installed([
                {"name": "a/a", "version": "1.0.0", "require": {"b/b": "1.*"}},
                {"name": "b/b", "version": "1.0.0"},
            ]),
        )

        assert report["b/b"].required_by == ["drupal/core", "a/a"]

    def test_installed_require_sorted(self):
        reconciler = PackageReconciler(
            ComponentManifest.from_document({"name": "drupal/core", "require": {}}), [],
        )
        report = reconciler.reconcile(
            root({}),
            installed([{"name": "a/a", "version": "1.0.0", "require": {"z/z": "1", "php": ">=5.5", "m/m": "2"}}]),
        )

        assert list(report["a/a"].require) == ["m/m", "php", "z/z"]


class TestInstalledVersion:
    def test_unreleased_with_reference(self):
        package = InstalledPackage.from_record({
            "name": "drupal/lib",
            "version": "dev-master",
            "source": {"type": "git", "reference": "abc123"},
        })
        assert installed_version(package) == "dev-master#abc123"

    def test_unreleased_without_source(self):
        package = InstalledPackage.from_record({"name": "drupal/lib", "version": "dev-master"})
        assert installed_version(package) == "dev-master"

    def test_release(self):
        package = InstalledPackage.from_record({
            "name": "symfony/yaml",
            "version": "v2.6.4",
            "source": {"type": "git", "reference": "abc123"},
        })
        assert installed_version(package) == "v2.6.4"
