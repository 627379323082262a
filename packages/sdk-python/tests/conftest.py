"""Pytest configuration and fixtures for SDK tests.

This conftest.py ensures tests work for both developers (editable install)
and users (pip installed package).
"""
import shutil
import sys
from datetime import datetime, timezone

import pytest
from pathlib import Path

_TESTS_ROOT = str(Path(__file__).parent)
if _TESTS_ROOT not in sys.path:
    # fixtures/ is imported by test modules at collection time
    sys.path.insert(0, _TESTS_ROOT)


def pytest_configure(config):
    """Configure pytest with custom markers and path setup."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "requires_composer: marks tests that require the composer binary"
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_path():
    """Ensure the package root and tests directory are in the Python path.

    This makes fixtures importable whether tests are run from:
    - The package directory (packages/sdk-python)
    - The project root
    - Or after pip install
    """
    package_root = Path(__file__).parent.parent
    tests_root = Path(__file__).parent

    # Add package root to path for local development
    package_root_str = str(package_root)
    if package_root_str not in sys.path:
        sys.path.insert(0, package_root_str)

    # Add tests directory for fixture imports
    tests_root_str = str(tests_root)
    if tests_root_str not in sys.path:
        sys.path.insert(0, tests_root_str)

    yield


def pytest_collection_modifyitems(config, items):
    """Skip tests that need Composer when it is not installed."""
    has_composer = shutil.which("composer") is not None

    for item in items:
        if "requires_composer" in item.keywords and not has_composer:
            item.add_marker(pytest.mark.skip(reason="Composer not available"))


@pytest.fixture
def fixed_clock():
    """Clock returning the same instant on every call"""
    moment = datetime(2015, 3, 1, 12, 30, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def core_document():
    """Core manifest used by the builder tests"""
    return {
        "name": "drupal/core",
        "type": "drupal-core",
        "license": "GPL-2.0+",
        "require": {
            "sdboyer/gliph": "0.1.*",
            "symfony/class-loader": "2.6.*",
            "symfony/css-selector": "2.6.*",
            "symfony/dependency-injection": "2.6.*",
        },
        "autoload": {
            "psr-4": {"Drupal\\Core\\": "lib/Drupal/Core"},
            "files": ["lib/Drupal.php"],
        },
    }


@pytest.fixture
def extension_documents():
    """Extension manifests used by the builder tests, in discovery order"""
    return {
        "test1": {
            "name": "drupal/test1",
            "require": {
                "symfony/intl": "2.6.*",
                "php": "~5.5",
                "ext-intl": "*",
            },
            "minimum-stability": "rc",
            "repositories": [{"type": "pear", "url": "http://pear2.php.net"}],
        },
        "test2": {
            "name": "drupal/test2",
            "require": {
                "symfony/class-loader": "2.5.*",
                "symfony/config": "2.6.*",
            },
            "minimum-stability": "beta",
            "prefer-stable": False,
            "repositories": [{"type": "pear", "url": "http://pear2.php.net"}],
        },
        "test3": {
            "name": "drupal/test3",
            "repositories": [{"type": "composer", "url": "http://packages.example.com"}],
        },
    }


@pytest.fixture
def drupal_site(tmp_path):
    """A fixture app root with core, a profile and two modules"""
    from fixtures.drupal_site import build_site

    return build_site(tmp_path / "drupal")
