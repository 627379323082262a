"""Pytest configuration and fixtures for schema tests.

This conftest.py ensures tests work for both developers (editable install)
and users (pip installed package).
"""
import sys
import pytest
from pathlib import Path


def pytest_configure(config):
    """Configure pytest with custom markers and path setup."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_path():
    """Ensure the package root is in the Python path.

    This makes the package importable whether tests are run from:
    - The package directory (packages/schema)
    - The project root
    - Or after pip install
    """
    package_root = Path(__file__).parent.parent

    # Add package root to path for local development
    package_root_str = str(package_root)
    if package_root_str not in sys.path:
        sys.path.insert(0, package_root_str)

    yield


@pytest.fixture
def extension_document():
    """composer.json of an extension with every supported section"""
    return {
        "name": "drupal/test1",
        "type": "drupal-module",
        "require": {
            "symfony/intl": "2.6.*",
            "php": ">=5.5.9",
        },
        "require-dev": {
            "phpunit/phpunit": "4.4.*",
        },
        "suggest": {
            "ext-intl": "Faster formatting",
        },
        "repositories": [
            {"type": "pear", "url": "https://pear2.php.net"},
        ],
        "autoload": {
            "psr-4": {"Drupal\\test1\\": "src/"},
            "classmap": ["lib/Legacy.php"],
        },
        "minimum-stability": "beta",
        "prefer-stable": False,
        "homepage": "https://www.drupal.org/project/test1",
    }


@pytest.fixture
def minimal_root_document():
    """Smallest valid root manifest document"""
    return {
        "name": "drupal/drupal",
        "type": "project",
        "license": "GPL-2.0+",
        "require": {"drupal/core": "~8.0"},
        "minimum-stability": "stable",
        "prefer-stable": True,
    }
