"""Pytest configuration and fixtures for CLI tests.

This conftest.py ensures tests work for both developers (editable install)
and users (pip installed package).
"""
import json
import logging
import os
import sys
import pytest
from pathlib import Path
from typer.testing import CliRunner


def pytest_configure(config):
    """Configure pytest with custom markers and path setup."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_path():
    """Ensure the package root is in the Python path.

    This makes the package importable whether tests are run from:
    - The package directory (packages/cli)
    - The project root
    - Or after pip install
    """
    package_root = Path(__file__).parent.parent

    # Add package root to path for local development
    package_root_str = str(package_root)
    if package_root_str not in sys.path:
        sys.path.insert(0, package_root_str)

    yield


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch):
    """Isolate settings from the host and restore logging after each test."""
    for key in list(os.environ):
        if key.startswith("ROOTPACK_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("ROOTPACK_LOG_LEVEL", "warning")

    root_logger = logging.getLogger("rootpack")
    handlers = list(root_logger.handlers)
    yield
    root_logger.handlers = handlers


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def _write_json(path: Path, document) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document))


@pytest.fixture
def drupal_root(tmp_path):
    """An app root with one module and an installed snapshot missing its requirement."""
    root = tmp_path / "drupal"
    _write_json(root / "composer.core.json", {
        "name": "drupal/core",
        "type": "drupal-core",
        "require": {
            "composer/installers": "^1.0.21",
            "symfony/yaml": "2.6.*",
        },
    })
    module = root / "modules" / "mailer"
    module.mkdir(parents=True)
    (module / "mailer.info.yml").write_text("name: Mailer\ntype: module\n")
    _write_json(module / "composer.json", {
        "name": "drupal/mailer",
        "require": {"swiftmailer/swiftmailer": "~5.4"},
    })
    _write_json(root / "core" / "vendor" / "composer" / "installed.json", [
        {"name": "symfony/yaml", "version": "v2.6.4", "description": "Symfony Yaml Component"},
    ])
    return root


@pytest.fixture
def installed_root(drupal_root):
    """The app root after every required package has been installed."""
    _write_json(drupal_root / "core" / "vendor" / "composer" / "installed.json", [
        {"name": "symfony/yaml", "version": "v2.6.4"},
        {"name": "swiftmailer/swiftmailer", "version": "v5.4.1"},
        {"name": "composer/installers", "version": "v1.0.21"},
    ])
    return drupal_root
