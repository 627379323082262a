"""Pytest configuration and fixtures for common-py tests.

This conftest.py ensures tests work for both developers (editable install)
and users (pip installed package).
"""
import logging
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
    - The package directory (packages/common-py)
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
def clean_env(monkeypatch):
    """Remove every ROOTPACK_* variable for tests that read settings."""
    import os
    for key in list(os.environ):
        if key.startswith("ROOTPACK_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def reset_rootpack_logging():
    """Restore the rootpack logger after tests that configure it."""
    root = logging.getLogger("rootpack")
    handlers = list(root.handlers)
    level = root.level
    propagate = root.propagate
    yield
    root.handlers = handlers
    root.setLevel(level)
    root.propagate = propagate
