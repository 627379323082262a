"""
Workspace Utilities Module
==========================

Locates the Drupal app root, the directory holding composer.core.json.
"""

from pathlib import Path
from typing import Optional

from rootpack_common import Defaults
from rootpack_common.logger import get_logger

logger = get_logger(__name__)


def find_app_root(
    start_path: Optional[Path] = None,
    marker: str = Defaults.CORE_MANIFEST,
) -> Optional[Path]:
    """
    Find the app root containing the core manifest.

    Walks up the directory tree from start_path looking for ``marker``.
    Composer runs scripts from the app root, but rootpack may also be
    invoked from core/ or from inside an extension.

    Args:
        start_path: Starting directory (defaults to current working directory)
        marker: File identifying the app root

    Returns:
        Path to the app root, or None if not found
    """
    current = (start_path or Path.cwd()).resolve()

    for parent in [current] + list(current.parents):
        if (parent / marker).is_file():
            logger.debug("Found app root", root=str(parent))
            return parent

    return None
