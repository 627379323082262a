"""
Installed Snapshot
==================

Loads the packages Composer actually installed.

Supported documents:
- vendor/composer/installed.json, Composer 1 (a list of packages)
- vendor/composer/installed.json, Composer 2 ({"packages": [...]})
- composer.lock ({"packages": [...], "packages-dev": [...]})

A missing or malformed snapshot is an error, never "nothing installed".
"""

from pathlib import Path
from typing import Any, List, Union

from rootpack_common.errors import SnapshotError, ValidationError
from rootpack_common.logger import get_logger
from rootpack_schema import InstalledPackage

from .manifests import JsonManifestFile

logger = get_logger(__name__)


def parse_installed_packages(document: Any) -> List[InstalledPackage]:
    """
    Parse a decoded installed.json or composer.lock document.

    Raises:
        SnapshotError: If the document or any record is malformed
    """
    if isinstance(document, list):
        records = document
    elif isinstance(document, dict):
        if "packages" not in document:
            raise SnapshotError("Installed snapshot has no 'packages' key")
        records = document["packages"]
        if not isinstance(records, list):
            raise SnapshotError("Installed snapshot 'packages' must be a list")
        dev_records = document.get("packages-dev") or []
        if not isinstance(dev_records, list):
            raise SnapshotError("Installed snapshot 'packages-dev' must be a list")
        records = records + dev_records
    else:
        raise SnapshotError(
            f"Installed snapshot must be a list or an object, got {type(document).__name__}"
        )

    return [InstalledPackage.from_record(record) for record in records]


def load_installed_packages(path: Union[str, Path]) -> List[InstalledPackage]:
    """
    Load installed packages from a snapshot file.

    Raises:
        NotFoundError: If the snapshot does not exist
        SnapshotError: If it is not valid JSON or is malformed
    """
    try:
        document = JsonManifestFile.read(path)
    except ValidationError as e:
        raise SnapshotError(e.message)

    packages = parse_installed_packages(document)
    logger.debug("Loaded installed snapshot", path=str(path), packages=len(packages))
    return packages
