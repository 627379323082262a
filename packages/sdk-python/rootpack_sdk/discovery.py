"""
Extension Discovery
===================

Finds the Drupal extensions installed under an app root and loads the
composer.json of those that ship one.

Compared to Drupal's own discovery:
- core/ is never scanned, core already ships with its dependencies
- all (non-core) profiles are scanned for extensions
- all sites are scanned, so every site of a multisite gets its dependencies
- test extensions are ignored

Extensions are ordered by origin: profiles, sites/all, the root, then each
site directory. When two extensions share a name the one found in the later
search directory wins, so a site-specific copy overrides sites/all.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

import yaml
from rootpack_common import Defaults
from rootpack_common.logger import get_logger
from rootpack_schema import ComponentManifest

from .manifests import JsonManifestFile

logger = get_logger(__name__)

EXTENSION_TYPES = ("module", "profile")
INFO_SUFFIX = ".info.yml"
SKIPPED_DIRECTORIES = {"tests", "vendor", "node_modules"}

# Origin weights, lowest first
ORIGIN_PROFILE = 1
ORIGIN_SITES_ALL = 2
ORIGIN_ROOT = 3
ORIGIN_SITE = 10


@dataclass(frozen=True)
class DiscoveredExtension:
    """An extension found on disk; ``path`` is relative to the app root."""

    name: str
    type: str
    path: str
    origin: int


class ExtensionDiscovery:
    """
    Scans an app root for extensions.

    Args:
        root: The app root
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def scan(self) -> List[DiscoveredExtension]:
        """Return discovered extensions sorted by origin, later origins override."""
        found: Dict[str, DiscoveredExtension] = {}
        for origin, directory in self._search_directories():
            for extension in self._scan_directory(directory, origin):
                existing = found.get(extension.name)
                if existing is None or extension.origin > existing.origin:
                    found[extension.name] = extension
        extensions = sorted(found.values(), key=lambda extension: extension.origin)
        logger.debug("Discovered extensions", count=len(extensions))
        return extensions

    def get_site_directories(self) -> List[str]:
        """Site directories such as ['default', 'test.site.com'], without 'all'."""
        sites = self.root / "sites"
        if not sites.is_dir():
            return []
        return sorted(
            entry.name
            for entry in sites.iterdir()
            if entry.is_dir() and not entry.name.startswith(".") and entry.name != "all"
        )

    def _search_directories(self) -> List[Tuple[int, Path]]:
        directories = [
            (ORIGIN_PROFILE, self.root / "profiles"),
            (ORIGIN_SITES_ALL, self.root / "sites" / "all"),
            (ORIGIN_ROOT, self.root),
        ]
        for index, site in enumerate(self.get_site_directories()):
            directories.append((ORIGIN_SITE + index, self.root / "sites" / site))
        return directories

    def _scan_directory(self, directory: Path, origin: int) -> Iterator[DiscoveredExtension]:
        if not directory.is_dir():
            return
        for current, dirnames, filenames in os.walk(directory):
            current_path = Path(current)
            dirnames[:] = sorted(
                name for name in dirnames
                if not name.startswith(".")
                and name not in SKIPPED_DIRECTORIES
                and not (current_path == self.root and name in ("core", "sites", "profiles"))
            )
            for filename in sorted(filenames):
                if not filename.endswith(INFO_SUFFIX):
                    continue
                extension_type = self._read_type(current_path / filename)
                if extension_type not in EXTENSION_TYPES:
                    continue
                yield DiscoveredExtension(
                    name=filename[: -len(INFO_SUFFIX)],
                    type=extension_type,
                    path=current_path.relative_to(self.root).as_posix(),
                    origin=origin,
                )

    @staticmethod
    def _read_type(info_file: Path) -> Optional[str]:
        try:
            with open(info_file, "r", encoding="utf-8") as f:
                info = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable info file", path=str(info_file), error=str(e))
            return None
        if not isinstance(info, dict):
            return None
        return info.get("type")


def load_extension_packages(
    root: Union[str, Path],
    extensions: List[DiscoveredExtension],
) -> Dict[str, ComponentManifest]:
    """
    Load the composer.json of every extension that has one.

    Returns:
        Manifests keyed by extension name, in discovery order

    Raises:
        ValidationError: If a composer.json exists but is invalid
    """
    root_path = Path(root)
    packages: Dict[str, ComponentManifest] = {}
    for extension in extensions:
        filename = root_path / extension.path / Defaults.EXTENSION_MANIFEST
        if not JsonManifestFile.exists(filename):
            continue
        document = JsonManifestFile.read(filename)
        packages[extension.name] = ComponentManifest.from_document(document, path=extension.path)
        logger.debug("Loaded extension manifest", extension=extension.name, path=str(filename))
    return packages
