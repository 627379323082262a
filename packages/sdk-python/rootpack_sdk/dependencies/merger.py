"""
Manifest Merger
===============

Combines the core manifest and every component manifest into one set of
requirements.

Merge Rules:
1. The core manifest is processed first, then components in discovery order
2. Link properties (require, require-dev, conflict, replace, provide,
   suggest): the first contributor of a package wins, later ones are ignored
3. Repositories are deduplicated by structural equality, first seen first
4. minimum-stability resolves to the lowest declared flag
5. prefer-stable resolves to False if anyone declares False
6. Autoload entries are unioned; component paths are prefixed with the
   component directory when it is known

Components without a name, or without any require/require-dev entry, are
skipped and do not count as sources.
"""

import copy
import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from rootpack_common.logger import get_logger
from rootpack_schema import MAPPING_FIELDS, ComponentManifest

from .stability import resolve_minimum_stability, resolve_prefer_stable

logger = get_logger(__name__)


@dataclass
class MergedRequirementSet:
    """Accumulated properties of all contributing manifests."""

    requirements: Dict[str, str] = field(default_factory=dict)
    dev_requirements: Dict[str, str] = field(default_factory=dict)
    conflicts: Dict[str, str] = field(default_factory=dict)
    replacements: Dict[str, str] = field(default_factory=dict)
    provides: Dict[str, str] = field(default_factory=dict)
    suggestions: Dict[str, str] = field(default_factory=dict)
    repositories: List[Any] = field(default_factory=list)
    autoload: Dict[str, Any] = field(default_factory=dict)
    minimum_stability: str = "stable"
    prefer_stable: bool = True

    # Names of the manifests that contributed, core first
    sources: List[str] = field(default_factory=list)


class ManifestMerger:
    """
    Merges component manifests into a MergedRequirementSet.

    The merger keeps no state between calls; the same inputs always produce
    an equal result.
    """

    def merge(
        self,
        base: ComponentManifest,
        components: Sequence[ComponentManifest],
    ) -> MergedRequirementSet:
        """
        Merge the base manifest and the component manifests.

        Args:
            base: The core manifest, always the highest priority contributor
            components: Component manifests in discovery order

        Returns:
            MergedRequirementSet with first-wins links and resolved flags
        """
        result = MergedRequirementSet()
        stabilities: List[Optional[str]] = []
        prefer_stables: List[Optional[bool]] = []

        contributors = [base]
        for component in components:
            if not component.is_mergeable:
                logger.debug(
                    "Skipping component without name or requirements",
                    component=component.name or component.path or "<unnamed>",
                )
                continue
            contributors.append(component)

        for index, manifest in enumerate(contributors):
            if manifest.name:
                result.sources.append(manifest.name)

            for field_name in MAPPING_FIELDS:
                self._merge_links(getattr(result, field_name), getattr(manifest, field_name))

            for repository in manifest.repositories or []:
                if repository not in result.repositories:
                    result.repositories.append(copy.deepcopy(repository))

            # The base autoload is rebased by the builder, not here.
            prefix = manifest.path if index > 0 else None
            self._merge_autoload(result.autoload, manifest.autoload, prefix)

            stabilities.append(manifest.minimum_stability)
            prefer_stables.append(manifest.prefer_stable)

        result.minimum_stability = resolve_minimum_stability(stabilities)
        result.prefer_stable = resolve_prefer_stable(prefer_stables)

        logger.debug(
            "Merged manifests",
            sources=len(result.sources),
            requirements=len(result.requirements),
            dev_requirements=len(result.dev_requirements),
        )
        return result

    @staticmethod
    def _merge_links(target: Dict[str, str], links: Dict[str, str]) -> None:
        for package_name, constraint in links.items():
            if package_name not in target:
                target[package_name] = constraint

    @classmethod
    def _merge_autoload(
        cls,
        target: Dict[str, Any],
        autoload: Dict[str, Any],
        prefix: Optional[str],
    ) -> None:
        for style, entries in autoload.items():
            if isinstance(entries, dict):
                merged = target.setdefault(style, {})
                for namespace, paths in entries.items():
                    merged[namespace] = cls._prefix_paths(paths, prefix)
            elif isinstance(entries, list):
                merged_list = target.setdefault(style, [])
                for path in cls._prefix_paths(entries, prefix):
                    if path not in merged_list:
                        merged_list.append(path)
            else:
                target[style] = copy.deepcopy(entries)

    @classmethod
    def _prefix_paths(cls, paths: Any, prefix: Optional[str]) -> Any:
        if isinstance(paths, list):
            return [cls._prefix_paths(path, prefix) for path in paths]
        if not prefix or not isinstance(paths, str):
            return copy.deepcopy(paths)
        return posixpath.join(prefix.rstrip("/"), paths)
