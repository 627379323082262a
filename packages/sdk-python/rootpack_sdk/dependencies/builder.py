"""
Root Manifest Builder
=====================

Builds the root composer.json from the core manifest and the component
manifests.

Build Steps:
1. Default the core's minimum-stability, prefer-stable and repositories
2. Merge all manifests (core first, see ManifestMerger)
3. Pin composer/installers so extensions can keep requiring Drupal projects
4. Drop platform packages (php, ext-*), which Drupal handles itself
5. Rebase core autoload paths to be relative to the app root
6. Compose identity, replace, config and provenance (extra)
7. Re-add rootpack's own autoload entry and maintenance scripts so they keep
   working after Composer consumes the new file
8. Run alteration hooks, then re-apply the platform filter
"""

import copy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from rootpack_common import (
    DEFAULT_MINIMUM_STABILITY,
    DEFAULT_PREFER_STABLE,
    RootPackage,
    Scripts,
    ValidationError,
)
from rootpack_common.logger import get_logger
from rootpack_schema import ComponentManifest, RootManifest, is_platform_package

from .merger import ManifestMerger

logger = get_logger(__name__)

AlterHook = Callable[[Dict[str, Any]], None]
"""Receives the in-progress root document and may modify it in place"""

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def filter_platform_packages(requirements: Dict[str, str]) -> Dict[str, str]:
    """
    Remove platform packages from a requirements mapping.

    Platform packages include 'php' and its extensions ('ext-curl',
    'ext-intl', ...). Drupal extensions raise those requirements through
    their own info files instead.
    """
    return {
        package_name: constraint
        for package_name, constraint in requirements.items()
        if not is_platform_package(package_name)
    }


class RootManifestBuilder:
    """
    Builds RootManifest objects.

    Args:
        root: The app root; rootpack's own source path is made relative to it
        core_subdir: Directory of the core package inside the app root
        merger: Manifest merger (defaults to ManifestMerger)
        clock: Returns the generation time recorded in extra._generator
        alter_hooks: Callables given the in-progress document on every build
    """

    def __init__(
        self,
        root: Union[str, Path],
        core_subdir: str = RootPackage.CORE_SUBDIR,
        merger: Optional[ManifestMerger] = None,
        clock: Optional[Clock] = None,
        alter_hooks: Optional[List[AlterHook]] = None,
    ):
        self.root = Path(root)
        self.core_subdir = core_subdir.strip("/")
        self.merger = merger or ManifestMerger()
        self.clock = clock or _utc_now
        self.alter_hooks: List[AlterHook] = list(alter_hooks or [])

    def add_alter_hook(self, hook: AlterHook) -> None:
        self.alter_hooks.append(hook)

    def build(
        self,
        core_package: ComponentManifest,
        extension_packages: Sequence[ComponentManifest],
    ) -> RootManifest:
        """
        Build the root manifest.

        Raises:
            ValidationError: If the core manifest has no name or no require key
        """
        self._validate_core_package(core_package)
        core_package = self._apply_core_defaults(core_package)

        merged = self.merger.merge(core_package, extension_packages)

        # Re-add composer/installers, present in the original root package,
        # to keep the ability for modules to require other Drupal projects.
        requirements = dict(merged.requirements)
        requirements[RootPackage.INSTALLER_PACKAGE] = RootPackage.INSTALLER_CONSTRAINT

        replace = dict(merged.replacements)
        replace.setdefault(core_package.name, RootPackage.SELF_VERSION)

        extra = copy.deepcopy(core_package.extra)
        extra["_generator"] = f"{RootPackage.GENERATOR} on {self.clock().isoformat()}"
        extra["_sources"] = ", ".join(merged.sources)

        root_package = RootManifest(
            name=RootPackage.NAME,
            type=RootPackage.TYPE,
            license=RootPackage.LICENSE,
            require=filter_platform_packages(requirements),
            require_dev=filter_platform_packages(merged.dev_requirements),
            conflict=merged.conflicts,
            replace=replace,
            provide=merged.provides,
            suggest=merged.suggestions,
            minimum_stability=merged.minimum_stability,
            prefer_stable=merged.prefer_stable,
            repositories=merged.repositories,
            autoload=self.rebase_autoload_paths(merged.autoload),
            scripts=self._build_scripts(core_package.scripts),
            config=dict(RootPackage.CONFIG),
            extra=extra,
        )

        # Re-add our own commands so that they work on the next run.
        root_package.autoload.setdefault("psr-4", {})[RootPackage.SELF_NAMESPACE] = self.source_path()

        if self.alter_hooks:
            root_package = self._alter(root_package)

        logger.info(
            "Built root manifest",
            sources=extra["_sources"],
            requirements=len(root_package.require),
            minimum_stability=root_package.minimum_stability,
        )
        return root_package

    def rebase_autoload_paths(self, autoload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rebase core-relative autoload paths to be relative to the app root.

        'lib/...' becomes '<core_subdir>/lib/...' and '../x' becomes 'x'.
        """
        return {style: self._rebase(paths) for style, paths in autoload.items()}

    def source_path(self) -> str:
        """Path of the rootpack_sdk package, relative to the app root when possible."""
        package_dir = Path(__file__).resolve().parent.parent
        try:
            return package_dir.relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return package_dir.as_posix()

    def _rebase(self, paths: Any) -> Any:
        if isinstance(paths, dict):
            return {key: self._rebase(value) for key, value in paths.items()}
        if isinstance(paths, list):
            return [self._rebase(path) for path in paths]
        if not isinstance(paths, str):
            return paths
        if paths.startswith(RootPackage.INTERNAL_LIBRARY_PREFIX):
            return f"{self.core_subdir}/{paths}"
        if paths.startswith(RootPackage.PARENT_DIR_PREFIX):
            return paths[len(RootPackage.PARENT_DIR_PREFIX):]
        return paths

    @staticmethod
    def _validate_core_package(core_package: ComponentManifest) -> None:
        if not core_package.name:
            raise ValidationError("Core manifest has no 'name'; cannot build the root manifest")
        if "requirements" not in core_package.model_fields_set:
            raise ValidationError(
                f"Core manifest '{core_package.name}' has no 'require' key; "
                f"cannot build the root manifest"
            )

    @staticmethod
    def _apply_core_defaults(core_package: ComponentManifest) -> ComponentManifest:
        defaults: Dict[str, Any] = {}
        if core_package.minimum_stability is None:
            defaults["minimum_stability"] = DEFAULT_MINIMUM_STABILITY
        if core_package.prefer_stable is None:
            defaults["prefer_stable"] = DEFAULT_PREFER_STABLE
        if core_package.repositories is None:
            defaults["repositories"] = []
        if not defaults:
            return core_package
        return core_package.model_copy(update=defaults)

    @staticmethod
    def _build_scripts(core_scripts: Dict[str, Any]) -> Dict[str, Any]:
        scripts = copy.deepcopy(core_scripts)
        for event, command in Scripts.BINDINGS.items():
            existing = scripts.get(event)
            if existing is None or existing == command:
                scripts[event] = command
            else:
                # Keep bindings carried from the core manifest.
                commands = existing if isinstance(existing, list) else [existing]
                if command not in commands:
                    commands = commands + [command]
                scripts[event] = commands
        return scripts

    def _alter(self, root_package: RootManifest) -> RootManifest:
        document = root_package.to_document()
        for hook in self.alter_hooks:
            hook(document)
        altered = RootManifest.from_document(document)
        altered.require = filter_platform_packages(altered.require)
        altered.require_dev = filter_platform_packages(altered.require_dev)
        return altered
