"""
rootpack Composer Schema v1

Pydantic models for the documents rootpack reads and produces:
- ComponentManifest: one extension's (or the core's) composer.json
- RootManifest: the generated root composer.json
- InstalledPackage: one record of the resolver's installed snapshot
- ReconciledPackage / ReconciliationReport: the reconciliation output

Design Principles:
- Pure validation: Receives dicts, validates structure, returns typed objects
- No file I/O: Reading and writing documents is the SDK's responsibility
- Explicit presence: keys that may be absent (repositories, minimum-stability,
  prefer-stable) are Optional so "absent" and "empty" stay distinguishable
- Extensible: Unknown keys are preserved

Usage:
    from rootpack_schema import ComponentManifest

    manifest = ComponentManifest.from_document(json.load(f))
"""

from typing import Any, Dict, Iterator, List, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator
from rootpack_common import (
    AUTOLOAD_LIST_STYLES,
    AUTOLOAD_MAPPING_STYLES,
    NAMESPACE_SEPARATOR,
    STABILITY_RANKS,
    SnapshotError,
    ValidationError,
)

MAPPING_FIELDS = (
    "requirements",
    "dev_requirements",
    "conflicts",
    "replacements",
    "provides",
    "suggestions",
)
"""ComponentManifest fields merged with the first-wins rule"""


def _empty_list_as_mapping(value: Any) -> Any:
    # PHP encodes an empty associative array as [].
    if isinstance(value, list) and not value:
        return {}
    return value


def is_platform_package(package_name: str) -> bool:
    """Platform packages (php, ext-intl, lib-icu...) have no vendor prefix."""
    return NAMESPACE_SEPARATOR not in package_name


# =============================================================================
# COMPONENT MANIFEST
# =============================================================================


class ComponentManifest(BaseModel):
    """
    Dependency metadata declared by one component (extension or core).

    Document keys use Composer's names (``require``, ``require-dev``...);
    attributes use descriptive names. ``path`` is not part of the document:
    it is the component directory relative to the app root, set by discovery
    and used to rebase component autoload paths.
    """

    name: Optional[str] = None
    type: Optional[str] = None
    license: Optional[Union[str, List[str]]] = None
    requirements: Dict[str, str] = Field(default_factory=dict, alias="require")
    dev_requirements: Dict[str, str] = Field(default_factory=dict, alias="require-dev")
    conflicts: Dict[str, str] = Field(default_factory=dict, alias="conflict")
    replacements: Dict[str, str] = Field(default_factory=dict, alias="replace")
    provides: Dict[str, str] = Field(default_factory=dict, alias="provide")
    suggestions: Dict[str, str] = Field(default_factory=dict, alias="suggest")
    repositories: Optional[List[Any]] = None
    autoload: Dict[str, Any] = Field(default_factory=dict)
    minimum_stability: Optional[str] = Field(default=None, alias="minimum-stability")
    prefer_stable: Optional[bool] = Field(default=None, alias="prefer-stable")
    scripts: Dict[str, Any] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)
    path: Optional[str] = Field(default=None, exclude=True)

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    @field_validator(
        "requirements", "dev_requirements", "conflicts", "replacements",
        "provides", "suggestions", "autoload", "scripts", "extra",
        mode="before",
    )
    @classmethod
    def coerce_empty_mapping(cls, v: Any) -> Any:
        return _empty_list_as_mapping(v)

    @field_validator("repositories", mode="before")
    @classmethod
    def coerce_repositories(cls, v: Any) -> Any:
        """
        Accept Composer's keyed-object form as a list, in order.

        Named definitions keep their key as ``name``; anything else, such as
        ``{"packagist.org": false}``, becomes a single-key entry.
        """
        if not isinstance(v, dict):
            return v
        repositories = []
        for key, value in v.items():
            if isinstance(value, dict):
                repositories.append({"name": key, **value})
            else:
                repositories.append({key: value})
        return repositories

    @field_validator("minimum_stability")
    @classmethod
    def validate_stability(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in STABILITY_RANKS:
            raise ValidationError(
                f"Unsupported minimum-stability: '{v}'. "
                f"Supported values: dev, alpha, beta, rc, stable"
            )
        return v

    @field_validator("autoload")
    @classmethod
    def validate_autoload(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        for style, paths in v.items():
            if style in AUTOLOAD_MAPPING_STYLES and not isinstance(paths, dict):
                raise ValidationError(f"autoload.{style} must be a mapping of namespace to path")
            if style in AUTOLOAD_LIST_STYLES and not isinstance(paths, list):
                raise ValidationError(f"autoload.{style} must be a list of paths")
        return v

    @property
    def has_requirements(self) -> bool:
        return bool(self.requirements or self.dev_requirements)

    @property
    def is_mergeable(self) -> bool:
        """A component needs a name and at least one requirement to contribute."""
        return bool(self.name) and self.has_requirements

    @classmethod
    def from_document(cls, data: Any, path: Optional[str] = None) -> "ComponentManifest":
        """
        Validate a decoded composer.json document.

        Raises:
            ValidationError: If the document is not a mapping or has invalid values
        """
        if not isinstance(data, dict):
            raise ValidationError(
                f"Manifest must be a JSON object, got {type(data).__name__}"
                + (f" ({path})" if path else "")
            )
        try:
            manifest = cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid manifest{f' {path}' if path else ''}: {e}")
        if path is not None:
            manifest = manifest.model_copy(update={"path": path})
        return manifest


# =============================================================================
# ROOT MANIFEST
# =============================================================================


class RootManifest(BaseModel):
    """
    The generated root composer.json.

    ``to_document`` produces the exact document written to disk; empty
    ``repositories`` and empty optional link sections are left out.
    """

    name: str
    type: str
    license: Union[str, List[str]]
    require: Dict[str, str] = Field(default_factory=dict)
    require_dev: Dict[str, str] = Field(default_factory=dict, alias="require-dev")
    conflict: Dict[str, str] = Field(default_factory=dict)
    replace: Dict[str, str] = Field(default_factory=dict)
    provide: Dict[str, str] = Field(default_factory=dict)
    suggest: Dict[str, str] = Field(default_factory=dict)
    minimum_stability: str = Field(alias="minimum-stability")
    prefer_stable: bool = Field(alias="prefer-stable")
    repositories: List[Any] = Field(default_factory=list)
    autoload: Dict[str, Any] = Field(default_factory=dict)
    scripts: Dict[str, Any] = Field(default_factory=dict)
    config: Dict[str, Any] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator(
        "require", "require_dev", "conflict", "replace", "provide", "suggest",
        "autoload", "scripts", "config", "extra",
        mode="before",
    )
    @classmethod
    def coerce_empty_mapping(cls, v: Any) -> Any:
        return _empty_list_as_mapping(v)

    @field_validator("minimum_stability")
    @classmethod
    def validate_stability(cls, v: str) -> str:
        if v not in STABILITY_RANKS:
            raise ValidationError(f"Unsupported minimum-stability: '{v}'")
        return v

    @property
    def has_repositories(self) -> bool:
        return bool(self.repositories)

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "license": self.license,
            "require": dict(self.require),
            "require-dev": dict(self.require_dev),
        }
        for key in ("conflict", "replace", "provide", "suggest"):
            value = getattr(self, key)
            if value:
                document[key] = dict(value)
        document["minimum-stability"] = self.minimum_stability
        document["prefer-stable"] = self.prefer_stable
        if self.has_repositories:
            document["repositories"] = list(self.repositories)
        document["autoload"] = self.autoload
        document["scripts"] = dict(self.scripts)
        document["config"] = dict(self.config)
        document["extra"] = dict(self.extra)
        document.update(self.model_extra or {})
        return document

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "RootManifest":
        if not isinstance(data, dict):
            raise ValidationError(f"Root manifest must be a mapping, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid root manifest: {e}")


# =============================================================================
# INSTALLED SNAPSHOT
# =============================================================================


class InstalledPackage(BaseModel):
    """One package entry of installed.json or composer.lock."""

    name: str
    version: str
    description: str = ""
    homepage: str = ""
    require: Dict[str, str] = Field(default_factory=dict)
    source: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("description", "homepage", mode="before")
    @classmethod
    def coerce_missing_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("require", mode="before")
    @classmethod
    def coerce_empty_mapping(cls, v: Any) -> Any:
        return _empty_list_as_mapping(v)

    @property
    def source_reference(self) -> Optional[str]:
        if self.source:
            return self.source.get("reference")
        return None

    @classmethod
    def from_record(cls, record: Any) -> "InstalledPackage":
        if not isinstance(record, dict):
            raise SnapshotError(f"Installed package record must be a mapping, got {type(record).__name__}")
        try:
            return cls.model_validate(record)
        except pydantic.ValidationError as e:
            raise SnapshotError(f"Invalid installed package record {record.get('name', '<unnamed>')!r}: {e}")


# =============================================================================
# RECONCILIATION
# =============================================================================


class ReconciledPackage(BaseModel):
    """
    State of one package after reconciliation.

    An empty ``constraint`` means nobody requires the package any more
    (orphaned); an empty ``version`` means it is required but not installed.
    Field order is alphabetical so serialized entries have sorted keys.
    """

    constraint: str = ""
    description: str = ""
    homepage: str = ""
    require: Dict[str, str] = Field(default_factory=dict)
    required_by: List[str] = Field(default_factory=list)
    version: str = ""

    @property
    def is_installed(self) -> bool:
        return bool(self.version)

    @property
    def needs_update(self) -> bool:
        return not self.version or not self.required_by


class ReconciliationReport(BaseModel):
    """Reconciled packages keyed by name, sorted by name."""

    packages: Dict[str, ReconciledPackage] = Field(default_factory=dict)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)

    def __getitem__(self, package_name: str) -> ReconciledPackage:
        return self.packages[package_name]

    def __contains__(self, package_name: object) -> bool:
        return package_name in self.packages

    @property
    def needs_update(self) -> bool:
        return any(package.needs_update for package in self.packages.values())

    def missing(self) -> List[str]:
        """Packages that are required but not installed."""
        return [name for name, package in self.packages.items() if not package.version]

    def orphaned(self) -> List[str]:
        """Installed packages the root manifest no longer requires."""
        return [name for name, package in self.packages.items() if package.version and not package.constraint]

    def installed(self) -> List[str]:
        return [name for name, package in self.packages.items() if package.version]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: package.model_dump() for name, package in self.packages.items()}
