"""
rootpack Settings

Settings are read from ``ROOTPACK_*`` environment variables and, optionally,
from a ``rootpack.yaml`` file in the app root. Environment variables win over
the file.

Example rootpack.yaml:
    core_manifest: composer.core.json
    installed_snapshot: core/vendor/composer/installed.json
    lock_timeout: 10
    log_level: debug
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pydantic
import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import LOG_LEVELS, Defaults, RootPackage
from .errors import ValidationError

ENV_PREFIX = "ROOTPACK_"


class RootpackSettings(BaseSettings):
    root: Path = Path(".")
    core_manifest: str = Defaults.CORE_MANIFEST
    root_manifest: str = Defaults.ROOT_MANIFEST
    installed_snapshot: str = Defaults.INSTALLED_SNAPSHOT
    core_subdir: str = RootPackage.CORE_SUBDIR
    lock_timeout: float = Defaults.LOCK_TIMEOUT
    resolver_binary: str = Defaults.RESOLVER_BINARY
    resolver_timeout: int = Defaults.RESOLVER_TIMEOUT
    log_level: str = Defaults.LOG_LEVEL
    log_json: bool = False

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="forbid")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.lower() not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: '{v}'. Supported: {', '.join(LOG_LEVELS)}")
        return v.lower()

    @field_validator("lock_timeout", "resolver_timeout")
    @classmethod
    def validate_positive(cls, v: Union[int, float]) -> Union[int, float]:
        if v <= 0:
            raise ValueError(f"Timeouts must be positive. Got: {v}")
        return v

    @property
    def core_manifest_path(self) -> Path:
        return self.root / self.core_manifest

    @property
    def root_manifest_path(self) -> Path:
        return self.root / self.root_manifest

    @property
    def installed_snapshot_path(self) -> Path:
        return self.root / self.installed_snapshot


def _read_settings_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in settings file: {path}\nError: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Settings file must contain a mapping: {path}")
    return data


def load_settings(root: Optional[Union[str, Path]] = None,
                  settings_file: Optional[Union[str, Path]] = None) -> RootpackSettings:
    """
    Load settings for an app root.

    Args:
        root: App root directory (defaults to ROOTPACK_ROOT or the cwd)
        settings_file: Explicit settings file; defaults to <root>/rootpack.yaml
                       when that file exists

    Returns:
        Validated RootpackSettings

    Raises:
        ValidationError: If the file or any value is invalid
    """
    overrides: Dict[str, Any] = {}
    if root is not None:
        overrides["root"] = Path(root)

    base = Path(root) if root is not None else Path(os.environ.get(f"{ENV_PREFIX}ROOT", "."))
    candidate = Path(settings_file) if settings_file else base / Defaults.SETTINGS_FILE
    file_values: Dict[str, Any] = {}
    if settings_file and not candidate.exists():
        raise ValidationError(f"Settings file not found: {candidate}")
    if candidate.exists():
        file_values = _read_settings_file(candidate)

    # Environment variables take precedence over file values.
    values = {
        key: value
        for key, value in file_values.items()
        if f"{ENV_PREFIX}{key.upper()}" not in os.environ
    }
    values.update(overrides)

    try:
        return RootpackSettings(**values)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid rootpack settings: {e}")
