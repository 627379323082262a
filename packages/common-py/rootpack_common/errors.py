"""
rootpack Error Classes

All rootpack packages raise subclasses of RootpackError so callers can catch
one base type and still tell failures apart by ``code``.

Taxonomy:
- ValidationError: malformed or missing input documents (fail fast)
- NotFoundError: a required file does not exist
- SnapshotError: the installed-package snapshot is malformed
- LockTimeoutError: the write lock could not be acquired (retryable)
- ManifestWriteError: the root manifest could not be persisted
- ResolverError: the external dependency resolver failed

Usage:
    from rootpack_common.errors import ValidationError

    if "name" not in document:
        raise ValidationError("Core manifest has no 'name'")
"""

from typing import Any, Dict, Optional


class RootpackError(Exception):
    """
    Base exception for all rootpack errors.

    Attributes:
        message: Human readable description
        code: Stable machine readable error code
        retryable: Whether the caller may retry the same operation later
    """

    retryable = False

    def __init__(self, message: str, code: str = "ROOTPACK_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for JSON output."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


class ValidationError(RootpackError):
    """Raised when a manifest or configuration document is malformed."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(RootpackError):
    """Raised when a required file or resource does not exist."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, code="NOT_FOUND")
        self.path = path


class SnapshotError(ValidationError):
    """Raised when the installed-package snapshot cannot be interpreted."""

    def __init__(self, message: str):
        super().__init__(message)
        self.code = "SNAPSHOT_ERROR"


class LockTimeoutError(RootpackError):
    """Raised when the exclusion lock is not acquired within its bound."""

    retryable = True

    def __init__(self, name: str, timeout: float):
        super().__init__(
            f"Could not acquire lock '{name}' within {timeout:g}s. "
            f"Another process is regenerating the root manifest; try again later.",
            code="LOCK_TIMEOUT",
        )
        self.name = name
        self.timeout = timeout


class ManifestWriteError(RootpackError):
    """Raised when the root manifest could not be persisted."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, code="WRITE_ERROR")
        self.path = path


class ResolverError(RootpackError):
    """Raised when the external dependency resolver fails or times out."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message, code="RESOLVER_ERROR")
        self.returncode = returncode
