"""TokenPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Extraction (internal, never escapes an extractor)
- 4xxx: Registry
- 5xxx: Application / rollback
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Extraction (3xxx)
    EXTRACTION_FAILED = 3001
    EXTRACTION_BAD_SETTINGS = 3002

    # Registry (4xxx)
    REGISTRY_DUPLICATE_NAME = 4001
    REGISTRY_NOT_FOUND = 4002
    REGISTRY_BACKEND_ERROR = 4003

    # Application (5xxx)
    APPLY_VALIDATION_FAILED = 5001
    APPLY_WRITE_FAILED = 5002
    ROLLBACK_VERSION_NOT_FOUND = 5101
    ROLLBACK_EMPTY_VERSION = 5102
    ROLLBACK_NOT_INVERTIBLE = 5103
    ROLLBACK_FAILED = 5104

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class TokenPlaneError(Exception):
    """Base error with structured context for CLI and API responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TokenPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ExtractionError(TokenPlaneError):
    """Raised inside extractors; the dispatcher logs and discards it."""

    @classmethod
    def bad_settings(cls, path: str, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACTION_BAD_SETTINGS,
            message=f"Unreadable settings data in {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class RegistryError(TokenPlaneError):
    """Registry persistence errors."""

    @classmethod
    def duplicate_name(cls, project_id: str, name: str) -> "RegistryError":
        return cls(
            code=ErrorCode.REGISTRY_DUPLICATE_NAME,
            message=f"Token '{name}' already exists in project {project_id}",
            details={"project_id": project_id, "name": name},
        )

    @classmethod
    def not_found(cls, kind: str, ident: str) -> "RegistryError":
        return cls(
            code=ErrorCode.REGISTRY_NOT_FOUND,
            message=f"{kind} not found: {ident}",
            details={"kind": kind, "id": ident},
        )

    @classmethod
    def backend(cls, operation: str, reason: str) -> "RegistryError":
        return cls(
            code=ErrorCode.REGISTRY_BACKEND_ERROR,
            message=f"Registry {operation} failed: {reason}",
            retryable=True,
            details={"operation": operation, "reason": reason},
        )


class ApplyError(TokenPlaneError):
    """Token application errors surfaced outside a DeploymentResult."""

    @classmethod
    def validation_failed(cls, path: str, errors: list[str]) -> "ApplyError":
        return cls(
            code=ErrorCode.APPLY_VALIDATION_FAILED,
            message=f"Validation failed for {path}: {'; '.join(errors)}",
            details={"path": path, "errors": errors},
        )


class RollbackError(TokenPlaneError):
    """Rollback errors. Always raised, never folded into a result."""

    @classmethod
    def version_not_found(cls, version_id: str) -> "RollbackError":
        return cls(
            code=ErrorCode.ROLLBACK_VERSION_NOT_FOUND,
            message=f"Version {version_id} not found",
            details={"version_id": version_id},
        )

    @classmethod
    def empty_version(cls, version_id: str) -> "RollbackError":
        return cls(
            code=ErrorCode.ROLLBACK_EMPTY_VERSION,
            message=f"Version {version_id} has no token changes to roll back",
            details={"version_id": version_id},
        )

    @classmethod
    def not_invertible(cls, version_id: str, token_names: list[str]) -> "RollbackError":
        return cls(
            code=ErrorCode.ROLLBACK_NOT_INVERTIBLE,
            message=(
                f"Version {version_id} deleted token(s) {', '.join(token_names)}; "
                "deletions cannot be rolled back automatically"
            ),
            details={"version_id": version_id, "token_names": token_names},
        )

    @classmethod
    def failed(cls, version_id: str, errors: list[str]) -> "RollbackError":
        return cls(
            code=ErrorCode.ROLLBACK_FAILED,
            message=f"Rollback failed: {'; '.join(errors) or 'unknown error'}",
            details={"version_id": version_id, "errors": errors},
        )


class InternalError(TokenPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
