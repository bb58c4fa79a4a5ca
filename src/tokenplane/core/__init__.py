"""Core module exports."""

from tokenplane.core.errors import (
    ApplyError,
    ConfigError,
    ErrorCode,
    ExtractionError,
    InternalError,
    RegistryError,
    RollbackError,
    TokenPlaneError,
)
from tokenplane.core.logging import (
    begin_run,
    configure_logging,
    current_run_id,
    end_run,
    get_logger,
)
from tokenplane.core.progress import spinner, status

__all__ = [
    # Errors
    "TokenPlaneError",
    "ErrorCode",
    "ConfigError",
    "ExtractionError",
    "RegistryError",
    "ApplyError",
    "RollbackError",
    "InternalError",
    # Logging
    "begin_run",
    "configure_logging",
    "get_logger",
    "current_run_id",
    "end_run",
    # Progress
    "spinner",
    "status",
]
