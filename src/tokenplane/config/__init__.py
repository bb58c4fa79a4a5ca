"""Config module exports."""

from tokenplane.config.loader import get_registry_path, load_config
from tokenplane.config.models import (
    ApplyConfig,
    DatabaseConfig,
    ExtractionConfig,
    LoggingConfig,
    TokenPlaneConfig,
)

__all__ = [
    "load_config",
    "get_registry_path",
    "TokenPlaneConfig",
    "ApplyConfig",
    "DatabaseConfig",
    "ExtractionConfig",
    "LoggingConfig",
]
