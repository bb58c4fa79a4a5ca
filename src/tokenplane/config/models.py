"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TOKENPLANE__SECTION__KEY)
3. Repo YAML (.tokenplane/config.yaml)
4. Global YAML (~/.config/tokenplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TOKENPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    TOKENPLANE__LOGGING__LEVEL=DEBUG
    TOKENPLANE__EXTRACTION__MAX_WORKERS=4
    TOKENPLANE__APPLY__MAX_FILES_PER_SCAN=5000

Algorithm thresholds (color distances, scale tolerances, confidence bands)
are not configurable; see constants.py.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TOKENPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every extraction match.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Value extraction configuration.

    Env vars:
        TOKENPLANE__EXTRACTION__MAX_WORKERS: Parallel extraction processes
        TOKENPLANE__EXTRACTION__PARALLEL_THRESHOLD: Minimum files before using a pool
        TOKENPLANE__EXTRACTION__CONTEXT_CHARS: Context captured around each match
    """

    max_workers: int = Field(
        default=4,
        description="Worker processes for per-file extraction. 1 disables the pool.",
    )
    parallel_threshold: int = Field(
        default=32,
        description="Batches smaller than this are extracted in-process. "
        "TRADEOFF: Process startup dominates for small themes.",
    )
    context_chars: int = Field(
        default=80,
        description="Characters of surrounding source kept on each side of a match.",
    )
    max_file_size_kb: int = Field(
        default=1024,
        description="Skip files larger than this (KB). Minified bundles add noise.",
    )
    excluded_suffixes: list[str] = Field(
        default_factory=lambda: [".min.js", ".min.css", ".map"],
        description="File name suffixes never extracted from.",
    )

    @field_validator("max_workers", "context_chars")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be >= 1, got {v}")
        return v


class ApplyConfig(BaseModel):
    """Token application configuration.

    Env vars:
        TOKENPLANE__APPLY__MAX_FILES_PER_SCAN: Upper bound on files scanned per change set
        TOKENPLANE__APPLY__SYSTEM_ACTOR: Author id recorded on rollback versions
    """

    max_files_per_scan: int = Field(
        default=10000,
        description="Files considered by impact analysis and apply. Extra files are ignored "
        "(logged). RISK: Too low silently leaves stale token references behind.",
    )
    system_actor: str = Field(
        default="system-rollback",
        description="Author id recorded on versions created by rollback.",
    )


class DatabaseConfig(BaseModel):
    """Registry database configuration.

    Env vars:
        TOKENPLANE__DATABASE__PATH: Override registry location
        TOKENPLANE__DATABASE__BUSY_TIMEOUT_MS: SQLite busy timeout
    """

    path: str | None = Field(
        default=None,
        description="Registry SQLite file. Default: .tokenplane/registry.db in the project.",
    )
    busy_timeout_ms: int = Field(
        default=30000,
        description="SQLite busy timeout (ms). How long to wait for locks.",
    )


class TelemetryConfig(BaseModel):
    """OpenTelemetry configuration.

    Env vars:
        TOKENPLANE__TELEMETRY__ENABLED: Enable/disable telemetry
        TOKENPLANE__TELEMETRY__OTLP_ENDPOINT: OTLP collector endpoint
        TOKENPLANE__TELEMETRY__SERVICE_NAME: Service name for traces

    Note: Also respects standard OTEL_* env vars when enabled.
    """

    enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry export. Requires an OTLP endpoint.",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP collector endpoint (e.g., http://localhost:4317).",
    )
    service_name: str = Field(
        default="tokenplane",
        description="Service name for traces/metrics.",
    )


class TokenPlaneConfig(BaseModel):
    """Root configuration for TokenPlane.

    All settings can be configured via:
    1. Environment variables: TOKENPLANE__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    apply: ApplyConfig = Field(default_factory=ApplyConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
