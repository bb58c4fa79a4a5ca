"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- ExtractionConfig model
- ApplyConfig model
- DatabaseConfig / TelemetryConfig models
- TokenPlaneConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tokenplane.config.models import (
    ApplyConfig,
    DatabaseConfig,
    ExtractionConfig,
    LoggingConfig,
    LogOutputConfig,
    TelemetryConfig,
    TokenPlaneConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_stderr_destination(self) -> None:
        """stderr is valid destination."""
        config = LogOutputConfig(destination="stderr")
        assert config.destination == "stderr"

    def test_stdout_destination(self) -> None:
        """stdout is valid destination."""
        config = LogOutputConfig(destination="stdout")
        assert config.destination == "stdout"

    def test_absolute_path_destination(self) -> None:
        """Absolute path is valid destination."""
        config = LogOutputConfig(destination="/var/log/tokenplane.log")
        assert config.destination == "/var/log/tokenplane.log"

    def test_relative_path_fails(self) -> None:
        """Relative path is rejected."""
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/app.log")

    def test_format_options(self) -> None:
        """Format can be json or console."""
        LogOutputConfig(format="json")
        LogOutputConfig(format="console")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1

    def test_level_options(self) -> None:
        """Log levels are valid."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            config = LoggingConfig(level=level)  # type: ignore[arg-type]
            assert config.level == level

    def test_invalid_level(self) -> None:
        """Invalid level is rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")  # type: ignore[arg-type]



class TestExtractionConfig:
    """Tests for ExtractionConfig model."""

    def test_defaults(self) -> None:
        config = ExtractionConfig()
        assert config.max_workers == 4
        assert config.parallel_threshold == 32
        assert config.context_chars == 80
        assert ".min.css" in config.excluded_suffixes

    @pytest.mark.parametrize("field", ["max_workers", "context_chars"])
    def test_rejects_non_positive(self, field: str) -> None:
        with pytest.raises(ValidationError, match="Must be >= 1"):
            ExtractionConfig(**{field: 0})

    def test_single_worker_allowed(self) -> None:
        assert ExtractionConfig(max_workers=1).max_workers == 1


class TestApplyConfig:
    def test_defaults(self) -> None:
        config = ApplyConfig()
        assert config.max_files_per_scan == 10000
        assert config.system_actor == "system-rollback"


class TestDatabaseAndTelemetry:
    def test_database_defaults(self) -> None:
        config = DatabaseConfig()
        assert config.path is None
        assert config.busy_timeout_ms == 30000

    def test_telemetry_disabled_by_default(self) -> None:
        config = TelemetryConfig()
        assert config.enabled is False
        assert config.otlp_endpoint is None
        assert config.service_name == "tokenplane"


class TestTokenPlaneConfig:
    """Tests for the root config model."""

    def test_all_sections_present(self) -> None:
        config = TokenPlaneConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.extraction, ExtractionConfig)
        assert isinstance(config.apply, ApplyConfig)
        assert isinstance(config.database, DatabaseConfig)
        assert isinstance(config.telemetry, TelemetryConfig)

    def test_from_nested_dict(self) -> None:
        config = TokenPlaneConfig.model_validate(
            {"apply": {"system_actor": "bot"}, "logging": {"level": "DEBUG"}}
        )
        assert config.apply.system_actor == "bot"
        assert config.logging.level == "DEBUG"
