"""Tests for core/telemetry.py module."""

from __future__ import annotations

import os
from dataclasses import dataclass
from unittest.mock import MagicMock, patch

import pytest

from tokenplane.core import telemetry
from tokenplane.core.telemetry import (
    _get_otlp_endpoint,
    _get_service_name,
    _is_telemetry_enabled,
    get_meter,
    get_tracer,
    init_telemetry,
    record_suppressed_failure,
    shutdown_telemetry,
    span_context,
)


@dataclass
class MockTelemetryConfig:
    enabled: bool = False
    otlp_endpoint: str | None = None
    service_name: str = "tokenplane"


@pytest.fixture(autouse=True)
def _reset_telemetry() -> None:
    shutdown_telemetry()


class TestIsTelemetryEnabled:
    """Tests for _is_telemetry_enabled function."""

    def test_enabled_via_env_var(self) -> None:
        with patch.dict(os.environ, {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://localhost:4317"}):
            assert _is_telemetry_enabled(None) is True

    def test_enabled_via_config(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = MockTelemetryConfig(enabled=True)
            assert _is_telemetry_enabled(config) is True  # type: ignore[arg-type]

    def test_disabled_when_no_config_and_no_env(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert _is_telemetry_enabled(None) is False


class TestEndpointAndServiceName:
    def test_env_endpoint_takes_precedence(self) -> None:
        config = MockTelemetryConfig(otlp_endpoint="http://config:4317")
        with patch.dict(os.environ, {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://env:4317"}):
            assert _get_otlp_endpoint(config) == "http://env:4317"  # type: ignore[arg-type]

    def test_endpoint_falls_back_to_config(self) -> None:
        config = MockTelemetryConfig(otlp_endpoint="http://config:4317")
        with patch.dict(os.environ, {}, clear=True):
            assert _get_otlp_endpoint(config) == "http://config:4317"  # type: ignore[arg-type]

    def test_default_service_name(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert _get_service_name(None) == "tokenplane"


class TestInitTelemetry:
    def test_returns_false_when_disabled(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert init_telemetry(None) is False

    def test_returns_false_without_endpoint(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert init_telemetry(MockTelemetryConfig(enabled=True)) is False  # type: ignore[arg-type]

    def test_is_idempotent(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            init_telemetry(None)
            assert init_telemetry(MockTelemetryConfig(enabled=True)) is False  # type: ignore[arg-type]


class TestNoOpInstrumentation:
    """Without a provider every call is a safe no-op."""

    def test_tracer_and_meter_available(self) -> None:
        assert get_tracer() is not None
        assert get_meter() is not None

    def test_record_suppressed_failure_no_error(self) -> None:
        record_suppressed_failure("extraction", format="stylesheet")
        record_suppressed_failure("extraction")

    def test_record_suppressed_failure_uses_kind_attribute(self) -> None:
        counter = MagicMock()
        with patch.object(telemetry, "_suppressed_counter", counter):
            record_suppressed_failure("file_read", path="a.css")
        counter.add.assert_called_once_with(1, {"kind": "file_read", "path": "a.css"})

    def test_span_context_yields_span(self) -> None:
        with span_context("test", {"project_id": "p"}) as span:
            assert span is not None

    def test_span_context_propagates_exception(self) -> None:
        with pytest.raises(ValueError, match="boom"), span_context("test"):
            raise ValueError("boom")
