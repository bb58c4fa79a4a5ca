"""Tests for error types and codes."""

import pytest

from tokenplane.core.errors import (
    ApplyError,
    ConfigError,
    ErrorCode,
    RegistryError,
    RollbackError,
    TokenPlaneError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.EXTRACTION_BAD_SETTINGS, 3000),
            (ErrorCode.REGISTRY_DUPLICATE_NAME, 4000),
            (ErrorCode.APPLY_VALIDATION_FAILED, 5000),
            (ErrorCode.ROLLBACK_NOT_INVERTIBLE, 5000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestTokenPlaneError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = TokenPlaneError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_message(self) -> None:
        error = TokenPlaneError(code=ErrorCode.INTERNAL_ERROR, message="boom")
        assert str(error) == "[9001] INTERNAL_ERROR: boom"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        with pytest.raises(TokenPlaneError):
            raise RegistryError.backend("list_by_project", "disk I/O error")


class TestFactories:
    """Classmethod factories carry structured details."""

    def test_config_parse_error(self) -> None:
        error = ConfigError.parse_error("/x/config.yaml", "bad indent")
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details["path"] == "/x/config.yaml"

    def test_registry_duplicate_name(self) -> None:
        error = RegistryError.duplicate_name("p1", "color-primary")
        assert error.code == ErrorCode.REGISTRY_DUPLICATE_NAME
        assert "color-primary" in error.message

    def test_registry_not_found(self) -> None:
        error = RegistryError.not_found("token", "42")
        assert error.code == ErrorCode.REGISTRY_NOT_FOUND

    def test_apply_validation_failed_lists_path_and_errors(self) -> None:
        error = ApplyError.validation_failed("assets/base.css", ["Unclosed '{' at line 3"])
        assert "assets/base.css" in error.message
        assert error.details["errors"] == ["Unclosed '{' at line 3"]

    def test_rollback_not_invertible_names_tokens(self) -> None:
        error = RollbackError.not_invertible("7", ["color-old", "spacing-xs"])
        assert error.code == ErrorCode.ROLLBACK_NOT_INVERTIBLE
        assert "color-old, spacing-xs" in error.message

    def test_rollback_failed_joins_errors(self) -> None:
        error = RollbackError.failed("7", ["a", "b"])
        assert "a; b" in error.message
