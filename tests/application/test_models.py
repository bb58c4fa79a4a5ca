"""Tests for application/models.py - change validation and inversion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tokenplane.application.models import TokenChange


class TestTokenChange:
    def test_replace_requires_both_values(self) -> None:
        with pytest.raises(ValidationError, match="replace requires old_value and new_value"):
            TokenChange(type="replace", token_name="color-primary", old_value="#3b82f6")

    def test_rename_requires_new_value(self) -> None:
        with pytest.raises(ValidationError, match="rename requires new_value"):
            TokenChange(type="rename", token_name="color-primary")

    def test_delete_needs_no_values(self) -> None:
        change = TokenChange(type="delete", token_name="spacing-sm")
        assert change.new_value is None

    def test_unknown_type_and_extra_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TokenChange(type="recolor", token_name="x")  # type: ignore[arg-type]
        with pytest.raises(ValidationError):
            TokenChange.model_validate({"type": "delete", "token_name": "x", "force": True})

    def test_frozen(self) -> None:
        change = TokenChange(type="delete", token_name="x")
        with pytest.raises(ValidationError):
            change.token_name = "y"  # type: ignore[misc]


class TestInverted:
    def test_replace_swaps_values(self) -> None:
        change = TokenChange(type="replace", token_name="c", old_value="#3b82f6", new_value="#2563eb")
        assert change.inverted() == TokenChange(
            type="replace", token_name="c", old_value="#2563eb", new_value="#3b82f6"
        )

    def test_rename_swaps_names(self) -> None:
        change = TokenChange(type="rename", token_name="color-primary", new_value="color-brand")
        assert change.inverted() == TokenChange(
            type="rename", token_name="color-brand", new_value="color-primary"
        )

    def test_delete_not_invertible(self) -> None:
        assert TokenChange(type="delete", token_name="x").inverted() is None

    def test_snapshot_round_trip(self) -> None:
        change = TokenChange(type="rename", token_name="a", new_value="b")
        assert TokenChange.model_validate(change.model_dump(mode="json")) == change
