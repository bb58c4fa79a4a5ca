"""Shared fixtures for inference tests."""

from __future__ import annotations

from collections.abc import Callable
from itertools import count

import pytest

from tokenplane.tokens.models import ExtractedToken, TokenCategory

TokenFactory = Callable[..., ExtractedToken]


@pytest.fixture
def make_token() -> TokenFactory:
    """Build ExtractedTokens with sequential ids."""
    ids = count(1)

    def _make(
        value: str,
        category: TokenCategory = TokenCategory.COLOR,
        *,
        name: str | None = None,
        context: str = "",
        file_path: str = "assets/base.css",
        line_number: int = 1,
    ) -> ExtractedToken:
        return ExtractedToken(
            id=f"{file_path}#{next(ids)}",
            name=name,
            category=category,
            value=value,
            file_path=file_path,
            line_number=line_number,
            context=context,
        )

    return _make
