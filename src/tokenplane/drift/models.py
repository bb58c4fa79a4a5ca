"""Drift detection result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from tokenplane.tokens.models import TokenCategory


class TokenSummary(Protocol):
    """The registry fields drift matching needs. ``DesignToken`` satisfies it."""

    @property
    def name(self) -> str: ...

    @property
    def value(self) -> str: ...

    @property
    def category(self) -> str: ...


@dataclass(frozen=True)
class StoredToken:
    """Plain ``TokenSummary`` for callers without a registry row."""

    name: str
    value: str
    category: str


@dataclass(frozen=True)
class DriftItem:
    """A literal value in a file that is not expressed through a token."""

    value: str
    line_number: int
    context: str
    category: TokenCategory


@dataclass(frozen=True)
class TokenizationSuggestion:
    hardcoded_value: str
    line_number: int
    suggested_token: str
    suggested_replacement: str
    confidence: float
    reason: str


@dataclass
class DriftResult:
    file_path: str
    exact_matches: list[DriftItem] = field(default_factory=list)
    near_matches: list[DriftItem] = field(default_factory=list)
    hardcoded_values: list[DriftItem] = field(default_factory=list)
    suggestions: list[TokenizationSuggestion] = field(default_factory=list)

    @property
    def drift_count(self) -> int:
        return len(self.exact_matches) + len(self.near_matches) + len(self.hardcoded_values)
