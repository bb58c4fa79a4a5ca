"""Standardization audit actions."""

from __future__ import annotations

from dataclasses import dataclass, field

from tokenplane.tokens.models import TokenCategory


@dataclass(frozen=True)
class TargetToken:
    id: int | None
    name: str
    value: str


@dataclass(frozen=True)
class ConformAction:
    """A hardcoded value that should reference an existing token."""

    id: str
    file_path: str
    line: int
    hardcoded_value: str
    target_token: TargetToken
    confidence: float


@dataclass(frozen=True)
class AdoptAction:
    """A value with no registry counterpart that should become a token."""

    id: str
    file_path: str
    line: int
    hardcoded_value: str
    suggested_name: str
    suggested_category: TokenCategory
    occurrence_count: int


@dataclass(frozen=True)
class ValueLocation:
    value: str
    file_path: str
    line: int


@dataclass(frozen=True)
class UnifyAction:
    """Near-identical untokenized colors that should collapse to one value."""

    id: str
    values: tuple[ValueLocation, ...]
    canonical_value: str
    suggested_name: str


@dataclass(frozen=True)
class RemoveAction:
    """A registry token nothing uses."""

    id: str
    token_id: int | None
    token_name: str
    token_value: str


@dataclass
class AuditStats:
    files_scanned: int = 0
    values_found: int = 0
    conform_count: int = 0
    adopt_count: int = 0
    unify_count: int = 0
    remove_count: int = 0


@dataclass
class StandardizationAudit:
    conform: list[ConformAction] = field(default_factory=list)
    adopt: list[AdoptAction] = field(default_factory=list)
    unify: list[UnifyAction] = field(default_factory=list)
    remove: list[RemoveAction] = field(default_factory=list)
    stats: AuditStats = field(default_factory=AuditStats)
