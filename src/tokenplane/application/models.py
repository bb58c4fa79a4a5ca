"""Token change requests and their outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

RiskLevel = Literal["low", "medium", "high"]
ChangeType = Literal["replace", "rename", "delete"]


class TokenChange(BaseModel):
    """One requested change.

    - replace: every literal ``old_value`` becomes ``new_value``
    - rename: ``--token_name`` declarations and ``var(--token_name)``
      references become ``new_value``
    - delete: declarations are removed; references become ``new_value``
      (default ``inherit``)

    Serialized verbatim into version snapshots.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ChangeType
    token_name: str
    old_value: str | None = None
    new_value: str | None = None

    @model_validator(mode="after")
    def _check_values(self) -> TokenChange:
        if self.type == "replace" and not (self.old_value and self.new_value):
            raise ValueError("replace requires old_value and new_value")
        if self.type == "rename" and not self.new_value:
            raise ValueError("rename requires new_value")
        return self

    def inverted(self) -> TokenChange | None:
        """The change that undoes this one; ``None`` for deletes."""
        if self.type == "replace":
            return TokenChange(
                type="replace",
                token_name=self.token_name,
                old_value=self.new_value,
                new_value=self.old_value,
            )
        if self.type == "rename":
            assert self.new_value is not None
            return TokenChange(type="rename", token_name=self.new_value, new_value=self.token_name)
        return None


@dataclass(frozen=True)
class FileImpact:
    file_path: str
    instance_count: int
    risk_level: RiskLevel


@dataclass
class ImpactAnalysis:
    files_affected: list[FileImpact]
    total_instances: int
    risk_summary: str


@dataclass
class DeploymentResult:
    """Outcome of one atomic apply.

    ``success=False`` with an empty ``files_modified`` means nothing was
    written. A non-empty ``files_modified`` alongside errors means some
    writes after validation failed; those that succeeded are listed.
    """

    success: bool
    files_modified: list[str] = field(default_factory=list)
    instances_changed: int = 0
    version_id: int | None = None
    errors: list[str] = field(default_factory=list)
