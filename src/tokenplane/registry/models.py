"""SQLModel definitions for the design token registry.

Four tables, all scoped by ``project_id``:

- design_tokens: named design values, unique by (project_id, name)
- design_token_usages: where a token's value occurs in project files
- design_system_versions: one snapshot per applied change set
- design_components: file groups detected by the last scan

JSON payloads are stored as text columns with typed accessors.
"""

import json
import time
from typing import Any

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel

from tokenplane.tokens.models import TokenCategory, TokenMetadata


class DesignToken(SQLModel, table=True):
    """A named design value owned by a project."""

    __tablename__ = "design_tokens"
    __table_args__ = (UniqueConstraint("project_id", "name", name="uq_design_tokens_project_name"),)

    id: int | None = Field(default=None, primary_key=True)
    project_id: str = Field(index=True)
    name: str = Field(index=True)
    category: str = Field(index=True)
    value: str
    aliases_json: str = "[]"  # JSON array of alternative names
    description: str | None = None
    metadata_json: str = "{}"  # serialized TokenMetadata
    semantic_parent_id: int | None = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("design_tokens.id", ondelete="SET NULL"), nullable=True),
    )
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)

    @property
    def token_category(self) -> TokenCategory:
        return TokenCategory(self.category)

    def get_aliases(self) -> list[str]:
        result: list[str] = json.loads(self.aliases_json)
        return result

    def set_aliases(self, aliases: list[str]) -> None:
        self.aliases_json = json.dumps(aliases)

    def get_metadata(self) -> TokenMetadata:
        return TokenMetadata.from_json(json.loads(self.metadata_json))

    def set_metadata(self, metadata: TokenMetadata) -> None:
        self.metadata_json = json.dumps(metadata.to_json())


class TokenUsage(SQLModel, table=True):
    """One occurrence of a token's value in a project file."""

    __tablename__ = "design_token_usages"

    id: int | None = Field(default=None, primary_key=True)
    token_id: int = Field(
        sa_column=Column(Integer, ForeignKey("design_tokens.id", ondelete="CASCADE"), index=True)
    )
    file_path: str = Field(index=True)
    line_number: int
    context: str = ""
    created_at: float = Field(default_factory=time.time)


class DesignSystemVersion(SQLModel, table=True):
    """Audit snapshot of one applied change set.

    ``changes_json`` holds ``{"token_changes": [...], "files_modified": [...],
    "instances_changed": n}``; the token changes are exactly the list that was
    applied, so replace and rename sets can be inverted for rollback.
    """

    __tablename__ = "design_system_versions"
    __table_args__ = (
        UniqueConstraint("project_id", "version_number", name="uq_design_system_versions_number"),
    )

    id: int | None = Field(default=None, primary_key=True)
    project_id: str = Field(index=True)
    version_number: int
    changes_json: str = "{}"
    author_id: str
    description: str = ""
    created_at: float = Field(default_factory=time.time)

    def get_changes(self) -> dict[str, Any]:
        result: dict[str, Any] = json.loads(self.changes_json)
        return result

    def set_changes(self, changes: dict[str, Any]) -> None:
        self.changes_json = json.dumps(changes)


class DesignComponent(SQLModel, table=True):
    """A detected theme component, replaced wholesale on every scan.

    ``details_json`` carries button variant values, the semantic type and
    icon metadata; ``token_ids_json`` the registry tokens used by any of
    the component's files.
    """

    __tablename__ = "design_components"

    id: int | None = Field(default=None, primary_key=True)
    project_id: str = Field(index=True)
    name: str
    file_path: str
    component_type: str
    files_json: str = "[]"
    token_ids_json: str = "[]"
    variants_json: str = "[]"
    usage_frequency: int = 0
    details_json: str = "{}"
    created_at: float = Field(default_factory=time.time)

    def get_files(self) -> list[str]:
        result: list[str] = json.loads(self.files_json)
        return result

    def get_token_ids(self) -> list[int]:
        result: list[int] = json.loads(self.token_ids_json)
        return result

    def get_variants(self) -> list[str]:
        result: list[str] = json.loads(self.variants_json)
        return result

    def get_details(self) -> dict[str, Any]:
        result: dict[str, Any] = json.loads(self.details_json)
        return result
