"""Registry CRUD over the SQLite database.

Every operation is scoped by project id. SQLAlchemy failures surface as
``RegistryError``: a unique-constraint violation on token names becomes
``REGISTRY_DUPLICATE_NAME``, anything else ``REGISTRY_BACKEND_ERROR``.
"""

from __future__ import annotations

import time
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col, func, select

from tokenplane.config.models import DatabaseConfig
from tokenplane.core.errors import RegistryError
from tokenplane.core.logging import get_logger
from tokenplane.registry.db import Database
from tokenplane.registry.models import DesignComponent, DesignSystemVersion, DesignToken, TokenUsage
from tokenplane.tokens.models import TokenCategory, TokenMetadata

logger = get_logger("registry")

_UPDATABLE_FIELDS = frozenset(
    {"name", "category", "value", "description", "aliases", "metadata", "semantic_parent_id"}
)


@contextmanager
def _translated(operation: str, project_id: str = "", name: str = "") -> Generator[None, None, None]:
    try:
        yield
    except IntegrityError as e:
        if "unique" in str(e.orig).lower() and name:
            raise RegistryError.duplicate_name(project_id, name) from e
        raise RegistryError.backend(operation, str(e.orig)) from e
    except SQLAlchemyError as e:
        raise RegistryError.backend(operation, str(e)) from e


class RegistryStore:
    """Token, usage, version and component persistence for any number of projects."""

    def __init__(self, db: Database) -> None:
        self.db = db

    @classmethod
    def open(cls, path: Path, config: DatabaseConfig | None = None) -> RegistryStore:
        """Open (creating if needed) the registry database at ``path``."""
        busy_timeout_ms = config.busy_timeout_ms if config else 30000
        db = Database(path, busy_timeout_ms=busy_timeout_ms)
        db.create_all()
        return cls(db)

    def close(self) -> None:
        self.db.dispose()

    # =========================================================================
    # Tokens
    # =========================================================================

    def create_token(
        self,
        project_id: str,
        name: str,
        category: TokenCategory,
        value: str,
        *,
        description: str | None = None,
        aliases: list[str] | None = None,
        metadata: TokenMetadata | None = None,
        semantic_parent_id: int | None = None,
    ) -> DesignToken:
        token = DesignToken(
            project_id=project_id,
            name=name,
            category=category.value,
            value=value,
            description=description,
            semantic_parent_id=semantic_parent_id,
        )
        token.set_aliases(aliases or [])
        token.set_metadata(metadata or TokenMetadata())
        with _translated("create_token", project_id, name), self.db.session() as session:
            session.add(token)
            session.commit()
            session.refresh(token)
        logger.debug("token_created", project_id=project_id, name=name, token_id=token.id)
        return token

    def get_token(self, token_id: int) -> DesignToken | None:
        with _translated("get_token"), self.db.session() as session:
            return session.get(DesignToken, token_id)

    def update_token(self, token_id: int, **fields: Any) -> DesignToken:
        """Update the given fields; ``aliases`` and ``metadata`` take typed values.

        Raises:
            RegistryError: token missing, unknown field, or the new name is taken.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise RegistryError.backend("update_token", f"unknown fields: {', '.join(sorted(unknown))}")

        with self.db.session() as session:
            token = session.get(DesignToken, token_id)
            if token is None:
                raise RegistryError.not_found("token", str(token_id))
            for key, value in fields.items():
                if key == "aliases":
                    token.set_aliases(list(value))
                elif key == "metadata":
                    token.set_metadata(value)
                elif key == "category":
                    token.category = TokenCategory(value).value
                else:
                    setattr(token, key, value)
            token.updated_at = time.time()
            with _translated("update_token", token.project_id, fields.get("name", "")):
                session.add(token)
                session.commit()
                session.refresh(token)
            return token

    def delete_token(self, token_id: int) -> bool:
        """Delete a token and its usages. Returns False if it did not exist."""
        with _translated("delete_token"), self.db.session() as session:
            token = session.get(DesignToken, token_id)
            if token is None:
                return False
            for usage in session.exec(select(TokenUsage).where(TokenUsage.token_id == token_id)).all():
                session.delete(usage)
            session.delete(token)
            session.commit()
            return True

    def find_by_name(self, project_id: str, name: str) -> DesignToken | None:
        with _translated("find_by_name"), self.db.session() as session:
            stmt = select(DesignToken).where(
                DesignToken.project_id == project_id, DesignToken.name == name
            )
            return session.exec(stmt).first()

    def list_by_project(self, project_id: str) -> list[DesignToken]:
        with _translated("list_by_project"), self.db.session() as session:
            stmt = (
                select(DesignToken)
                .where(DesignToken.project_id == project_id)
                .order_by(col(DesignToken.name))
            )
            return list(session.exec(stmt).all())

    def list_by_category(self, project_id: str, category: TokenCategory) -> list[DesignToken]:
        with _translated("list_by_category"), self.db.session() as session:
            stmt = (
                select(DesignToken)
                .where(DesignToken.project_id == project_id, DesignToken.category == category.value)
                .order_by(col(DesignToken.name))
            )
            return list(session.exec(stmt).all())

    # =========================================================================
    # Usages
    # =========================================================================

    def create_usage(
        self, token_id: int, file_path: str, line_number: int, context: str = ""
    ) -> TokenUsage:
        usage = TokenUsage(
            token_id=token_id, file_path=file_path, line_number=line_number, context=context
        )
        with _translated("create_usage"), self.db.session() as session:
            session.add(usage)
            session.commit()
            session.refresh(usage)
        return usage

    def list_usages_by_token(self, token_id: int) -> list[TokenUsage]:
        with _translated("list_usages_by_token"), self.db.session() as session:
            stmt = (
                select(TokenUsage)
                .where(TokenUsage.token_id == token_id)
                .order_by(col(TokenUsage.file_path), col(TokenUsage.line_number))
            )
            return list(session.exec(stmt).all())

    def list_usages_by_file(self, project_id: str, file_path: str) -> list[TokenUsage]:
        with _translated("list_usages_by_file"), self.db.session() as session:
            stmt = (
                select(TokenUsage)
                .join(DesignToken, col(DesignToken.id) == col(TokenUsage.token_id))
                .where(DesignToken.project_id == project_id, TokenUsage.file_path == file_path)
                .order_by(col(TokenUsage.line_number))
            )
            return list(session.exec(stmt).all())

    def delete_usages_by_token(self, token_id: int) -> int:
        """Remove every usage of a token. Returns the number removed."""
        with _translated("delete_usages_by_token"), self.db.session() as session:
            usages = session.exec(select(TokenUsage).where(TokenUsage.token_id == token_id)).all()
            for usage in usages:
                session.delete(usage)
            session.commit()
            return len(usages)

    def count_usages(self, project_id: str) -> dict[int, int]:
        """Usage count per token id for a project (tokens without usages omitted)."""
        with _translated("count_usages"), self.db.session() as session:
            stmt = (
                select(TokenUsage.token_id, func.count())
                .join(DesignToken, col(DesignToken.id) == col(TokenUsage.token_id))
                .where(DesignToken.project_id == project_id)
                .group_by(col(TokenUsage.token_id))
            )
            return {token_id: count for token_id, count in session.exec(stmt).all()}

    # =========================================================================
    # Versions
    # =========================================================================

    def create_version(
        self,
        project_id: str,
        changes: dict[str, Any],
        author_id: str,
        description: str = "",
    ) -> DesignSystemVersion:
        """Record a snapshot under the next version number for the project."""
        with _translated("create_version"), self.db.immediate_transaction() as session:
            current = session.exec(
                select(func.max(DesignSystemVersion.version_number)).where(
                    DesignSystemVersion.project_id == project_id
                )
            ).one()
            version = DesignSystemVersion(
                project_id=project_id,
                version_number=(current or 0) + 1,
                author_id=author_id,
                description=description,
            )
            version.set_changes(changes)
            session.add(version)
            session.flush()
            session.refresh(version)
        logger.info(
            "version_recorded",
            project_id=project_id,
            version_id=version.id,
            version_number=version.version_number,
        )
        return version

    def get_latest_version(self, project_id: str) -> DesignSystemVersion | None:
        with _translated("get_latest_version"), self.db.session() as session:
            stmt = (
                select(DesignSystemVersion)
                .where(DesignSystemVersion.project_id == project_id)
                .order_by(col(DesignSystemVersion.version_number).desc())
            )
            return session.exec(stmt).first()

    def get_version(self, version_id: int) -> DesignSystemVersion | None:
        with _translated("get_version"), self.db.session() as session:
            return session.get(DesignSystemVersion, version_id)

    def list_versions(self, project_id: str) -> list[DesignSystemVersion]:
        """Newest first."""
        with _translated("list_versions"), self.db.session() as session:
            stmt = (
                select(DesignSystemVersion)
                .where(DesignSystemVersion.project_id == project_id)
                .order_by(col(DesignSystemVersion.version_number).desc())
            )
            return list(session.exec(stmt).all())

    # =========================================================================
    # Components
    # =========================================================================

    def replace_components(self, project_id: str, components: Sequence[DesignComponent]) -> int:
        """Swap the project's components for ``components`` in one transaction."""
        with _translated("replace_components"), self.db.immediate_transaction() as session:
            stale = session.exec(
                select(DesignComponent).where(DesignComponent.project_id == project_id)
            ).all()
            for component in stale:
                session.delete(component)
            for component in components:
                component.project_id = project_id
                session.add(component)
        logger.debug("components_replaced", project_id=project_id, removed=len(stale), added=len(components))
        return len(components)

    def list_components(self, project_id: str) -> list[DesignComponent]:
        with _translated("list_components"), self.db.session() as session:
            stmt = (
                select(DesignComponent)
                .where(DesignComponent.project_id == project_id)
                .order_by(col(DesignComponent.name))
            )
            return list(session.exec(stmt).all())
