"""Design token registry: SQLite persistence and project ingestion."""

from tokenplane.registry.db import Database
from tokenplane.registry.ingest import IngestionReport, ingest_project
from tokenplane.registry.models import DesignSystemVersion, DesignToken, TokenUsage
from tokenplane.registry.store import RegistryStore

__all__ = [
    "Database",
    "DesignSystemVersion",
    "DesignToken",
    "IngestionReport",
    "RegistryStore",
    "TokenUsage",
    "ingest_project",
]
