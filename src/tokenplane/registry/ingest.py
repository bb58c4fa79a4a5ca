"""Project ingestion: extract, infer, persist.

Occurrences are folded into registry tokens:

- a declared name (``--color-primary``, a settings id) keys a token by
  that name, across files
- an undeclared literal is keyed by (category, normalized value) and takes
  the first suggested name
- a bare reference (``var(--x)`` with no declaration) is a usage of the
  referenced token, never a token of its own

Alias links are resolved in a second pass once every token exists, so a
declaration may reference a token that appears later in the batch.

Components (files sharing a base name) are detected last and replace the
project's previous set, each linked to the tokens its files use.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from tokenplane.components.models import DetectedComponent
from tokenplane.components.ops import detect_components
from tokenplane.core.errors import RegistryError
from tokenplane.core.logging import get_logger
from tokenplane.core.telemetry import record_suppressed_failure
from tokenplane.extraction.ops import SourceFile, TokenExtractor
from tokenplane.files.ops import FileStore
from tokenplane.inference.color import normalize_value
from tokenplane.inference.naming import slugify
from tokenplane.inference.ops import infer_tokens
from tokenplane.registry.models import DesignComponent, DesignToken
from tokenplane.registry.store import RegistryStore
from tokenplane.tokens.models import ExtractedToken, InferredToken

logger = get_logger("registry.ingest")


@dataclass
class IngestionReport:
    files_scanned: int = 0
    files_skipped: int = 0
    tokens_extracted: int = 0
    tokens_created: int = 0
    tokens_updated: int = 0
    usages_recorded: int = 0
    parents_linked: int = 0
    unresolved_references: int = 0
    components: list[DetectedComponent] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)


def read_project_files(project_id: str, files: FileStore) -> Iterator[SourceFile]:
    """Yield readable project files; unreadable ones are logged and skipped."""
    for ref in files.list_project_files(project_id):
        try:
            content = files.get_file(ref.id).content
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("file_unreadable", path=ref.path, error=str(e))
            record_suppressed_failure("file_read", path=ref.path)
            continue
        yield SourceFile(path=ref.path, content=content)


def _group_key(token: ExtractedToken) -> tuple[str, ...]:
    if token.name:
        declared = slugify(token.name)
        if declared:
            return ("name", declared)
    return ("value", token.category.value, normalize_value(token.value))


class _Ingestion:
    def __init__(self, project_id: str, store: RegistryStore, report: IngestionReport) -> None:
        self.project_id = project_id
        self.store = store
        self.report = report
        self.by_name: dict[str, DesignToken] = {}
        self.token_ids_by_file: dict[str, set[int]] = {}

    def lookup(self, name: str) -> DesignToken | None:
        slug = slugify(name)
        token = self.by_name.get(slug)
        if token is None:
            token = self.store.find_by_name(self.project_id, slug)
            if token is not None:
                self.by_name[slug] = token
        return token

    def fail(self, name: str, error: Exception) -> None:
        logger.warning("token_persist_failed", project_id=self.project_id, name=name, error=str(error))
        record_suppressed_failure("token_persist")
        self.report.failures.append(f"{name}: {error}")

    def persist_group(self, members: list[InferredToken]) -> None:
        first = members[0]
        name = first.suggested_name
        try:
            existing = self.store.find_by_name(self.project_id, name)
            if existing is None:
                metadata = first.token.metadata.model_copy(
                    update={
                        "extensions": {
                            **first.token.metadata.extensions,
                            "tier": first.tier.value,
                            "confidence": first.confidence,
                            "group_id": first.group_id,
                        }
                    }
                )
                token = self.store.create_token(
                    self.project_id, name, first.category, first.value, metadata=metadata
                )
                self.report.tokens_created += 1
            else:
                token = existing
                self.store.delete_usages_by_token(token.id)  # type: ignore[arg-type]
                self.report.tokens_updated += 1
            assert token.id is not None
            for member in members:
                self.store.create_usage(token.id, member.file_path, member.line_number, member.token.context)
                self.report.usages_recorded += 1
                self.token_ids_by_file.setdefault(member.file_path, set()).add(token.id)
        except RegistryError as e:
            self.fail(name, e)
            return
        self.by_name[name] = token

    def record_reference(self, token: ExtractedToken) -> None:
        reference = token.metadata.reference
        assert reference is not None
        target = self.lookup(reference.target)
        if target is None or target.id is None:
            self.report.unresolved_references += 1
            logger.debug("reference_unresolved", target=reference.target, file_path=token.file_path)
            return
        try:
            self.store.create_usage(target.id, token.file_path, token.line_number, token.context)
        except RegistryError as e:
            self.fail(target.name, e)
            return
        self.report.usages_recorded += 1
        self.token_ids_by_file.setdefault(token.file_path, set()).add(target.id)

    def link_parent(self, token: DesignToken) -> None:
        reference = token.get_metadata().reference
        if reference is None or token.id is None:
            return
        parent = self.lookup(reference.target)
        if parent is None or parent.id is None or parent.id == token.id:
            return
        if token.semantic_parent_id == parent.id:
            return
        try:
            self.store.update_token(token.id, semantic_parent_id=parent.id)
        except RegistryError as e:
            self.fail(token.name, e)
            return
        self.report.parents_linked += 1

    def persist_components(self, components: Sequence[DetectedComponent]) -> None:
        rows = [
            DesignComponent(
                project_id=self.project_id,
                name=c.name,
                file_path=c.primary_file,
                component_type=c.type,
                files_json=json.dumps(c.files),
                token_ids_json=json.dumps(
                    sorted(set().union(*(self.token_ids_by_file.get(path, set()) for path in c.files)))
                ),
                variants_json=json.dumps(c.variants),
                usage_frequency=len(c.files),
                details_json=json.dumps(c.details()),
            )
            for c in components
        ]
        try:
            self.store.replace_components(self.project_id, rows)
        except RegistryError as e:
            self.fail("components", e)


def ingest_project(
    project_id: str,
    files: FileStore,
    store: RegistryStore,
    extractor: TokenExtractor | None = None,
) -> IngestionReport:
    """Extract every project file, infer names, and persist tokens and usages.

    Re-ingesting refreshes usages of tokens that already exist by name.
    Persistence failures for one token are logged, counted and reported;
    the rest of the batch continues.
    """
    extractor = extractor or TokenExtractor()
    report = IngestionReport()

    listed = list(read_project_files(project_id, files))
    sources = [f for f in listed if extractor.is_eligible(f)]
    report.files_scanned = len(sources)
    report.files_skipped = len(listed) - len(sources)

    extracted = extractor.extract_files(sources)
    report.tokens_extracted = len(extracted)

    bare_references = [t for t in extracted if t.is_reference and not t.name]
    values = [t for t in extracted if not (t.is_reference and not t.name)]

    groups: dict[tuple[str, ...], list[InferredToken]] = {}
    for inferred in infer_tokens(values):
        groups.setdefault(_group_key(inferred.token), []).append(inferred)

    run = _Ingestion(project_id, store, report)
    for members in groups.values():
        run.persist_group(members)

    for token in bare_references:
        run.record_reference(token)

    for token in list(run.by_name.values()):
        run.link_parent(token)

    report.components = detect_components(sources)
    run.persist_components(report.components)

    logger.info(
        "ingestion_complete",
        project_id=project_id,
        files=report.files_scanned,
        extracted=report.tokens_extracted,
        created=report.tokens_created,
        updated=report.tokens_updated,
        usages=report.usages_recorded,
        parents=report.parents_linked,
        components=len(report.components),
        failures=len(report.failures),
    )
    return report
