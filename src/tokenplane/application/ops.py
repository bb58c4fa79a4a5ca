"""Token application: impact analysis, atomic apply, rollback.

Apply is read-all, validate-all, write-all. If any rewritten file fails
its syntax gate nothing is written. Write failures after the gate are
reported with the files that did change; they are not retried or undone.
Callers serialize applies per project.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from tokenplane.config.constants import RISK_LOW_MAX_INSTANCES, RISK_MEDIUM_MAX_INSTANCES
from tokenplane.config.models import ApplyConfig
from tokenplane.core.errors import ApplyError, RegistryError, RollbackError
from tokenplane.core.logging import get_logger
from tokenplane.core.telemetry import record_suppressed_failure
from tokenplane.files.ops import FileRef, FileStore
from tokenplane.application.models import (
    DeploymentResult,
    FileImpact,
    ImpactAnalysis,
    RiskLevel,
    TokenChange,
)
from tokenplane.application.validation import validate_by_file_type
from tokenplane.registry.store import RegistryStore

logger = get_logger("application")


def build_search_pattern(change: TokenChange) -> re.Pattern[str]:
    """Regex locating every occurrence a change rewrites."""
    if change.type == "replace":
        assert change.old_value is not None
        return re.compile(re.escape(change.old_value))
    name = re.escape(change.token_name)
    if change.type == "rename":
        # Name only; spacing and fallbacks inside var() stay as written
        return re.compile(rf"(?<![\w-])--{name}(?![\w-])")
    # A declaration ends at its semicolon or at the closing brace of its block
    return re.compile(rf"((?<![\w-])--{name}\s*:[^;{{}}]*;?\s*|var\(\s*--{name}\s*\))")


def apply_change(content: str, change: TokenChange) -> tuple[str, int]:
    """(rewritten content, number of replacements)."""
    pattern = build_search_pattern(change)

    def replacement(m: re.Match[str]) -> str:
        matched = m.group(0)
        if change.type == "replace":
            return change.new_value or ""
        if change.type == "rename":
            return f"--{change.new_value}"
        if matched.startswith("var("):
            return change.new_value or "inherit"
        return ""

    return pattern.subn(replacement, content)


def count_matches(content: str, change: TokenChange) -> int:
    return sum(1 for _ in build_search_pattern(change).finditer(content))


def assess_risk(instance_count: int) -> RiskLevel:
    if instance_count <= RISK_LOW_MAX_INSTANCES:
        return "low"
    if instance_count <= RISK_MEDIUM_MAX_INSTANCES:
        return "medium"
    return "high"


def summarize_risk(impacts: Sequence[FileImpact]) -> str:
    if not impacts:
        return "No files affected."
    high = sum(1 for i in impacts if i.risk_level == "high")
    medium = sum(1 for i in impacts if i.risk_level == "medium")
    if high:
        return f"High risk: {high} file(s) with many changes. Review carefully before applying."
    if medium:
        return f"Medium risk: {medium} file(s) with moderate changes."
    return f"Low risk: {len(impacts)} file(s) with minor changes."


@dataclass
class _Rewrite:
    ref: FileRef
    new_content: str
    instance_count: int


class TokenApplicator:
    """Rewrites project files for token changes and records version snapshots."""

    def __init__(
        self,
        files: FileStore,
        store: RegistryStore,
        config: ApplyConfig | None = None,
    ) -> None:
        self.files = files
        self.store = store
        self.config = config or ApplyConfig()

    def _read(self, ref: FileRef) -> str | None:
        try:
            content = self.files.get_file(ref.id).content
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("file_unreadable", path=ref.path, error=str(e))
            record_suppressed_failure("file_read", path=ref.path)
            return None
        return content or None

    def _project_files(self, project_id: str) -> list[FileRef]:
        refs = self.files.list_project_files(project_id)
        limit = self.config.max_files_per_scan
        if len(refs) > limit:
            logger.warning("file_scan_truncated", project_id=project_id, files=len(refs), limit=limit)
            refs = refs[:limit]
        return refs

    def analyze_impact(self, project_id: str, changes: Sequence[TokenChange]) -> ImpactAnalysis:
        """Dry run: matches per file and a risk summary. Nothing is written."""
        impacts: list[FileImpact] = []
        for ref in self._project_files(project_id):
            content = self._read(ref)
            if content is None:
                continue
            count = sum(count_matches(content, change) for change in changes)
            if count:
                impacts.append(FileImpact(ref.path, count, assess_risk(count)))

        return ImpactAnalysis(
            files_affected=impacts,
            total_instances=sum(i.instance_count for i in impacts),
            risk_summary=summarize_risk(impacts),
        )

    def _rewrite_all(self, project_id: str, changes: Sequence[TokenChange]) -> list[_Rewrite]:
        rewrites: list[_Rewrite] = []
        for ref in self._project_files(project_id):
            content = self._read(ref)
            if content is None:
                continue
            total = 0
            for change in changes:
                content, count = apply_change(content, change)
                total += count
            if total:
                rewrites.append(_Rewrite(ref, content, total))
        return rewrites

    def apply_token_changes(
        self,
        project_id: str,
        changes: Sequence[TokenChange],
        author_id: str,
    ) -> DeploymentResult:
        """Apply ``changes`` to every project file atomically."""
        rewrites = self._rewrite_all(project_id, changes)
        if not rewrites:
            return DeploymentResult(success=True)

        errors: list[str] = []
        for rewrite in rewrites:
            validation = validate_by_file_type(rewrite.ref.path, rewrite.new_content)
            if not validation.valid:
                errors.append(ApplyError.validation_failed(rewrite.ref.path, validation.errors).message)
        if errors:
            logger.warning("apply_aborted", project_id=project_id, files=len(rewrites), errors=len(errors))
            return DeploymentResult(success=False, errors=errors)

        files_modified: list[str] = []
        instances_changed = 0
        for rewrite in rewrites:
            try:
                self.files.update_file(rewrite.ref.id, rewrite.new_content)
            except OSError as e:
                errors.append(f"Failed to write {rewrite.ref.path}: {e}")
                continue
            files_modified.append(rewrite.ref.path)
            instances_changed += rewrite.instance_count

        if errors:
            logger.error(
                "apply_partially_written",
                project_id=project_id,
                written=len(files_modified),
                failed=len(errors),
            )
            return DeploymentResult(
                success=False,
                files_modified=files_modified,
                instances_changed=instances_changed,
                errors=errors,
            )

        version_id: int | None = None
        try:
            version = self.store.create_version(
                project_id,
                {
                    "token_changes": [c.model_dump(mode="json") for c in changes],
                    "files_modified": files_modified,
                    "instances_changed": instances_changed,
                },
                author_id,
                description=(
                    f"Applied {len(changes)} token change(s) across {len(files_modified)} file(s)"
                ),
            )
            version_id = version.id
        except RegistryError as e:
            logger.warning("version_snapshot_failed", project_id=project_id, error=str(e))
            record_suppressed_failure("version_snapshot")

        logger.info(
            "apply_complete",
            project_id=project_id,
            files=len(files_modified),
            instances=instances_changed,
            version_id=version_id,
        )
        return DeploymentResult(
            success=True,
            files_modified=files_modified,
            instances_changed=instances_changed,
            version_id=version_id,
        )

    def rollback(self, project_id: str, version_id: int) -> DeploymentResult:
        """Re-apply the inverse of a recorded version.

        Raises:
            RollbackError: unknown version, no changes, a delete in the set
                (not invertible), or the inverse apply failed.
        """
        version = self.store.get_version(version_id)
        if version is None or version.project_id != project_id:
            raise RollbackError.version_not_found(str(version_id))

        recorded = [TokenChange.model_validate(c) for c in version.get_changes().get("token_changes", [])]
        if not recorded:
            raise RollbackError.empty_version(str(version_id))

        deleted = [c.token_name for c in recorded if c.type == "delete"]
        if deleted:
            raise RollbackError.not_invertible(str(version_id), deleted)

        inverted = [c.inverted() for c in reversed(recorded)]
        result = self.apply_token_changes(
            project_id,
            [c for c in inverted if c is not None],
            self.config.system_actor,
        )
        if not result.success:
            raise RollbackError.failed(str(version_id), result.errors)

        logger.info("rollback_complete", project_id=project_id, version_id=version_id)
        return result
