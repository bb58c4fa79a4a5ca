"""Theme standardization audit.

Every literal value in the project is sorted into one of four actions:

- conform: an existing token already expresses it (exactly or nearly)
- unify: near-identical untokenized colors that should collapse to one value
- adopt: an untokenized value that should become a new token
- remove: a registry token with no recorded usage

The audit only reports; nothing is written.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from tokenplane.config.constants import (
    AUDIT_COLOR_FAR_DELTA_E,
    AUDIT_COLOR_NEAR_DELTA_E,
    AUDIT_COLOR_UNIFY_DELTA_E,
    AUDIT_NUMERIC_NEAR_RATIO,
)
from tokenplane.core.logging import get_logger
from tokenplane.drift.suggestions import NUMERIC_CATEGORIES
from tokenplane.extraction.ops import TokenExtractor
from tokenplane.files.ops import FileStore
from tokenplane.inference.color import color_delta_e, extract_numeric_value, normalize_value
from tokenplane.inference.naming import suggest_token_name
from tokenplane.registry.ingest import read_project_files
from tokenplane.registry.models import DesignToken
from tokenplane.registry.store import RegistryStore
from tokenplane.standardization.models import (
    AdoptAction,
    AuditStats,
    ConformAction,
    RemoveAction,
    StandardizationAudit,
    TargetToken,
    UnifyAction,
    ValueLocation,
)
from tokenplane.tokens.models import ExtractedToken, TokenCategory

logger = get_logger("standardization")


@dataclass(frozen=True)
class _Occurrence:
    token: ExtractedToken
    normalized: str


def _numeric_ratio(a: str, b: str) -> float | None:
    num_a = extract_numeric_value(a)
    num_b = extract_numeric_value(b)
    if num_a is None or num_b is None:
        return None
    return abs(num_a - num_b) / max(abs(num_a), abs(num_b), 1.0)


def near_confidence(value: str, token_value: str, category: TokenCategory) -> float | None:
    """Confidence that ``token_value`` stands in for ``value``; ``None`` if too far."""
    if category is TokenCategory.COLOR:
        distance = color_delta_e(value, token_value)
        if distance is None or distance > AUDIT_COLOR_FAR_DELTA_E:
            return None
        if distance == 0:
            return 1.0
        if distance <= AUDIT_COLOR_NEAR_DELTA_E:
            return 0.9
        return round(0.6 + 0.3 * (AUDIT_COLOR_FAR_DELTA_E - distance) / AUDIT_COLOR_FAR_DELTA_E, 3)

    if category in NUMERIC_CATEGORIES:
        ratio = _numeric_ratio(value, token_value)
        if ratio is None or ratio > AUDIT_NUMERIC_NEAR_RATIO:
            return None
        if ratio == 0:
            return 1.0
        return 0.85 if ratio <= 0.05 else 0.6
    return None


def find_near_match(
    value: str, category: TokenCategory, tokens: Sequence[DesignToken]
) -> tuple[DesignToken, float] | None:
    """First same-category token close enough to ``value``."""
    for token in tokens:
        if token.category != category.value:
            continue
        confidence = near_confidence(value, token.value, category)
        if confidence is not None:
            return token, confidence
    return None


def _target(token: DesignToken) -> TargetToken:
    return TargetToken(id=token.id, name=token.name, value=token.value)


def partition_unmatched(
    unmatched: Sequence[_Occurrence],
) -> tuple[list[list[_Occurrence]], list[_Occurrence]]:
    """Split into unify groups (two or more near-identical colors) and adopt items."""
    colors = [o for o in unmatched if o.token.category is TokenCategory.COLOR]
    groups: list[list[_Occurrence]] = []
    adopt: list[_Occurrence] = []
    used: set[int] = set()

    for i, seed in enumerate(colors):
        if i in used:
            continue
        used.add(i)
        group = [seed]
        for j in range(i + 1, len(colors)):
            if j in used:
                continue
            distance = color_delta_e(seed.token.value, colors[j].token.value)
            if distance is not None and distance < AUDIT_COLOR_UNIFY_DELTA_E:
                group.append(colors[j])
                used.add(j)
        if len(group) >= 2:
            groups.append(group)
        else:
            adopt.append(seed)

    adopt.extend(o for o in unmatched if o.token.category is not TokenCategory.COLOR)
    return groups, adopt


def standardize_theme(
    project_id: str,
    files: FileStore,
    store: RegistryStore,
    extractor: TokenExtractor | None = None,
) -> StandardizationAudit:
    """Audit every project file against the registry."""
    extractor = extractor or TokenExtractor()
    stored = store.list_by_project(project_id)
    known_names = {t.name.lower() for t in stored}
    by_value: dict[str, DesignToken] = {}
    for stored_token in stored:
        by_value.setdefault(normalize_value(stored_token.value), stored_token)

    sources = [f for f in read_project_files(project_id, files) if f.content]
    occurrences: list[_Occurrence] = []
    for occurrence in extractor.extract_files(sources):
        if occurrence.is_reference:
            continue
        if occurrence.name and occurrence.name.lower() in known_names:
            continue
        occurrences.append(_Occurrence(occurrence, normalize_value(occurrence.value)))

    counts = Counter(o.normalized for o in occurrences)
    audit = StandardizationAudit()
    unmatched: list[_Occurrence] = []
    seen: set[tuple[str, int, str]] = set()

    for occurrence in occurrences:
        token = occurrence.token
        key = (token.file_path, token.line_number, occurrence.normalized)
        if key in seen:
            continue
        seen.add(key)

        exact = by_value.get(occurrence.normalized)
        match = (exact, 1.0) if exact is not None else find_near_match(token.value, token.category, stored)
        if match is None:
            unmatched.append(occurrence)
            continue
        target, confidence = match
        audit.conform.append(
            ConformAction(
                id=f"conform-{len(audit.conform)}",
                file_path=token.file_path,
                line=token.line_number,
                hardcoded_value=token.value,
                target_token=_target(target),
                confidence=confidence,
            )
        )

    groups, adopt_items = partition_unmatched(unmatched)
    for group in groups:
        audit.unify.append(
            UnifyAction(
                id=f"unify-{len(audit.unify)}",
                values=tuple(
                    ValueLocation(o.token.value, o.token.file_path, o.token.line_number) for o in group
                ),
                canonical_value=group[0].token.value,
                suggested_name=f"color-unified-{len(audit.unify)}",
            )
        )

    existing_names = [t.name for t in stored]
    for item in adopt_items:
        token = item.token
        suggestion = suggest_token_name(token, existing_names)
        audit.adopt.append(
            AdoptAction(
                id=f"adopt-{len(audit.adopt)}",
                file_path=token.file_path,
                line=token.line_number,
                hardcoded_value=token.value,
                suggested_name=suggestion.name,
                suggested_category=token.category,
                occurrence_count=counts[item.normalized],
            )
        )

    usage_counts = store.count_usages(project_id)
    for stored_token in stored:
        if usage_counts.get(stored_token.id or -1, 0) == 0:
            audit.remove.append(
                RemoveAction(
                    id=f"remove-{len(audit.remove)}",
                    token_id=stored_token.id,
                    token_name=stored_token.name,
                    token_value=stored_token.value,
                )
            )

    audit.stats = AuditStats(
        files_scanned=len(sources),
        values_found=len(occurrences),
        conform_count=len(audit.conform),
        adopt_count=len(audit.adopt),
        unify_count=len(audit.unify),
        remove_count=len(audit.remove),
    )
    logger.info(
        "standardization_audit_complete",
        project_id=project_id,
        files=audit.stats.files_scanned,
        values=audit.stats.values_found,
        conform=audit.stats.conform_count,
        adopt=audit.stats.adopt_count,
        unify=audit.stats.unify_count,
        remove=audit.stats.remove_count,
    )
    return audit
