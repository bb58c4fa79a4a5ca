"""Inference pipeline: group, detect scales, flag inconsistencies, name, tier."""

from __future__ import annotations

import re
from collections.abc import Sequence
from itertools import combinations

from tokenplane.config.constants import NEAR_DUPLICATE_COLOR_DELTA_E
from tokenplane.core.logging import get_logger
from tokenplane.inference.color import color_delta_e, extract_numeric_value, normalize_value
from tokenplane.inference.grouping import group_similar_values
from tokenplane.inference.naming import suggest_token_name
from tokenplane.inference.scale import detect_scale_pattern, detect_typographic_scale
from tokenplane.tokens.models import (
    ExtractedToken,
    InferredToken,
    TokenCategory,
    TokenGroup,
    TokenTier,
)

logger = get_logger("inference")

COMPONENT_KEYWORDS = frozenset({"button", "card", "nav", "header", "footer", "modal", "form"})
SEMANTIC_KEYWORDS = frozenset(
    {
        "primary",
        "secondary",
        "accent",
        "error",
        "success",
        "warning",
        "background",
        "foreground",
        "text",
        "heading",
        "body",
    }
)

UNGROUPED = "ungrouped"
_NAME_PARTS = re.compile(r"[-_.]")


def infer_tier(name: str) -> TokenTier:
    """Classify by the first name segment that is a component or semantic keyword."""
    for part in _NAME_PARTS.split(name.lower()):
        if part in COMPONENT_KEYWORDS:
            return TokenTier.COMPONENT
        if part in SEMANTIC_KEYWORDS:
            return TokenTier.SEMANTIC
    return TokenTier.PRIMITIVE


def _format_number(value: float) -> str:
    return f"{value:g}"


def annotate_scales(tokens: Sequence[ExtractedToken], groups: list[TokenGroup]) -> None:
    """Append detected spacing and typographic scales to matching group patterns."""
    spacing = detect_scale_pattern([t for t in tokens if t.category is TokenCategory.SPACING])
    if spacing is not None:
        suffix = f" (scale: base={_format_number(spacing.base_value)}, ratio={_format_number(spacing.ratio)})"
        for group in groups:
            if group.category is TokenCategory.SPACING:
                group.pattern += suffix

    sizes = [
        n
        for n in (extract_numeric_value(t.value) for t in tokens if t.category is TokenCategory.TYPOGRAPHY)
        if n is not None and n > 0
    ]
    typographic = detect_typographic_scale(sizes)
    if typographic is not None:
        suffix = (
            f" (typographic scale: base={_format_number(typographic.base_value)}px,"
            f" ratio={_format_number(typographic.ratio)})"
        )
        for group in groups:
            if group.category is TokenCategory.TYPOGRAPHY:
                group.pattern += suffix


def detect_inconsistencies(tokens: Sequence[ExtractedToken]) -> dict[str, list[str]]:
    """Issues per token id.

    Flags values declared under more than one name, and pairs of distinct
    colors close enough to be the same color (both sides get the issue).
    """
    issues: dict[str, list[str]] = {}

    names_by_value: dict[str, dict[str, None]] = {}
    for token in tokens:
        if token.name:
            names_by_value.setdefault(normalize_value(token.value), {})[token.name] = None

    for token in tokens:
        names = names_by_value.get(normalize_value(token.value))
        if names and len(names) > 1:
            issues.setdefault(token.id, []).append(
                f'Same value "{token.value}" used under multiple names: {", ".join(names)}'
            )

    colors = [t for t in tokens if t.category is TokenCategory.COLOR]
    for a, b in combinations(colors, 2):
        if normalize_value(a.value) == normalize_value(b.value):
            continue
        distance = color_delta_e(a.value, b.value)
        if distance is None or distance >= NEAR_DUPLICATE_COLOR_DELTA_E:
            continue
        message = f'Very similar color values "{a.value}" and "{b.value}": consider unifying.'
        issues.setdefault(a.id, []).append(message)
        issues.setdefault(b.id, []).append(message)

    return issues


def infer_tokens(tokens: Sequence[ExtractedToken]) -> list[InferredToken]:
    """Run grouping, scale detection, inconsistency detection and naming.

    Naming is sequential so later suggestions see earlier names. Input
    tokens are not modified.
    """
    if not tokens:
        return []

    groups = group_similar_values(tokens)
    annotate_scales(tokens, groups)
    group_of = {t.id: g.id for g in groups for t in g.tokens}
    issues = detect_inconsistencies(tokens)

    assigned: set[str] = set()
    inferred: list[InferredToken] = []
    for token in tokens:
        suggestion = suggest_token_name(token, assigned)
        assigned.add(suggestion.name)
        inferred.append(
            InferredToken(
                token=token,
                suggested_name=suggestion.name,
                confidence=suggestion.confidence,
                group_id=group_of.get(token.id, UNGROUPED),
                tier=infer_tier(suggestion.name),
                inconsistencies=issues.get(token.id, []),
            )
        )

    logger.debug(
        "inference_complete",
        tokens=len(inferred),
        groups=len(groups),
        inconsistent=sum(1 for t in inferred if t.inconsistencies),
    )
    return inferred
