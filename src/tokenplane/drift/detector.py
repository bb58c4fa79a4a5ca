"""Drift detection: literal values in a file that should be tokens.

Results are advisory. Each call re-reads the registry, so a concurrent
apply may make a result stale; nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from tokenplane.config.constants import DRIFT_COLOR_NEAR_DISTANCE, DRIFT_NUMERIC_NEAR_RATIO
from tokenplane.core.logging import get_logger
from tokenplane.drift.models import DriftItem, DriftResult, TokenSummary
from tokenplane.drift.suggestions import generate_suggestions
from tokenplane.extraction.ops import extract_tokens
from tokenplane.inference.color import extract_numeric_value, normalize_value, parse_color, rgb_distance
from tokenplane.inference.naming import slugify
from tokenplane.tokens.models import ExtractedToken, TokenCategory

logger = get_logger("drift")


class TokenSource(Protocol):
    def list_by_project(self, project_id: str) -> Sequence[TokenSummary]: ...


def _is_near(value: str, category: TokenCategory, token: TokenSummary) -> bool:
    if token.category != category.value:
        return False
    if category is TokenCategory.COLOR:
        rgb = parse_color(value)
        other = parse_color(token.value)
        return rgb is not None and other is not None and rgb_distance(rgb, other) <= DRIFT_COLOR_NEAR_DISTANCE
    number = extract_numeric_value(value)
    other_number = extract_numeric_value(token.value)
    if number is None or other_number is None:
        return False
    scale = max(abs(number), abs(other_number))
    if scale == 0:
        return True
    return abs(number - other_number) / scale <= DRIFT_NUMERIC_NEAR_RATIO


class DriftDetector:
    def __init__(self, store: TokenSource) -> None:
        self.store = store

    def _already_tokenized(self, occurrence: ExtractedToken, known_names: set[str]) -> bool:
        if occurrence.is_reference:
            return True
        if occurrence.name:
            return occurrence.name.lower() in known_names or slugify(occurrence.name) in known_names
        return False

    def classify(
        self, occurrences: Sequence[ExtractedToken], tokens: Sequence[TokenSummary], file_path: str
    ) -> DriftResult:
        known_names = {t.name.lower() for t in tokens}
        known_values = {normalize_value(t.value) for t in tokens}
        result = DriftResult(file_path=file_path)

        for occurrence in occurrences:
            if self._already_tokenized(occurrence, known_names):
                continue
            item = DriftItem(
                value=occurrence.value,
                line_number=occurrence.line_number,
                context=occurrence.context,
                category=occurrence.category,
            )
            if normalize_value(item.value) in known_values:
                result.exact_matches.append(item)
            elif any(_is_near(item.value, item.category, t) for t in tokens):
                result.near_matches.append(item)
            else:
                result.hardcoded_values.append(item)

        result.suggestions = generate_suggestions(
            [*result.exact_matches, *result.near_matches, *result.hardcoded_values], tokens
        )
        return result

    def detect_drift(self, project_id: str, content: str, file_path: str) -> DriftResult:
        """Classify every untokenized literal in ``content`` against the registry."""
        tokens = self.store.list_by_project(project_id)
        result = self.classify(extract_tokens(content, file_path), tokens, file_path)
        logger.debug(
            "drift_detected",
            project_id=project_id,
            file_path=file_path,
            exact=len(result.exact_matches),
            near=len(result.near_matches),
            hardcoded=len(result.hardcoded_values),
            suggestions=len(result.suggestions),
        )
        return result
