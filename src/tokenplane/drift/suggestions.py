"""Tokenization suggestions: best registry token for each drifting value."""

from __future__ import annotations

from collections.abc import Sequence

from tokenplane.config.constants import (
    COLOR_CONFIDENCE_BANDS,
    NUMERIC_CONFIDENCE_BANDS,
    SUGGESTION_MIN_CONFIDENCE,
)
from tokenplane.drift.models import DriftItem, TokenizationSuggestion, TokenSummary
from tokenplane.inference.color import extract_numeric_value, normalize_value, parse_color, rgb_distance
from tokenplane.tokens.models import TokenCategory

NUMERIC_CATEGORIES = frozenset({TokenCategory.SPACING, TokenCategory.BORDER, TokenCategory.TYPOGRAPHY})

_COLOR_REASONS = {
    1.0: "Exact color match",
    0.9: "Very similar color",
    0.7: "Similar color",
    0.4: "Approximate color",
}
_NUMERIC_REASONS = {0.85: "Very close value", 0.6: "Close value", 0.35: "Approximate value"}
_TEMPLATE_MARKERS = ("{{", "{%", "| ", "assign ")


def categories_compatible(a: TokenCategory, b: TokenCategory) -> bool:
    """Same category, or both numeric (spacing, border, typography)."""
    return a == b or (a in NUMERIC_CATEGORIES and b in NUMERIC_CATEGORIES)


def _color_confidence(a: str, b: str) -> tuple[float, str]:
    rgb_a = parse_color(a)
    rgb_b = parse_color(b)
    if rgb_a is None or rgb_b is None:
        return 0.0, ""
    distance = rgb_distance(rgb_a, rgb_b)
    for limit, confidence in COLOR_CONFIDENCE_BANDS:
        if distance <= limit:
            if distance == 0:
                return confidence, _COLOR_REASONS[confidence]
            return confidence, f"{_COLOR_REASONS[confidence]} (RGB distance {distance:.1f})"
    return 0.0, ""


def _numeric_confidence(a: str, b: str) -> tuple[float, str]:
    num_a = extract_numeric_value(a)
    num_b = extract_numeric_value(b)
    if num_a is None or num_b is None:
        return 0.0, ""
    if num_a == num_b:
        return 1.0, "Exact numeric match"
    diff = abs(num_a - num_b)
    ratio = diff / max(abs(num_a), abs(num_b), 1.0)
    for limit, confidence in NUMERIC_CONFIDENCE_BANDS:
        if ratio <= limit:
            return confidence, f"{_NUMERIC_REASONS[confidence]} ({diff:.1f}px difference)"
    return 0.0, ""


def compute_confidence(hardcoded: str, token_value: str, category: TokenCategory) -> tuple[float, str]:
    """(confidence, reason) that ``token_value`` can replace ``hardcoded``."""
    if normalize_value(hardcoded) == normalize_value(token_value):
        return 1.0, "Exact value match"
    if category is TokenCategory.COLOR:
        return _color_confidence(hardcoded, token_value)
    if category in NUMERIC_CATEGORIES:
        return _numeric_confidence(hardcoded, token_value)
    return 0.0, ""


def is_template_context(context: str) -> bool:
    return any(marker in context for marker in _TEMPLATE_MARKERS)


def build_replacement(token_name: str, context: str) -> str:
    """Settings reference in template context, custom property otherwise."""
    if is_template_context(context):
        return f"{{{{ settings.{token_name.replace('-', '_')} }}}}"
    return f"var(--{token_name.replace('_', '-')})"


def _category_of(token: TokenSummary) -> TokenCategory | None:
    try:
        return TokenCategory(token.category)
    except ValueError:
        return None


def find_best_match(item: DriftItem, tokens: Sequence[TokenSummary]) -> TokenizationSuggestion | None:
    best_confidence = 0.0
    best: TokenSummary | None = None
    best_reason = ""
    for token in tokens:
        category = _category_of(token)
        if category is None or not categories_compatible(item.category, category):
            continue
        confidence, reason = compute_confidence(item.value, token.value, item.category)
        if confidence > best_confidence:
            best_confidence, best, best_reason = confidence, token, reason

    if best is None or best_confidence < SUGGESTION_MIN_CONFIDENCE:
        return None
    return TokenizationSuggestion(
        hardcoded_value=item.value,
        line_number=item.line_number,
        suggested_token=best.name,
        suggested_replacement=build_replacement(best.name, item.context),
        confidence=best_confidence,
        reason=best_reason,
    )


def generate_suggestions(
    items: Sequence[DriftItem], tokens: Sequence[TokenSummary]
) -> list[TokenizationSuggestion]:
    """Best match per item, highest confidence first. No tokens, no suggestions."""
    if not tokens:
        return []
    suggestions = [s for s in (find_best_match(item, tokens) for item in items) if s is not None]
    suggestions.sort(key=lambda s: s.confidence, reverse=True)
    return suggestions
