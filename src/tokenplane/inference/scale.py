"""Geometric scale detection for spacing and font sizes.

``None`` means "no detectable pattern"; it is not an error.
"""

from __future__ import annotations

import statistics
from collections.abc import Iterable, Sequence
from itertools import pairwise

from tokenplane.config.constants import (
    SCALE_MIN_MATCH_FRACTION,
    SCALE_MIN_VALUES,
    SPACING_SCALE_RATIOS,
    SPACING_SCALE_TOLERANCE,
    TYPE_SCALE_RATIOS,
    TYPE_SCALE_TOLERANCE,
)
from tokenplane.inference.color import extract_numeric_value
from tokenplane.tokens.models import ExtractedToken, ScalePattern


def _relative_error(observed: float, expected: float) -> float:
    return abs(observed - expected) / expected


def detect_ratio_scale(
    values: Iterable[float],
    candidates: Sequence[float],
    tolerance: float,
) -> ScalePattern | None:
    """Match consecutive ratios of the distinct positive ``values`` against ``candidates``.

    A candidate is accepted when at least 60% of the consecutive ratios are
    within ``tolerance`` of it. Among accepted candidates the one matching
    the most ratios wins, ties broken by the smaller mean relative error,
    then by table order. Without an accepted candidate, the median ratio is
    used if every ratio is within tolerance of it.
    """
    distinct = sorted({v for v in values if v > 0})
    if len(distinct) < SCALE_MIN_VALUES:
        return None

    ratios = [b / a for a, b in pairwise(distinct)]
    best: tuple[tuple[int, float], float] | None = None
    for candidate in candidates:
        errors = [_relative_error(r, candidate) for r in ratios]
        matched = [e for e in errors if e <= tolerance]
        if len(matched) / len(ratios) < SCALE_MIN_MATCH_FRACTION:
            continue
        key = (len(matched), -statistics.fmean(matched))
        if best is None or key > best[0]:
            best = (key, candidate)

    if best is not None:
        return ScalePattern(base_value=distinct[0], ratio=best[1], values=tuple(distinct))

    median = statistics.median(ratios)
    if all(_relative_error(r, median) <= tolerance for r in ratios):
        return ScalePattern(base_value=distinct[0], ratio=round(median, 3), values=tuple(distinct))
    return None


def detect_scale_pattern(tokens: Sequence[ExtractedToken]) -> ScalePattern | None:
    """Spacing scale across the numeric values of ``tokens``."""
    values = [n for n in (extract_numeric_value(t.value) for t in tokens) if n is not None]
    return detect_ratio_scale(values, SPACING_SCALE_RATIOS, SPACING_SCALE_TOLERANCE)


def detect_typographic_scale(sizes: Iterable[float]) -> ScalePattern | None:
    """Modular type scale across font sizes in px."""
    return detect_ratio_scale(sizes, TYPE_SCALE_RATIOS, TYPE_SCALE_TOLERANCE)
