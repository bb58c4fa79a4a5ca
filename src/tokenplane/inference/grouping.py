"""Similarity grouping of extracted tokens, per category.

- color: greedy single-pass clustering on CIEDE2000 distance to each
  cluster's rounded-average centroid. O(n * clusters), acceptable for one
  project's files but the known scaling limit of inference.
- spacing: numeric proximity (rem/em at 16px) to the running cluster average.
- typography: first font family; numeric sizes share one bucket.
- everything else: exact value.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from tokenplane.config.constants import COLOR_CLUSTER_DELTA_E, SPACING_CLUSTER_PX
from tokenplane.inference.color import RGB, average_rgb, delta_e, extract_numeric_value, parse_color
from tokenplane.tokens.models import ExtractedToken, TokenCategory, TokenGroup

_QUOTES = re.compile(r"['\"]")
_SIZE_BUCKET = "__size__"


@dataclass
class _ColorCluster:
    tokens: list[ExtractedToken] = field(default_factory=list)
    colors: list[RGB] = field(default_factory=list)

    @property
    def centroid(self) -> RGB:
        return average_rgb(self.colors)


def describe_color_group(colors: Sequence[RGB]) -> str:
    """Human label from the average color of a cluster."""
    if not colors:
        return "colors"
    r, g, b = average_rgb(colors)
    top = max(r, g, b)
    mean = (r + g + b) / 3
    if mean < 40:
        return "dark / near-black colors"
    if mean > 220:
        return "light / near-white colors"
    if r == top and r > g + 30 and r > b + 30:
        return "shades of red"
    if g == top and g > r + 30 and g > b + 30:
        return "shades of green"
    if b == top and b > r + 30 and b > g + 30:
        return "shades of blue"
    if r > 180 and g > 180 and b < 100:
        return "shades of yellow"
    if r > 180 and b > 100 and g < 100:
        return "shades of purple"
    if r < 100 and g > 150 and b > 150:
        return "shades of cyan"
    return "mixed colors"


def _group_colors(tokens: list[ExtractedToken]) -> list[TokenGroup]:
    clusters: list[_ColorCluster] = []
    unparseable: list[ExtractedToken] = []

    for token in tokens:
        rgb = parse_color(token.value)
        if rgb is None:
            unparseable.append(token)
            continue
        for cluster in clusters:
            if delta_e(rgb, cluster.centroid) < COLOR_CLUSTER_DELTA_E:
                cluster.tokens.append(token)
                cluster.colors.append(rgb)
                break
        else:
            clusters.append(_ColorCluster([token], [rgb]))

    groups = [
        TokenGroup(
            id=f"color-group-{i}",
            category=TokenCategory.COLOR,
            tokens=cluster.tokens,
            pattern=describe_color_group(cluster.colors),
        )
        for i, cluster in enumerate(clusters, start=1)
    ]
    if unparseable:
        groups.append(
            TokenGroup(
                id="color-group-unparseable",
                category=TokenCategory.COLOR,
                tokens=unparseable,
                pattern="colors (dynamic / unparseable values)",
            )
        )
    return groups


def _group_spacing(tokens: list[ExtractedToken]) -> list[TokenGroup]:
    measured: list[tuple[float, ExtractedToken]] = []
    other: list[ExtractedToken] = []
    for token in tokens:
        number = extract_numeric_value(token.value)
        if number is None:
            other.append(token)
        else:
            measured.append((number, token))
    measured.sort(key=lambda pair: pair[0])

    clusters: list[tuple[list[ExtractedToken], list[float]]] = []
    for number, token in measured:
        if clusters:
            members, values = clusters[-1]
            if abs(number - sum(values) / len(values)) <= SPACING_CLUSTER_PX:
                members.append(token)
                values.append(number)
                continue
        clusters.append(([token], [number]))

    groups = [
        TokenGroup(
            id=f"spacing-group-{i}",
            category=TokenCategory.SPACING,
            tokens=members,
            pattern=f"~{round(sum(values) / len(values))}px spacing values",
        )
        for i, (members, values) in enumerate(clusters, start=1)
    ]
    if other:
        groups.append(
            TokenGroup(
                id="spacing-group-other",
                category=TokenCategory.SPACING,
                tokens=other,
                pattern="non-numeric spacing values",
            )
        )
    return groups


def font_family_key(value: str) -> str:
    """First family of a font stack, lowercased and unquoted; sizes map to one bucket."""
    family = _QUOTES.sub("", value.split(",")[0].strip()).lower()
    if not family or family[0].isdigit():
        return _SIZE_BUCKET
    return family


def _group_typography(tokens: list[ExtractedToken]) -> list[TokenGroup]:
    by_family: dict[str, list[ExtractedToken]] = {}
    for token in tokens:
        by_family.setdefault(font_family_key(token.value), []).append(token)

    return [
        TokenGroup(
            id=f"typography-group-{i}",
            category=TokenCategory.TYPOGRAPHY,
            tokens=members,
            pattern="font sizes" if family == _SIZE_BUCKET else f"{family} font family",
        )
        for i, (family, members) in enumerate(by_family.items(), start=1)
    ]


def _group_exact(tokens: list[ExtractedToken], category: TokenCategory) -> list[TokenGroup]:
    by_value: dict[str, list[ExtractedToken]] = {}
    for token in tokens:
        by_value.setdefault(token.value, []).append(token)

    return [
        TokenGroup(
            id=f"{category.value}-group-{i}",
            category=category,
            tokens=members,
            pattern=f"{category.value}: {value}",
        )
        for i, (value, members) in enumerate(by_value.items(), start=1)
    ]


_STRATEGIES: dict[TokenCategory, Callable[[list[ExtractedToken]], list[TokenGroup]]] = {
    TokenCategory.COLOR: _group_colors,
    TokenCategory.SPACING: _group_spacing,
    TokenCategory.TYPOGRAPHY: _group_typography,
}


def group_similar_values(tokens: Sequence[ExtractedToken]) -> list[TokenGroup]:
    """Partition tokens by category (first-seen order), then cluster within each."""
    by_category: dict[TokenCategory, list[ExtractedToken]] = {}
    for token in tokens:
        by_category.setdefault(token.category, []).append(token)

    groups: list[TokenGroup] = []
    for category, members in by_category.items():
        strategy = _STRATEGIES.get(category)
        if strategy is None:
            groups.extend(_group_exact(members, category))
        else:
            groups.extend(strategy(members))
    return groups
