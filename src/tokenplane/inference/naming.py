"""Token name suggestion.

First match wins:

1. a meaningful declared name, normalized (0.9)
2. ranked keywords found in the surrounding context, up to two, with a
   light/dark qualifier for colors (0.7 for one keyword, 0.85 for two)
3. colors only: ``color-<shade>`` (0.4)
4. ``<category>-<value slug>`` (0.2)

Names are made unique against ``existing_names`` with ``-2``, ``-3``, ...
"""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass
from typing import Literal

from tokenplane.inference.color import parse_color, shade_qualifier
from tokenplane.tokens.models import ExtractedToken, TokenCategory

NameSource = Literal["declared", "context", "shade", "value"]

# Ranked: earlier keywords win when more than two appear
CONTEXT_KEYWORDS = (
    "primary",
    "secondary",
    "accent",
    "brand",
    "error",
    "success",
    "warning",
    "info",
    "background",
    "foreground",
    "text",
    "heading",
    "body",
    "link",
    "button",
    "header",
    "footer",
    "nav",
    "card",
    "modal",
    "form",
    "input",
    "badge",
    "overlay",
    "border",
    "muted",
    "hover",
    "active",
    "focus",
    "disabled",
)

KEYWORD_ALIASES = {
    "btn": "button",
    "bg": "background",
    "fg": "foreground",
    "hdr": "header",
    "navbar": "nav",
    "navigation": "nav",
    "err": "error",
}

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_SLUG = re.compile(r"[^a-z0-9]+")
_WORD = re.compile(r"[a-z]+")
_MAX_SLUG_LENGTH = 32


@dataclass(frozen=True)
class NameSuggestion:
    name: str
    confidence: float
    source: NameSource


def slugify(text: str) -> str:
    """Lowercase hyphenated slug; camelCase boundaries become hyphens."""
    text = _CAMEL_BOUNDARY.sub(r"\1-\2", text)
    return _NON_SLUG.sub("-", text.lower()).strip("-")


def _is_meaningful(slug: str) -> bool:
    return len(slug) >= 2 and any(c.isalpha() for c in slug)


def context_keywords(context: str) -> list[str]:
    """Known keywords present in ``context``, in rank order."""
    words = {KEYWORD_ALIASES.get(w, w) for w in _WORD.findall(_CAMEL_BOUNDARY.sub(r"\1 \2", context).lower())}
    return [kw for kw in CONTEXT_KEYWORDS if kw in words]


def unique_name(name: str, existing_names: Collection[str]) -> str:
    if name not in existing_names:
        return name
    n = 2
    while f"{name}-{n}" in existing_names:
        n += 1
    return f"{name}-{n}"


def _suggest(token: ExtractedToken) -> NameSuggestion:
    if token.name:
        declared = slugify(token.name)
        if _is_meaningful(declared):
            return NameSuggestion(declared, 0.9, "declared")

    category = token.category.value
    rgb = parse_color(token.value) if token.category is TokenCategory.COLOR else None

    keywords = context_keywords(token.context)[:2]
    if keywords:
        parts = [category, *keywords]
        if rgb is not None:
            shade = shade_qualifier(rgb)
            if shade != "mid":
                parts.append(shade)
        confidence = 0.85 if len(keywords) == 2 else 0.7
        return NameSuggestion("-".join(parts), confidence, "context")

    if rgb is not None:
        return NameSuggestion(f"color-{shade_qualifier(rgb)}", 0.4, "shade")

    value_slug = slugify(token.value.lower())[:_MAX_SLUG_LENGTH].strip("-") or "value"
    return NameSuggestion(f"{category}-{value_slug}", 0.2, "value")


def suggest_token_name(token: ExtractedToken, existing_names: Collection[str]) -> NameSuggestion:
    """Suggest a registry name for ``token``, unique among ``existing_names``."""
    suggestion = _suggest(token)
    name = unique_name(suggestion.name, existing_names)
    if name == suggestion.name:
        return suggestion
    return NameSuggestion(name, suggestion.confidence, suggestion.source)
