"""Component detection.

Files are grouped by base name across directories and extensions, with
mirrored asset prefixes stripped (``assets/section-cart.css`` joins
``sections/cart.liquid``). A group becomes a component when it contains a
template or more than one file. Content of the whole group then decides
button variants, a semantic type and, for ``snippets/icon-*``, icon
metadata.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import PurePosixPath

from tokenplane.components.models import (
    ButtonTokenSet,
    ComponentType,
    DetectedComponent,
    IconMetadata,
    SemanticTokenSet,
    SemanticType,
)
from tokenplane.core.logging import get_logger
from tokenplane.extraction.ops import SourceFile

logger = get_logger("components")

_MIRROR_PREFIX = re.compile(r"^(?:section|snippet|component|template)-", re.IGNORECASE)

_BUTTON_MARKERS = (
    re.compile(r"\.btn\b"),
    re.compile(r"\.button\b"),
    re.compile(r"\.t4s-btn\b"),
    re.compile(r"\.shopify-payment-button\b"),
    re.compile(r"<button\b"),
    re.compile(r'<a\s+[^>]*class="[^"]*btn'),
    re.compile(r"\{%\s*render\s+['\"]button"),
)
_BUTTON_RULE = re.compile(r"\.(?:btn|button|t4s-btn)(?:--|-)?([\w-]+)?\s*\{([^}]+)\}")
_BUTTON_PROPS = {
    "background": re.compile(r"background(?:-color)?\s*:\s*([^;]+)", re.IGNORECASE),
    "color": re.compile(r"(?<![\w-])color\s*:\s*([^;]+)", re.IGNORECASE),
    "border_color": re.compile(r"border(?:-color)?\s*:\s*([^;]+)", re.IGNORECASE),
    "border_radius": re.compile(r"border-radius\s*:\s*([^;]+)", re.IGNORECASE),
    "padding": re.compile(r"padding\s*:\s*([^;]+)", re.IGNORECASE),
}

# First matching type wins
_SEMANTIC_MARKERS: tuple[tuple[SemanticType, tuple[str, ...]], ...] = (
    ("card", (r"\.card\b", r"product-card", r"\.grid-item\b", r"\.card__", r'class="[^"]*card[^"]*"')),
    ("form", (r"<form\b", r"\.form-", r"<input\b", r"<select\b", r"<textarea\b")),
    ("navigation", (r"<nav\b", r"\.nav-", r"\.menu-", r"breadcrumb", r'aria-label="[^"]*nav')),
    ("modal", (r"\.modal\b", r"\.drawer\b", r"<dialog\b", r"aria-modal", r"\.popup\b")),
    ("badge", (r"\.badge\b", r"\.tag\b", r"\.label\b")),
)
_SEMANTIC_PROPS = {
    "colors": re.compile(
        r"(?:color|background(?:-color)?|border-color|fill)\s*:\s*([^;}{]+)", re.IGNORECASE
    ),
    "spacing": re.compile(r"(?:margin|padding|gap)\s*:\s*([^;}{]+)", re.IGNORECASE),
    "typography": re.compile(
        r"(?:font-size|font-family|font-weight|line-height)\s*:\s*([^;}{]+)", re.IGNORECASE
    ),
}

_VIEW_BOX = re.compile(r"viewBox\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_CURRENT_COLOR_FILL = re.compile(r"fill\s*(?:=\s*[\"']|:\s*)currentColor", re.IGNORECASE)
_HARDCODED_FILL = re.compile(r"fill\s*(?:=\s*[\"']|:\s*)(?:#[0-9a-f]{3,8}|rgb)", re.IGNORECASE)


def base_name(path: str) -> str | None:
    """``assets/section-cart-drawer.css`` -> ``cart-drawer``."""
    stem = _MIRROR_PREFIX.sub("", PurePosixPath(path).stem)
    return stem or None


def component_type(primary_file: str) -> ComponentType:
    parts = PurePosixPath(primary_file).parts
    directory = parts[0].lower() if len(parts) > 1 else ""
    if directory == "snippets":
        return "snippet"
    if directory == "assets":
        return "js_component" if primary_file.endswith((".js", ".ts")) else "css_class"
    return "section"


def display_name(base: str) -> str:
    """``cart-drawer`` -> ``Cart Drawer``."""
    return " ".join(word[:1].upper() + word[1:] for word in re.split(r"[-_]", base))


def _button_tokens(block: str) -> ButtonTokenSet:
    values: dict[str, str] = {}
    for key, regex in _BUTTON_PROPS.items():
        if m := regex.search(block):
            values[key] = m.group(1).strip()
    return ButtonTokenSet(**values)


def detect_buttons(content: str) -> tuple[list[str], dict[str, ButtonTokenSet]] | None:
    """Variant names and per-variant values when ``content`` styles or renders a button."""
    if not any(marker.search(content) for marker in _BUTTON_MARKERS):
        return None
    variants: list[str] = []
    tokens: dict[str, ButtonTokenSet] = {}
    for m in _BUTTON_RULE.finditer(content):
        variant = m.group(1) or "default"
        if variant not in variants:
            variants.append(variant)
        token_set = _button_tokens(m.group(2))
        if not token_set.is_empty():
            tokens[variant] = token_set
    if not variants:
        return None
    return variants, tokens


def detect_semantic(content: str) -> tuple[SemanticType, SemanticTokenSet] | None:
    for semantic_type, markers in _SEMANTIC_MARKERS:
        if any(re.search(marker, content) for marker in markers):
            found = {
                key: [m.group(1).strip() for m in regex.finditer(content) if m.group(1).strip()]
                for key, regex in _SEMANTIC_PROPS.items()
            }
            return semantic_type, SemanticTokenSet(**found)
    return None


def detect_icon(content: str, base: str) -> IconMetadata:
    view_box = _VIEW_BOX.search(content)
    current_color = bool(_CURRENT_COLOR_FILL.search(content))
    hardcoded = bool(_HARDCODED_FILL.search(content))
    return IconMetadata(
        name=base if base.startswith("icon") else f"icon-{base}",
        view_box=view_box.group(1) if view_box else None,
        fill_pattern="currentColor" if current_color and not hardcoded else "hardcoded",
    )


def detect_components(files: Sequence[SourceFile]) -> list[DetectedComponent]:
    """Group ``files`` into components, sorted by display name."""
    groups: dict[str, list[SourceFile]] = {}
    for f in files:
        base = base_name(f.path)
        if base:
            groups.setdefault(base.lower(), []).append(f)

    components: list[DetectedComponent] = []
    for base, members in groups.items():
        template = next((f for f in members if f.path.endswith(".liquid")), None)
        if template is None and len(members) < 2:
            continue
        primary = template.path if template else members[0].path
        content = "\n".join(f.content for f in members)
        component = DetectedComponent(
            name=display_name(base),
            primary_file=primary,
            files=sorted(f.path for f in members),
            type=component_type(primary),
            directory=PurePosixPath(primary).parts[0] if "/" in primary else "",
        )
        if buttons := detect_buttons(content):
            component.variants, component.button_tokens = buttons
        if semantic := detect_semantic(content):
            component.semantic_type, component.semantic_tokens = semantic
        if component.directory == "snippets" and PurePosixPath(primary).name.startswith("icon-"):
            component.icon = detect_icon(content, base)
        components.append(component)

    components.sort(key=lambda c: c.name.lower())
    logger.debug("components_detected", files=len(files), components=len(components))
    return components
