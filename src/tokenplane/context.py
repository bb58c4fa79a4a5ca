"""Design-system context for coding agents.

``build_design_context`` renders the registry as a markdown block meant to
be pasted into a prompt; ``check_code_against_tokens`` is the matching
validation hook for generated code. Both degrade to "no tokens" when the
registry cannot be read, so a caller is never blocked by it.
"""

from __future__ import annotations

import colorsys
from collections.abc import Sequence

from tokenplane.config.constants import SPACING_SCALE_RATIOS, SPACING_SCALE_TOLERANCE
from tokenplane.core.errors import RegistryError
from tokenplane.core.logging import get_logger
from tokenplane.core.telemetry import record_suppressed_failure
from tokenplane.drift.detector import DriftDetector
from tokenplane.drift.models import TokenizationSuggestion
from tokenplane.inference.color import extract_numeric_value, parse_color
from tokenplane.inference.ops import infer_tier
from tokenplane.inference.scale import detect_ratio_scale, detect_typographic_scale
from tokenplane.registry.models import DesignToken
from tokenplane.registry.store import RegistryStore
from tokenplane.tokens.models import RampAnnotation, SchemeAnnotation, TokenCategory, TokenTier

logger = get_logger("context")

# Above this many tokens the context collapses into a summary
COMPACT_THRESHOLD = 40

CATEGORY_HELP: dict[TokenCategory, tuple[str, str]] = {
    TokenCategory.COLOR: (
        "Color Tokens",
        "Use `var(--color-primary)` in CSS, `{{ settings.color_primary }}` in Liquid.",
    ),
    TokenCategory.TYPOGRAPHY: (
        "Typography Tokens",
        "Use `var(--font-heading)` in CSS, `{{ settings.font_heading }}` in Liquid.",
    ),
    TokenCategory.SPACING: ("Spacing Tokens", "Use `var(--spacing-md)` in CSS for consistent spacing."),
    TokenCategory.BORDER: ("Border Tokens", "Use `var(--border-radius-md)` in CSS."),
    TokenCategory.SHADOW: ("Shadow Tokens", "Use `var(--shadow-lg)` in CSS."),
    TokenCategory.ANIMATION: ("Animation Tokens", "Use `var(--animation-duration)` in CSS."),
    TokenCategory.BREAKPOINT: (
        "Breakpoint Tokens",
        "Use `var(--breakpoint-md)` or media queries for responsive design.",
    ),
    TokenCategory.LAYOUT: ("Layout Tokens", "Use `var(--container-max-width)` for container widths."),
    TokenCategory.Z_INDEX: ("Z-Index Tokens", "Use `var(--z-modal)` for stacking order."),
    TokenCategory.ACCESSIBILITY: (
        "Accessibility Tokens",
        "Use focus-visible styles and prefers-reduced-motion.",
    ),
}

_TIER_ORDER = (TokenTier.PRIMITIVE, TokenTier.SEMANTIC, TokenTier.COMPONENT)
_BRAND_KEYWORDS = ("primary", "secondary", "accent", "text", "background")

CONVENTION_RULES = (
    "### Convention Rules\n"
    "- CSS: Always use `var(--token-name)` instead of hardcoded values.\n"
    "- Liquid: Use `{{ settings.token_name }}` for theme setting values.\n"
    "- JavaScript: Reference CSS variables via `getComputedStyle` or CSS classes.\n"
    "- Never hardcode color hex values, font stacks, or spacing pixel values.\n"
)


def token_tier(token: DesignToken) -> TokenTier:
    """Stored tier if ingestion recorded one, otherwise inferred from the name."""
    stored = token.get_metadata().extensions.get("tier")
    try:
        return TokenTier(stored) if stored else infer_tier(token.name)
    except ValueError:
        return infer_tier(token.name)


def _by_category(tokens: Sequence[DesignToken]) -> dict[TokenCategory, list[DesignToken]]:
    grouped: dict[TokenCategory, list[DesignToken]] = {}
    for token in tokens:
        try:
            category = token.token_category
        except ValueError:
            continue
        grouped.setdefault(category, []).append(token)
    return grouped


def _numbers(tokens: Sequence[DesignToken]) -> list[float]:
    values = (extract_numeric_value(t.value) for t in tokens)
    return [v for v in values if v is not None and v > 0]


def _font_sizes(typography: Sequence[DesignToken]) -> list[DesignToken]:
    return [t for t in typography if "size" in t.name]


def _font_families(typography: Sequence[DesignToken]) -> list[DesignToken]:
    return [t for t in typography if "font" in t.name and "size" not in t.name]


def palette_temperature(colors: Sequence[DesignToken]) -> str:
    """Warm, cool or neutral, by counting hues of chromatic colors."""
    warm = cool = 0
    for token in colors:
        rgb = parse_color(token.value)
        if rgb is None or max(rgb) - min(rgb) < 3:
            continue
        hue = colorsys.rgb_to_hls(*(c / 255 for c in rgb))[0] * 360
        if hue <= 60 or hue >= 300:
            warm += 1
        elif 120 <= hue <= 270:
            cool += 1
    if warm > cool * 1.5:
        return "warm"
    if cool > warm * 1.5:
        return "cool"
    return "neutral"


def spacing_base(spacing: Sequence[DesignToken]) -> int | None:
    """4 or 8 when every spacing value is a multiple of it."""
    values = _numbers(spacing)
    if len(values) < 3:
        return None
    for base in (4, 8):
        if all(v % base == 0 for v in values):
            return base
    return None


def _format_number(value: float) -> str:
    return f"{value:g}"


def _scale_lines(grouped: dict[TokenCategory, list[DesignToken]]) -> list[str]:
    lines: list[str] = []
    spacing = grouped.get(TokenCategory.SPACING, [])
    if spacing:
        scale = detect_ratio_scale(_numbers(spacing), SPACING_SCALE_RATIOS, SPACING_SCALE_TOLERANCE)
        base = spacing_base(spacing)
        if scale is not None:
            lines.append(
                f"- Spacing scale: base {_format_number(scale.base_value)}px, "
                f"ratio {_format_number(scale.ratio)}. Use scale values only."
            )
        elif base is not None:
            lines.append(f"- Spacing scale: base {base}px. Use scale values only.")

    sizes = _numbers(_font_sizes(grouped.get(TokenCategory.TYPOGRAPHY, [])))
    type_scale = detect_typographic_scale(sizes)
    if type_scale is not None:
        lines.append(
            f"- Typographic scale: base {_format_number(type_scale.base_value)}px, "
            f"ratio {_format_number(type_scale.ratio)}. Use scale values only."
        )
    return lines


def format_color_schemes(colors: Sequence[DesignToken]) -> str:
    schemes: dict[str, list[str]] = {}
    for token in colors:
        scheme = token.get_metadata().find(SchemeAnnotation)
        if scheme is not None:
            schemes.setdefault(scheme.scheme, []).append(f"{scheme.role}: {token.value}")
    if not schemes:
        return ""
    lines = ["### Color Schemes", ""]
    lines.extend(f"- **{name}**: {', '.join(roles)}" for name, roles in schemes.items())
    lines += ["", "Use existing color scheme values. Do not introduce new scheme colors."]
    return "\n".join(lines)


def format_ramps(colors: Sequence[DesignToken]) -> list[str]:
    ramps: dict[str, list[int]] = {}
    for token in colors:
        ramp = token.get_metadata().find(RampAnnotation)
        if ramp is not None:
            ramps.setdefault(token.name.rsplit("-", 1)[0], []).append(ramp.step)
    return [
        f"- Ramp `{name}`: steps {', '.join(str(s) for s in sorted(steps))}. "
        "Use low steps for backgrounds, high for text."
        for name, steps in ramps.items()
    ]


def format_design_rules(tokens: Sequence[DesignToken]) -> str:
    """Short per-category rules derived from the registry contents."""
    if not tokens:
        return ""
    if len(tokens) < 10:
        return "Project has limited design tokens. Prefer existing tokens; avoid introducing new values."

    grouped = _by_category(tokens)
    rules: list[str] = []
    colors = grouped.get(TokenCategory.COLOR, [])
    if colors:
        rules += ["**Colors**", f"- Palette temperature: {palette_temperature(colors)}"]
        rules += format_ramps(colors)
        if len(colors) < 5:
            rules.append("- Limited palette. Do not introduce new colors without consolidating.")

    typography = grouped.get(TokenCategory.TYPOGRAPHY, [])
    if typography:
        rules.append("**Typography**")
        fonts = _font_families(typography)
        if fonts:
            rules.append("- Fonts: " + ", ".join(f"`{f.name}: {f.value}`" for f in fonts))
            rules.append("- Do not introduce new typefaces.")
        if _font_sizes(typography) and detect_typographic_scale(_numbers(_font_sizes(typography))) is None:
            rules.append("- Use the defined font-size scale. Max 3 font-size levels per section.")

    if grouped.get(TokenCategory.SPACING) and spacing_base(grouped[TokenCategory.SPACING]) is None:
        rules.append("- Use existing spacing tokens. Do not hardcode pixel values.")
    if grouped.get(TokenCategory.ANIMATION):
        rules.append("- Use defined transition/duration tokens for all animations.")
    if grouped.get(TokenCategory.BORDER):
        rules.append("- Use existing border-radius and border tokens.")
    if grouped.get(TokenCategory.SHADOW):
        rules.append("- Use existing shadow tokens. No heavy box-shadow additions.")
    return "\n".join(["### Design Rules", *rules]) if rules else ""


def _token_line(token: DesignToken) -> str:
    line = f"- `--{token.name}: {token.value};`"
    if token.description:
        line += f" ({token.description})"
    return line


def format_full_context(tokens: Sequence[DesignToken]) -> str:
    """Tokens by tier, then by category, with usage examples per category."""
    by_tier: dict[TokenTier, list[DesignToken]] = {}
    for token in tokens:
        by_tier.setdefault(token_tier(token), []).append(token)

    sections = ["## Design System Tokens", ""]
    for tier in _TIER_ORDER:
        tier_tokens = by_tier.get(tier)
        if not tier_tokens:
            continue
        sections += [f"### {tier.value.capitalize()} Tokens", ""]
        grouped = _by_category(tier_tokens)
        for category in TokenCategory:
            members = grouped.get(category)
            if not members:
                continue
            label, example = CATEGORY_HELP[category]
            sections += [f"#### {label}", example, ""]
            sections += [_token_line(t) for t in members]
            sections.append("")

    scales = _scale_lines(_by_category(tokens))
    if scales:
        sections += ["### Scales", "", *scales, ""]
    sections.append(CONVENTION_RULES)
    return "\n".join(sections)


def format_compact_context(tokens: Sequence[DesignToken]) -> str:
    """Summary for large registries: brand colors, fonts, scales, rules."""
    grouped = _by_category(tokens)
    brand = [
        t
        for t in grouped.get(TokenCategory.COLOR, [])
        if any(keyword in t.name.lower() for keyword in _BRAND_KEYWORDS)
    ]
    lines = ["## Design System Tokens (summary)", "", "### Brand Colors"]
    lines += [f"- `--{t.name}: {t.value}`" for t in brand[:8]]
    lines += ["", "### Typography"]

    typography = grouped.get(TokenCategory.TYPOGRAPHY, [])
    fonts = _font_families(typography)
    sizes = _font_sizes(typography)
    if fonts:
        lines.append("- Fonts: " + ", ".join(f.value for f in fonts))
    if sizes:
        lines.append(f"- Base size: {sizes[0].value}")
    lines.append("")

    spacing = grouped.get(TokenCategory.SPACING, [])
    if spacing:
        base = spacing_base(spacing)
        lines += ["### Spacing (core scale)", f"- Base {base}px" if base else "- Use existing tokens", ""]

    scales = _scale_lines(grouped)
    if scales:
        lines += ["### Scales", *scales, ""]

    tiers: dict[TokenTier, int] = {}
    for token in tokens:
        tier = token_tier(token)
        tiers[tier] = tiers.get(tier, 0) + 1
    lines.append("### Tiers")
    lines += [f"- {tier.value}: {tiers[tier]}" for tier in _TIER_ORDER if tier in tiers]
    lines += [
        "",
        "### Convention Rules",
        "- CSS: `var(--token-name)`. Liquid: `{{ settings.token_name }}`.",
        "- Never hardcode colors, fonts, or spacing.",
    ]
    return "\n".join(lines)


def build_design_context(store: RegistryStore, project_id: str) -> str:
    """Markdown summary of a project's registry; ``""`` if empty or unreadable."""
    try:
        tokens = store.list_by_project(project_id)
    except RegistryError as e:
        logger.warning("design_context_unavailable", project_id=project_id, error=str(e))
        record_suppressed_failure("design_context")
        return ""
    if not tokens:
        return ""

    if len(tokens) > COMPACT_THRESHOLD:
        context = format_compact_context(tokens)
    else:
        context = format_full_context(tokens)

    extras = [
        format_color_schemes(_by_category(tokens).get(TokenCategory.COLOR, [])),
        format_design_rules(tokens),
    ]
    for extra in extras:
        if extra:
            context += "\n\n" + extra
    return context


def check_code_against_tokens(
    store: RegistryStore, project_id: str, content: str, file_path: str
) -> list[TokenizationSuggestion]:
    """Suggestions for hardcoded values in generated code; ``[]`` if the registry is unreadable."""
    try:
        return DriftDetector(store).detect_drift(project_id, content, file_path).suggestions
    except RegistryError as e:
        logger.warning("token_check_unavailable", project_id=project_id, error=str(e))
        record_suppressed_failure("token_check")
        return []
