"""Regex pattern tables for heuristic value extraction.

Each source format's patterns live here, separate from the file-level
orchestration in the per-format extractors, so they can be unit-tested on
their own. Matching is deliberately tolerant: these tables harvest likely
design values from arbitrary, sometimes malformed, theme code.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from tokenplane.tokens.models import TokenCategory

C = TokenCategory

# Property names must not be preceded by a word char or hyphen, so that
# `padding:` never matches inside `--card-padding:` or `paddingTop:`.
_BOUNDARY = r"(?<![\w-])"


@dataclass(frozen=True)
class PatternRule:
    """One property-style pattern: the value is capture group ``group``."""

    name: str
    regex: re.Pattern[str]
    category: TokenCategory
    group: int = 1
    split_values: bool = False
    accept: Callable[[str], bool] | None = None

    def matches(self, text: str) -> list[tuple[str, int]]:
        """(value, offset) pairs; offset is the start of the whole match."""
        found = []
        for m in self.regex.finditer(text):
            value = m.group(self.group)
            if not value:
                continue
            value = clean(value)
            if self.accept is not None and not self.accept(value):
                continue
            found.append((value, m.start()))
        return found


def clean(value: str) -> str:
    """Trim and collapse internal whitespace."""
    return " ".join(value.split())


def split_top_level(value: str) -> list[str]:
    """Split on whitespace outside brackets: `0 calc(1px + 2px)` -> 2 parts."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in value:
        if ch in "({":
            depth += 1
        elif ch in ")}":
            depth = max(0, depth - 1)
        if ch.isspace() and depth == 0:
            if current:
                parts.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        parts.append("".join(current))
    return parts


def _is_dimension(value: str) -> bool:
    return bool(re.match(r"^-?\d", value)) or any(u in value for u in ("px", "rem", "em"))


def _is_duration(value: str) -> bool:
    return bool(re.match(r"^\d", value)) or value.endswith("s")


# =============================================================================
# Color literals and references (all formats)
# =============================================================================

HEX_COLOR = re.compile(r"(?<![\w&])#(?:[0-9a-fA-F]{3,4}){1,2}\b")
FUNC_COLOR = re.compile(r"(?:rgba?|hsla?)\([^)]+\)", re.IGNORECASE)
COLOR_VALUE = re.compile(r"^(?:#[0-9a-fA-F]{3,8}|rgba?\(|hsla?\()", re.IGNORECASE)

VAR_REFERENCE = re.compile(r"^var\(\s*--([\w-]+)\s*(?:,[^)]*)?\)$")
SETTINGS_REFERENCE = re.compile(r"^\{\{\s*settings\.([\w-]+)\s*\}\}$")

VAR_COLOR_REFERENCE = re.compile(
    r"var\(--(?:color|bg|text|border|accent|brand|primary|secondary|success|warning|"
    r"error|danger|info|surface|foreground|background)[^)]*\)",
    re.IGNORECASE,
)


def is_color_value(value: str) -> bool:
    return bool(COLOR_VALUE.match(value.strip()))


def reference_target(value: str) -> tuple[str, str] | None:
    """(target name, syntax) when the whole value is a token reference."""
    value = value.strip()
    if m := VAR_REFERENCE.match(value):
        return m.group(1), "var"
    if m := SETTINGS_REFERENCE.match(value):
        return m.group(1), "settings"
    return None


# =============================================================================
# Stylesheets
# =============================================================================

CSS_VAR_DECLARATION = re.compile(r"(--([\w-]+))\s*:\s*([^;{}]+)")


def _css_prop(pattern: str) -> re.Pattern[str]:
    return re.compile(_BOUNDARY + pattern + r"\s*:\s*([^;}{]+)", re.IGNORECASE)


STYLESHEET_RULES: tuple[PatternRule, ...] = (
    PatternRule("font-family", _css_prop("font-family"), C.TYPOGRAPHY),
    PatternRule("font-size", _css_prop("font-size"), C.TYPOGRAPHY),
    PatternRule("font-weight", _css_prop("font-weight"), C.TYPOGRAPHY),
    PatternRule("line-height", _css_prop("line-height"), C.TYPOGRAPHY),
    PatternRule("letter-spacing", _css_prop("letter-spacing"), C.TYPOGRAPHY),
    PatternRule(
        "spacing",
        _css_prop(r"(?:margin|padding|gap)(?:-(?:top|right|bottom|left|inline|block))?"),
        C.SPACING,
        split_values=True,
    ),
    PatternRule("border-radius", _css_prop("border-radius"), C.BORDER),
    PatternRule("border", _css_prop(r"border(?:-width|-style|-color)?"), C.BORDER),
    PatternRule("box-shadow", _css_prop("box-shadow"), C.SHADOW),
    PatternRule("text-shadow", _css_prop("text-shadow"), C.SHADOW),
    PatternRule("transition", _css_prop("transition"), C.ANIMATION),
    PatternRule("animation", _css_prop("animation"), C.ANIMATION),
    PatternRule("z-index", _css_prop("z-index"), C.Z_INDEX),
)

# =============================================================================
# Templates
# =============================================================================

TEMPLATE_SETTINGS_REFERENCE = re.compile(r"\{\{\s*settings\.([\w-]+)\s*\}\}")
TEMPLATE_ASSIGN = re.compile(r"\{%-?\s*assign\s+([\w-]+)\s*=\s*['\"]([^'\"]+)['\"]\s*-?%\}")
TEMPLATE_INLINE_STYLE = re.compile(r"(?<![\w-])style\s*=\s*([\"'])(.+?)\1", re.IGNORECASE | re.DOTALL)
TEMPLATE_STYLE_BLOCK = re.compile(r"<style[^>]*>(.*?)</style>", re.IGNORECASE | re.DOTALL)
TEMPLATE_SCHEMA_BLOCK = re.compile(
    r"\{%-?\s*schema\s*-?%\}(.*?)\{%-?\s*endschema\s*-?%\}",
    re.IGNORECASE | re.DOTALL,
)

# =============================================================================
# Scripts
# =============================================================================


def _js_prop(pattern: str, quoted: bool) -> re.Pattern[str]:
    value = r"['\"]([^'\"]+)['\"]" if quoted else r"['\"]?([^'\",;}\s]+)['\"]?"
    return re.compile(r"(?<![\w$-])" + pattern + r"\s*:\s*" + value)


SCRIPT_COLOR_RULE = PatternRule(
    "style-color",
    _js_prop(r"(?:color|backgroundColor|background|borderColor|fill|stroke)", quoted=True),
    C.COLOR,
)

SCRIPT_STRING_COLOR = re.compile(
    r"['\"]((?:#(?:[0-9a-fA-F]{3,4}){1,2})|(?:rgba?\([^)]+\))|(?:hsla?\([^)]+\)))['\"\s,;)]"
)

SCRIPT_RULES: tuple[PatternRule, ...] = (
    PatternRule("fontFamily", _js_prop("fontFamily", quoted=True), C.TYPOGRAPHY),
    PatternRule("fontSize", _js_prop("fontSize", quoted=False), C.TYPOGRAPHY, accept=_is_dimension),
    PatternRule(
        "spacing",
        _js_prop(r"(?:margin|padding|gap)(?:Top|Bottom|Left|Right)?", quoted=False),
        C.SPACING,
        accept=_is_dimension,
    ),
    PatternRule("borderRadius", _js_prop("borderRadius", quoted=False), C.BORDER),
    PatternRule("boxShadow", _js_prop("boxShadow", quoted=True), C.SHADOW),
    PatternRule(
        "duration",
        _js_prop(r"(?:duration|delay|transitionDuration|animationDuration)", quoted=False),
        C.ANIMATION,
        accept=_is_duration,
    ),
)

# =============================================================================
# Category inference
# =============================================================================

# Checked in order; first match wins.
NAME_CATEGORY_RULES: tuple[tuple[re.Pattern[str], TokenCategory], ...] = (
    (re.compile(r"colou?r"), C.COLOR),
    (re.compile(r"z-index|zindex|(?:^|-)z(?:-|$)|layer"), C.Z_INDEX),
    (re.compile(r"breakpoint|screen|(?:^|-)bp(?:-|$)"), C.BREAKPOINT),
    (re.compile(r"shadow|elevation"), C.SHADOW),
    (re.compile(r"animation|transition|duration|ease|easing|delay"), C.ANIMATION),
    (re.compile(r"font|text-size|line-height|leading|letter-spacing|tracking|weight|size"), C.TYPOGRAPHY),
    (
        re.compile(
            r"bg|background|text|accent|brand|primary|secondary|surface|foreground|"
            r"success|warning|error|danger|info"
        ),
        C.COLOR,
    ),
    (re.compile(r"spacing|space|margin|padding|gap|gutter"), C.SPACING),
    (re.compile(r"radius|border|outline"), C.BORDER),
    (re.compile(r"width|height|container|columns"), C.LAYOUT),
)

SETTING_CATEGORY_RULES: tuple[tuple[re.Pattern[str], TokenCategory], ...] = (
    (re.compile(r"color|bg|background|accent|brand"), C.COLOR),
    (re.compile(r"font|type|heading|body|size|weight|line_height"), C.TYPOGRAPHY),
    (re.compile(r"spacing|margin|padding|gap|width|height"), C.SPACING),
    (re.compile(r"radius|border"), C.BORDER),
)

_UNIT_VALUE = re.compile(r"\d(?:px|rem|em|%|vw|vh)(?!\w)")
_DURATION_VALUE = re.compile(r"^-?\d*\.?\d+m?s$")


def infer_category(name: str | None, value: str) -> TokenCategory:
    """Category from a declared name's keywords, else from the value's shape."""
    if name:
        lowered = name.lower()
        for regex, category in NAME_CATEGORY_RULES:
            if regex.search(lowered):
                return category
    return infer_category_from_value(value)


def infer_category_from_value(value: str) -> TokenCategory:
    value = value.strip()
    if is_color_value(value):
        return C.COLOR
    if _DURATION_VALUE.match(value):
        return C.ANIMATION
    if _UNIT_VALUE.search(value):
        return C.SPACING
    return C.COLOR


def infer_setting_category(setting_id: str) -> TokenCategory:
    lowered = setting_id.lower()
    for regex, category in SETTING_CATEGORY_RULES:
        if regex.search(lowered):
            return category
    return C.COLOR
