"""Tests for stylesheet extraction."""

from __future__ import annotations

from tokenplane.extraction.ops import extract_tokens
from tokenplane.tokens.models import TokenCategory

THEME_CSS = """:root {
  --color-primary: #3b82f6;
  --spacing-sm: 8px;
}

.button {
  background: var(--color-primary);
  color: #ffffff;
  padding: 8px 16px;
}

.card {
  border: 1px solid #e5e7eb;
  box-shadow: 0 1px 2px rgba(0, 0, 0, 0.1);
}
"""


def _values(tokens: list, category: TokenCategory) -> list[str]:
    return [t.value for t in tokens if t.category is category]


class TestCustomProperties:
    def test_declarations_are_named(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")
        named = {t.name: t for t in tokens if t.name}

        assert set(named) == {"color-primary", "spacing-sm"}
        assert named["color-primary"].category is TokenCategory.COLOR
        assert named["color-primary"].line_number == 2
        assert named["spacing-sm"].category is TokenCategory.SPACING
        assert named["spacing-sm"].value == "8px"

    def test_declaration_hex_not_duplicated(self) -> None:
        """The literal on a declaration line is only collected once, as the named token."""
        tokens = extract_tokens(THEME_CSS, "assets/base.css")

        primaries = [t for t in tokens if t.value == "#3b82f6"]
        assert len(primaries) == 1
        assert primaries[0].name == "color-primary"

    def test_single_line_root_yields_one_color(self) -> None:
        tokens = extract_tokens(":root{--x:#abcdef;--y:rgb(1, 2, 3)}\n", "assets/min.css")
        colors = [(t.name, t.value) for t in tokens if t.category is TokenCategory.COLOR]

        assert colors == [("x", "#abcdef"), ("y", "rgb(1, 2, 3)")]

    def test_literal_after_declaration_on_same_line_is_kept(self) -> None:
        tokens = extract_tokens(".a{--x:#111;background:#222}\n", "assets/min.css")
        colors = [(t.name, t.value) for t in tokens if t.category is TokenCategory.COLOR]

        assert colors == [("x", "#111"), (None, "#222")]

    def test_source_annotation(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")
        token = next(t for t in tokens if t.name == "color-primary")

        assert token.metadata.source is not None
        assert token.metadata.source.format == "stylesheet"
        assert token.metadata.source.selector == "--color-primary"


class TestLiteralsAndReferences:
    def test_color_literals(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")
        colors = _values(tokens, TokenCategory.COLOR)

        assert "#ffffff" in colors
        assert "#e5e7eb" in colors
        assert "rgba(0, 0, 0, 0.1)" in colors

    def test_var_reference_marked(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")
        ref = next(t for t in tokens if t.value == "var(--color-primary)")

        assert ref.is_reference
        assert ref.metadata.reference is not None
        assert ref.metadata.reference.target == "color-primary"
        assert ref.line_number == 7

    def test_shorthand_spacing_split(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")
        spacing = [t for t in tokens if t.category is TokenCategory.SPACING and t.name is None]

        assert [t.value for t in spacing] == ["8px", "16px"]
        assert {t.line_number for t in spacing} == {9}

    def test_border_and_shadow(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")

        assert _values(tokens, TokenCategory.BORDER) == ["1px solid #e5e7eb"]
        assert _values(tokens, TokenCategory.SHADOW) == ["0 1px 2px rgba(0, 0, 0, 0.1)"]

    def test_context_captured(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")
        token = next(t for t in tokens if t.value == "#ffffff")

        assert "color: #ffffff" in token.context
        assert "\n" not in token.context

    def test_ids_unique_per_file(self) -> None:
        tokens = extract_tokens(THEME_CSS, "assets/base.css")

        assert len({t.id for t in tokens}) == len(tokens)
        assert all(t.id.startswith("assets/base.css#") for t in tokens)


def test_scss_uses_same_rules() -> None:
    tokens = extract_tokens(".a {\n  margin: 0 auto;\n  z-index: 10;\n}\n", "src/main.scss")

    assert _values(tokens, TokenCategory.SPACING) == ["0", "auto"]
    assert _values(tokens, TokenCategory.Z_INDEX) == ["10"]
