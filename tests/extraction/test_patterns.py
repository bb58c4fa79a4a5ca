"""Tests for extraction/patterns.py - regex tables and category inference."""

from __future__ import annotations

import pytest

from tokenplane.extraction import patterns as p
from tokenplane.tokens.models import TokenCategory


class TestHelpers:
    def test_clean_collapses_whitespace(self) -> None:
        assert p.clean("  1px \n solid   red ") == "1px solid red"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("8px 16px", ["8px", "16px"]),
            ("0 calc(1px + 2px)", ["0", "calc(1px + 2px)"]),
            ("  4px  ", ["4px"]),
            ("", []),
        ],
    )
    def test_split_top_level(self, value: str, expected: list[str]) -> None:
        assert p.split_top_level(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("var(--color-primary)", ("color-primary", "var")),
            ("var( --gap , 4px)", ("gap", "var")),
            ("{{ settings.accent }}", ("accent", "settings")),
            ("#fff", None),
            ("1px solid var(--border)", None),
        ],
    )
    def test_reference_target(self, value: str, expected: tuple[str, str] | None) -> None:
        assert p.reference_target(value) == expected

    @pytest.mark.parametrize("value", ["#fff", "#3B82F6", "rgba(0, 0, 0, 0.5)", "hsl(210 50% 40%)"])
    def test_is_color_value(self, value: str) -> None:
        assert p.is_color_value(value)

    @pytest.mark.parametrize("value", ["red", "8px", "var(--color)"])
    def test_is_not_color_value(self, value: str) -> None:
        assert not p.is_color_value(value)


class TestColorRegexes:
    def test_hex_lengths(self) -> None:
        text = "#abc #abcd #aabbcc #aabbccdd #abcde"
        assert p.HEX_COLOR.findall(text) == ["#abc", "#abcd", "#aabbcc", "#aabbccdd"]

    def test_hex_ignores_html_entities_and_ids(self) -> None:
        assert p.HEX_COLOR.findall("&#123; a#bad") == []

    def test_var_color_reference_keywords(self) -> None:
        text = "background: var(--color-bg); width: var(--page-width); fill: var(--brand-1)"
        assert p.VAR_COLOR_REFERENCE.findall(text) == ["var(--color-bg)", "var(--brand-1)"]


class TestPatternRule:
    def test_property_boundary(self) -> None:
        """Custom properties and camelCase keys never match plain property rules."""
        spacing = next(r for r in p.STYLESHEET_RULES if r.name == "spacing")

        assert spacing.matches("--card-padding: 12px;") == []
        assert spacing.matches("padding-top: 12px;") == [("12px", 0)]

    def test_accept_filter(self) -> None:
        font_size = next(r for r in p.SCRIPT_RULES if r.name == "fontSize")

        assert font_size.matches("fontSize: '14px'") == [("14px", 0)]
        assert font_size.matches("fontSize: large") == []


class TestInferCategory:
    @pytest.mark.parametrize(
        ("name", "value", "expected"),
        [
            ("color-primary", "#fff", TokenCategory.COLOR),
            ("z-header", "10", TokenCategory.Z_INDEX),
            ("breakpoint-md", "768px", TokenCategory.BREAKPOINT),
            ("shadow-md", "0 1px 2px #000", TokenCategory.SHADOW),
            ("duration-fast", "150ms", TokenCategory.ANIMATION),
            ("font-size-lg", "18px", TokenCategory.TYPOGRAPHY),
            ("brand", "#e94560", TokenCategory.COLOR),
            ("spacing-sm", "8px", TokenCategory.SPACING),
            ("radius-sm", "4px", TokenCategory.BORDER),
            ("container-width", "1200px", TokenCategory.LAYOUT),
        ],
    )
    def test_from_name(self, name: str, value: str, expected: TokenCategory) -> None:
        assert p.infer_category(name, value) is expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("#fff", TokenCategory.COLOR),
            ("200ms", TokenCategory.ANIMATION),
            ("0.3s", TokenCategory.ANIMATION),
            ("16px", TokenCategory.SPACING),
            ("1.5rem", TokenCategory.SPACING),
            ("bold", TokenCategory.COLOR),
        ],
    )
    def test_from_value(self, value: str, expected: TokenCategory) -> None:
        assert p.infer_category(None, value) is expected

    @pytest.mark.parametrize(
        ("setting_id", "expected"),
        [
            ("colors_accent_1", TokenCategory.COLOR),
            ("heading_scale", TokenCategory.TYPOGRAPHY),
            ("page_width", TokenCategory.SPACING),
            ("buttons_radius", TokenCategory.BORDER),
            ("show_vendor", TokenCategory.COLOR),
        ],
    )
    def test_setting_category(self, setting_id: str, expected: TokenCategory) -> None:
        assert p.infer_setting_category(setting_id) is expected
