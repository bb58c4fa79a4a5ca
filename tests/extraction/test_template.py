"""Tests for template extraction."""

from __future__ import annotations

from unittest.mock import patch

from tokenplane.extraction.ops import extract_tokens
from tokenplane.tokens.models import TokenCategory

THEME_LIQUID = """<div class="header" style="color: {{ settings.color_text }}">
  {% if section.settings.show %}
    <h1 style="color: #3b82f6">{{ section.settings.title }}</h1>
  {% endif %}
</div>
{% schema %}
{"name": "Header", "settings": [{"type": "color", "id": "accent", "default": "#f59e0b"}]}
{% endschema %}
"""


class TestTemplateExtraction:
    def test_settings_reference(self) -> None:
        tokens = extract_tokens(THEME_LIQUID, "sections/header.liquid")
        ref = tokens[0]

        assert ref.value == "{{ settings.color_text }}"
        assert ref.category is TokenCategory.COLOR
        assert ref.is_reference
        assert ref.metadata.reference is not None
        assert ref.metadata.reference.syntax == "settings"
        assert ref.metadata.reference.target == "color_text"

    def test_section_settings_not_a_theme_reference(self) -> None:
        tokens = extract_tokens(THEME_LIQUID, "sections/header.liquid")
        assert not any("section.settings" in t.value for t in tokens)

    def test_inline_style_line_numbers(self) -> None:
        """Values inside style attributes keep their position in the whole file."""
        tokens = extract_tokens(THEME_LIQUID, "sections/header.liquid")
        hex_token = next(t for t in tokens if t.value == "#3b82f6")

        assert hex_token.line_number == 3
        assert hex_token.metadata.source is not None
        assert hex_token.metadata.source.format == "template"

    def test_schema_settings(self) -> None:
        tokens = extract_tokens(THEME_LIQUID, "sections/header.liquid")
        accent = next(t for t in tokens if t.name == "accent")

        assert accent.value == "#f59e0b"
        assert accent.category is TokenCategory.COLOR
        assert accent.context == "schema setting: accent (color)"
        assert accent.line_number == 7
        assert accent.metadata.source is not None
        assert accent.metadata.source.setting_type == "color"

    def test_token_count(self) -> None:
        assert len(extract_tokens(THEME_LIQUID, "sections/header.liquid")) == 3

    def test_style_block(self) -> None:
        content = "<p>hi</p>\n<style>\n  .x { color: #222; padding: 4px; }\n</style>\n"

        tokens = extract_tokens(content, "snippets/x.liquid")

        assert [(t.value, t.line_number) for t in tokens] == [("#222", 3), ("4px", 3)]

    def test_inline_custom_property_collected_once(self) -> None:
        content = '<div style="--accent: #e94560; padding: 4px">x</div>\n'

        tokens = extract_tokens(content, "snippets/badge.liquid")

        assert [(t.name, t.value) for t in tokens] == [("accent", "#e94560"), (None, "4px")]

    def test_assign_color(self) -> None:
        content = "{% assign brand = '#e94560' %}\n{% assign label = 'Shop' %}\n"

        tokens = extract_tokens(content, "snippets/brand.liquid")

        assert len(tokens) == 1
        assert tokens[0].name == "brand"
        assert tokens[0].value == "#e94560"


class TestSchemaFailures:
    def test_bad_schema_does_not_hide_other_tokens(self) -> None:
        content = '<h1 style="color: #111">x</h1>\n{% schema %}\n{"settings": [\n{% endschema %}\n'

        with patch("tokenplane.extraction.template.record_suppressed_failure") as record:
            tokens = extract_tokens(content, "sections/broken.liquid")

        assert [t.value for t in tokens] == ["#111"]
        record.assert_called_once_with("extraction", format="template")
