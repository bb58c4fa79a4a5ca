"""Tests for structured-settings extraction."""

from __future__ import annotations

import json
from unittest.mock import patch

from tokenplane.extraction.ops import extract_tokens
from tokenplane.extraction.settings import collect_color_schemes, collect_settings, setting_token
from tokenplane.tokens.models import SchemeAnnotation, TokenCategory

SCHEMA = json.dumps(
    [
        {
            "name": "Colors",
            "settings": [
                {"type": "header", "content": "Brand"},
                {"type": "color", "id": "color_primary", "default": "#3b82f6"},
                {"type": "range", "id": "card_radius", "unit": "px", "default": 8},
                {"type": "font_picker", "id": "type_body_font", "default": "assistant_n4"},
                {"type": "checkbox", "id": "show_logo", "default": True},
            ],
        }
    ],
    indent=2,
)

SETTINGS_DATA = json.dumps(
    {
        "current": {
            "color_schemes": {
                "scheme-1": {"settings": {"background": "#ffffff", "text": "#121212", "gradient": ""}},
                "scheme-2": {"settings": {"background": "#121212"}},
            }
        }
    },
    indent=2,
)


class TestSettingToken:
    def test_color(self) -> None:
        found = setting_token({"type": "color", "id": "accent", "default": "#fff"})
        assert found == (TokenCategory.COLOR, "#fff")

    def test_color_without_default(self) -> None:
        assert setting_token({"type": "color_background", "id": "bg"}) is None

    def test_range_categories(self) -> None:
        def range_setting(setting_id: str) -> dict:
            return {"type": "range", "id": setting_id, "unit": "px", "default": 12}

        assert setting_token(range_setting("buttons_radius")) == (TokenCategory.BORDER, "12px")
        assert setting_token(range_setting("heading_size")) == (TokenCategory.TYPOGRAPHY, "12px")
        assert setting_token(range_setting("section_gap")) == (TokenCategory.SPACING, "12px")

    def test_range_needs_px_unit(self) -> None:
        assert setting_token({"type": "range", "id": "opacity", "unit": "%", "default": 50}) is None

    def test_boolean_default_rejected(self) -> None:
        assert setting_token({"type": "range", "id": "gap", "unit": "px", "default": True}) is None


class TestCollectors:
    def test_collect_settings_any_depth(self) -> None:
        found = list(collect_settings(json.loads(SCHEMA)))
        assert [s["id"] for s in found] == ["color_primary", "card_radius", "type_body_font", "show_logo"]

    def test_collect_color_schemes(self) -> None:
        found = list(collect_color_schemes(json.loads(SETTINGS_DATA)))
        assert found == [
            ("scheme-1", "background", "#ffffff"),
            ("scheme-1", "text", "#121212"),
            ("scheme-2", "background", "#121212"),
        ]


class TestSettingsExtraction:
    def test_schema_file(self) -> None:
        tokens = extract_tokens(SCHEMA, "config/settings_schema.json")

        assert [(t.name, t.category, t.value) for t in tokens] == [
            ("color_primary", TokenCategory.COLOR, "#3b82f6"),
            ("card_radius", TokenCategory.BORDER, "8px"),
            ("type_body_font", TokenCategory.TYPOGRAPHY, "assistant_n4"),
        ]

    def test_setting_located_on_its_id_line(self) -> None:
        tokens = extract_tokens(SCHEMA, "config/settings_schema.json")
        primary = tokens[0]

        expected_line = SCHEMA.splitlines().index('        "id": "color_primary",') + 1
        assert primary.line_number == expected_line

    def test_color_schemes(self) -> None:
        tokens = extract_tokens(SETTINGS_DATA, "config/settings_data.json")

        assert [t.name for t in tokens] == ["scheme-1-background", "scheme-1-text", "scheme-2-background"]
        scheme = tokens[1].metadata.find(SchemeAnnotation)
        assert scheme is not None
        assert (scheme.scheme, scheme.role) == ("scheme-1", "text")

    def test_repeated_values_located_in_order(self) -> None:
        tokens = extract_tokens(SETTINGS_DATA, "config/settings_data.json")
        assert tokens[1].line_number < tokens[2].line_number

    def test_invalid_json_yields_nothing(self) -> None:
        with patch("tokenplane.extraction.ops.record_suppressed_failure") as record:
            tokens = extract_tokens('{"settings": [', "config/settings_schema.json")

        assert tokens == []
        record.assert_called_once_with("extraction", format="settings")
