"""Tests for inference/color.py - parsing, normalization, CIEDE2000."""

from __future__ import annotations

import pytest

from tokenplane.inference.color import (
    ciede2000,
    color_delta_e,
    extract_numeric_value,
    normalize_value,
    parse_color,
    relative_luminance,
    rgb_to_lab,
    shade_qualifier,
    to_hex,
)


class TestParseColor:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("#FFF", (255, 255, 255)),
            ("#3b82f6", (59, 130, 246)),
            ("#3b82f680", (59, 130, 246)),
            ("#0f08", (0, 255, 0)),
            ("rgb(255, 0, 0)", (255, 0, 0)),
            ("rgba(0 128 255 / 50%)", (0, 128, 255)),
            ("rgb(100%, 0%, 0%)", (255, 0, 0)),
            ("rgb(300, -5, 0)", (255, 0, 0)),
            ("hsl(0, 100%, 50%)", (255, 0, 0)),
            ("  #ABC  ", (170, 187, 204)),
        ],
    )
    def test_parses(self, value: str, expected: tuple[int, int, int]) -> None:
        assert parse_color(value) == expected

    @pytest.mark.parametrize("value", ["red", "var(--color)", "#12", "#abcde", "", "{{ settings.x }}"])
    def test_unparseable(self, value: str) -> None:
        assert parse_color(value) is None

    def test_to_hex(self) -> None:
        assert to_hex((59, 130, 246)) == "#3b82f6"


class TestNormalizeValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("#FFF", "#ffffff"),
            ("#FFFFFF", "#ffffff"),
            ("#3B82F680", "#3b82f680"),
            ("  Rgba(0, 0, 0,  0.5) ", "rgba(0,0,0,0.5)"),
            ("1px   solid\n#DDD", "1px solid #ddd"),
            ("16PX", "16px"),
        ],
    )
    def test_normalize(self, value: str, expected: str) -> None:
        assert normalize_value(value) == expected


class TestExtractNumericValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("16px", 16.0), ("1.5rem", 24.0), ("2em", 32.0), ("8", 8.0), ("-4px", -4.0), (" 12 px ", 12.0)],
    )
    def test_numeric(self, value: str, expected: float) -> None:
        assert extract_numeric_value(value) == expected

    @pytest.mark.parametrize("value", ["50%", "auto", "calc(1px + 2px)", "1px 2px"])
    def test_not_numeric(self, value: str) -> None:
        assert extract_numeric_value(value) is None


class TestPerceptual:
    def test_white_lab(self) -> None:
        lightness, a, b = rgb_to_lab((255, 255, 255))
        assert lightness == pytest.approx(100, abs=0.01)
        assert a == pytest.approx(0, abs=0.01)
        assert b == pytest.approx(0, abs=0.01)

    def test_ciede2000_reference_pair(self) -> None:
        """First pair of the Sharma et al. CIEDE2000 test data."""
        assert ciede2000((50.0, 2.6772, -79.7751), (50.0, 0.0, -82.7485)) == pytest.approx(2.0425, abs=1e-4)

    def test_ciede2000_achromatic_pair(self) -> None:
        """One side has zero chroma, so only lightness and chroma differ."""
        assert ciede2000((50.0, 0.0, 0.0), (50.0, -1.0, 2.0)) == pytest.approx(2.3669, abs=1e-4)

    def test_identical_colors(self) -> None:
        assert color_delta_e("#fff", "#ffffff") == 0

    def test_black_white(self) -> None:
        assert color_delta_e("#000", "#fff") == pytest.approx(100, abs=0.5)

    def test_symmetric(self) -> None:
        a = color_delta_e("#3b82f6", "#ef4444")
        b = color_delta_e("#ef4444", "#3b82f6")
        assert a == pytest.approx(b)

    def test_unparseable_distance(self) -> None:
        assert color_delta_e("#fff", "var(--x)") is None

    def test_luminance_and_shade(self) -> None:
        assert relative_luminance((255, 255, 255)) == pytest.approx(1.0)
        assert shade_qualifier((255, 255, 255)) == "light"
        assert shade_qualifier((17, 24, 39)) == "dark"
        assert shade_qualifier((128, 128, 128)) == "mid"
