"""Tests for drift/detector.py - classifying literals against the registry."""

from __future__ import annotations

from collections.abc import Sequence

from tokenplane.drift.detector import DriftDetector
from tokenplane.drift.models import DriftResult, StoredToken, TokenSummary
from tokenplane.registry.store import RegistryStore
from tokenplane.tokens.models import TokenCategory

BUTTON_CSS = """:root {
  --color-primary: #3b82f6;
}
.button {
  color: #3B82F6;
  background: #3b82f7;
  padding: 17px;
  outline-color: #123456;
  fill: var(--color-primary);
}
"""


class FakeTokenSource:
    def __init__(self, tokens: Sequence[TokenSummary]) -> None:
        self.tokens = list(tokens)
        self.calls: list[str] = []

    def list_by_project(self, project_id: str) -> Sequence[TokenSummary]:
        self.calls.append(project_id)
        return self.tokens


def _detect(tokens: Sequence[TokenSummary], content: str = BUTTON_CSS) -> DriftResult:
    return DriftDetector(FakeTokenSource(tokens)).detect_drift("shop", content, "assets/button.css")


REGISTRY = [
    StoredToken("color-primary", "#3b82f6", "color"),
    StoredToken("spacing-md", "16px", "spacing"),
]


class TestDetectDrift:
    def test_classification(self) -> None:
        result = _detect(REGISTRY)

        assert result.file_path == "assets/button.css"
        assert [(i.value, i.line_number) for i in result.exact_matches] == [("#3B82F6", 5)]
        assert sorted((i.value, i.line_number) for i in result.near_matches) == [
            ("#3b82f7", 6),
            ("17px", 7),
        ]
        assert [(i.value, i.line_number) for i in result.hardcoded_values] == [("#123456", 8)]
        assert result.drift_count == 4

    def test_declared_and_referenced_tokens_skipped(self) -> None:
        result = _detect(REGISTRY)

        values = [
            i.value for i in (*result.exact_matches, *result.near_matches, *result.hardcoded_values)
        ]
        assert "var(--color-primary)" not in values
        assert all(i.line_number != 2 for i in result.exact_matches)

    def test_one_line_registry_definition_is_not_drift(self) -> None:
        result = _detect(REGISTRY, ":root{--color-primary:#3b82f6}\n")

        assert result.drift_count == 0
        assert result.suggestions == []

    def test_suggestions(self) -> None:
        result = _detect(REGISTRY)

        by_value = {s.hardcoded_value: s for s in result.suggestions}
        assert set(by_value) == {"#3B82F6", "#3b82f7", "17px"}
        exact = by_value["#3B82F6"]
        assert exact.confidence == 1.0
        assert exact.suggested_token == "color-primary"
        assert exact.suggested_replacement == "var(--color-primary)"
        assert by_value["17px"].suggested_replacement == "var(--spacing-md)"
        assert result.suggestions[0].confidence == 1.0

    def test_empty_registry_everything_hardcoded(self) -> None:
        result = _detect([])

        assert result.exact_matches == []
        assert result.near_matches == []
        assert {i.value for i in result.hardcoded_values} >= {"#3b82f6", "#3B82F6", "#123456"}
        assert result.suggestions == []

    def test_unknown_file_type(self) -> None:
        result = DriftDetector(FakeTokenSource(REGISTRY)).detect_drift("shop", "color: #fff", "notes.txt")
        assert result.drift_count == 0

    def test_rereads_registry_every_call(self) -> None:
        source = FakeTokenSource(REGISTRY)
        detector = DriftDetector(source)

        detector.detect_drift("shop", BUTTON_CSS, "a.css")
        detector.detect_drift("shop", BUTTON_CSS, "a.css")

        assert source.calls == ["shop", "shop"]

    def test_numeric_near_requires_same_category(self) -> None:
        tokens = [StoredToken("radius-md", "16px", "border")]
        result = _detect(tokens, ".x {\n  padding: 17px;\n}\n")

        assert [i.category for i in result.hardcoded_values] == [TokenCategory.SPACING]
        assert result.suggestions[0].suggested_token == "radius-md"


def test_works_with_registry_store(store: RegistryStore) -> None:
    store.create_token("shop", "color-primary", TokenCategory.COLOR, "#3b82f6")

    result = DriftDetector(store).detect_drift("shop", ".a {\n  color: #3b82f6;\n}\n", "a.css")

    assert len(result.exact_matches) == 1
    assert result.suggestions[0].suggested_replacement == "var(--color-primary)"
