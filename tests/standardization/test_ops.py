"""Tests for standardization/ops.py - the conform/unify/adopt/remove audit."""

from __future__ import annotations

from pathlib import Path

import pytest

from tokenplane.files.ops import LocalFileStore
from tokenplane.registry.store import RegistryStore
from tokenplane.standardization.ops import near_confidence, standardize_theme
from tokenplane.tokens.models import TokenCategory

C = TokenCategory

AUDIT_CSS = """.a {
  color: #3b82f6;
  background: #3b82f7;
  border-radius: 4px;
}
.b {
  color: #10b981;
  fill: #10b982;
  stroke: #dc2626;
}
"""


@pytest.fixture
def audit_project(tmp_path: Path, store: RegistryStore) -> tuple[str, LocalFileStore]:
    root = tmp_path / "audit"
    root.mkdir()
    (root / "audit.css").write_text(AUDIT_CSS)
    project = str(root.resolve())

    primary = store.create_token(project, "color-primary", C.COLOR, "#3b82f6")
    assert primary.id is not None
    store.create_usage(primary.id, "audit.css", 2)
    store.create_token(project, "radius-lg", C.BORDER, "12px")
    return project, LocalFileStore({project: root})


class TestNearConfidence:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("16px", 1.0), ("1rem", 1.0), ("16.5px", 0.85), ("18px", 0.6), ("20px", None)],
    )
    def test_numeric(self, value: str, expected: float | None) -> None:
        assert near_confidence(value, "16px", C.SPACING) == expected

    def test_color(self) -> None:
        assert near_confidence("#3b82f6", "#3b82f6", C.COLOR) == 1.0
        assert near_confidence("#3b82f7", "#3b82f6", C.COLOR) == 0.9
        assert near_confidence("#dc2626", "#3b82f6", C.COLOR) is None
        assert near_confidence("not-a-color", "#3b82f6", C.COLOR) is None

    def test_other_categories_never_near(self) -> None:
        assert near_confidence("0 1px #000", "0 1px #000", C.SHADOW) is None


class TestStandardizeTheme:
    def test_conform(self, store: RegistryStore, audit_project: tuple[str, LocalFileStore]) -> None:
        project, files = audit_project

        audit = standardize_theme(project, files, store)

        assert [(a.id, a.line, a.hardcoded_value, a.confidence) for a in audit.conform] == [
            ("conform-0", 2, "#3b82f6", 1.0),
            ("conform-1", 3, "#3b82f7", 0.9),
        ]
        assert {a.target_token.name for a in audit.conform} == {"color-primary"}
        assert audit.conform[0].file_path == "audit.css"

    def test_unify(self, store: RegistryStore, audit_project: tuple[str, LocalFileStore]) -> None:
        project, files = audit_project

        audit = standardize_theme(project, files, store)

        assert len(audit.unify) == 1
        unify = audit.unify[0]
        assert [(v.value, v.line) for v in unify.values] == [("#10b981", 7), ("#10b982", 8)]
        assert unify.canonical_value == "#10b981"
        assert unify.suggested_name == "color-unified-0"

    def test_adopt(self, store: RegistryStore, audit_project: tuple[str, LocalFileStore]) -> None:
        project, files = audit_project

        audit = standardize_theme(project, files, store)

        assert [(a.hardcoded_value, a.suggested_category) for a in audit.adopt] == [
            ("#dc2626", C.COLOR),
            ("4px", C.BORDER),
        ]
        for action in audit.adopt:
            assert action.suggested_name
            assert action.suggested_name not in {"color-primary", "radius-lg"}
            assert action.occurrence_count == 1

    def test_remove_and_stats(self, store: RegistryStore, audit_project: tuple[str, LocalFileStore]) -> None:
        project, files = audit_project

        audit = standardize_theme(project, files, store)

        assert [(r.token_name, r.token_value) for r in audit.remove] == [("radius-lg", "12px")]
        stats = audit.stats
        assert (stats.files_scanned, stats.values_found) == (1, 6)
        assert (stats.conform_count, stats.adopt_count, stats.unify_count, stats.remove_count) == (2, 2, 1, 1)

    def test_declarations_and_references_skipped(self, store: RegistryStore, tmp_path: Path) -> None:
        root = tmp_path / "declared"
        root.mkdir()
        (root / "vars.css").write_text(":root {\n  --color-primary: #3b82f6;\n}\na { color: var(--color-primary); }\n")
        project = str(root.resolve())
        store.create_token(project, "color-primary", C.COLOR, "#3b82f6")

        audit = standardize_theme(project, LocalFileStore({project: root}), store)

        assert audit.stats.values_found == 0
        assert audit.conform == [] and audit.adopt == []

    def test_read_only(self, store: RegistryStore, audit_project: tuple[str, LocalFileStore], tmp_path: Path) -> None:
        project, files = audit_project

        standardize_theme(project, files, store)

        assert (tmp_path / "audit" / "audit.css").read_text() == AUDIT_CSS
        assert [t.name for t in store.list_by_project(project)] == ["color-primary", "radius-lg"]
