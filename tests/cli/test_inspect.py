"""Tests for tpl drift, audit, ramp and palette."""

import json
from pathlib import Path

from click.testing import CliRunner

from tokenplane.cli.main import cli


class TestDriftCommand:
    def test_reports_drift(self, runner: CliRunner, scanned_theme: Path) -> None:
        (scanned_theme / "assets" / "new.css").write_text(".promo {\n  color: #3B82F6;\n}\n")

        result = runner.invoke(cli, ["drift", str(scanned_theme), "assets/new.css"])

        assert result.exit_code == 0, result.output
        assert "1 exact" in result.output
        assert "var(--" in result.output

    def test_clean_file(self, runner: CliRunner, scanned_theme: Path) -> None:
        (scanned_theme / "assets" / "clean.css").write_text(".a {\n  color: var(--color-primary);\n}\n")

        result = runner.invoke(cli, ["drift", str(scanned_theme), "assets/clean.css"])

        assert result.exit_code == 0
        assert "No drift" in result.output

    def test_path_outside_theme(self, runner: CliRunner, theme_dir: Path) -> None:
        result = runner.invoke(cli, ["drift", str(theme_dir), "../outside.css"])

        assert result.exit_code == 1
        assert "Cannot read" in result.output

    def test_missing_file(self, runner: CliRunner, theme_dir: Path) -> None:
        result = runner.invoke(cli, ["drift", str(theme_dir), "assets/missing.css"])
        assert result.exit_code == 1


class TestAuditCommand:
    def test_json(self, runner: CliRunner, scanned_theme: Path) -> None:
        result = runner.invoke(cli, ["audit", str(scanned_theme), "--json"])

        assert result.exit_code == 0, result.output
        audit = json.loads(result.stdout)
        assert set(audit) == {"conform", "adopt", "unify", "remove", "stats"}
        assert audit["stats"]["files_scanned"] == 2
        assert audit["stats"]["conform_count"] == len(audit["conform"])

    def test_empty_registry_adopts_everything(self, runner: CliRunner, theme_dir: Path) -> None:
        result = runner.invoke(cli, ["audit", str(theme_dir), "--json"])

        audit = json.loads(result.stdout)
        assert audit["conform"] == []
        assert audit["remove"] == []
        assert audit["adopt"]

    def test_table_output(self, runner: CliRunner, scanned_theme: Path) -> None:
        result = runner.invoke(cli, ["audit", str(scanned_theme), "--limit", "3"])

        assert result.exit_code == 0
        assert "conform" in result.output


class TestRampCommand:
    def test_css(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["ramp", "#3b82f6", "--css", "--prefix", "blue"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == ":root {"
        assert lines[-1] == "}"
        assert len(lines) == 11
        assert lines[1].startswith("  --blue-100: #")
        assert lines[-2].startswith("  --blue-900: #")

    def test_steps(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["ramp", "#ef4444", "--css", "--steps", "3"])
        assert [line.split(":")[0].strip() for line in result.stdout.splitlines()[1:-1]] == [
            "--color-100",
            "--color-200",
            "--color-300",
        ]

    def test_table(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["ramp", "#3b82f6"])
        assert result.exit_code == 0
        assert "color-500" in result.output

    def test_bad_color(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["ramp", "not-a-color"])

        assert result.exit_code == 2
        assert "Not a color" in result.output

    def test_too_few_steps(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["ramp", "#3b82f6", "--steps", "1"])
        assert result.exit_code == 2


class TestPaletteCommand:
    def test_json(self, runner: CliRunner, theme_dir: Path) -> None:
        result = runner.invoke(cli, ["palette", str(theme_dir), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["colors"]["primary"]["hex"] == "#3b82f6"
        assert data["colors"]["primary"]["frequency"] == 2
        assert data["source"] == "mixed"
        assert data["vars"]["--palette-primary"].startswith("oklch(")

    def test_css_with_prefix(self, runner: CliRunner, theme_dir: Path) -> None:
        result = runner.invoke(cli, ["palette", str(theme_dir), "--css", "--prefix", "ambient"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == ":root {"
        assert lines[-1] == "}"
        assert len(lines) == 8
        assert lines[1].startswith("  --ambient-primary: oklch(")

    def test_empty_theme_uses_default_palette(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["palette", str(tmp_path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["colors"]["primary"]["hex"] == "#4263eb"
