"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from tokenplane.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def scanned_theme(runner: CliRunner, theme_dir: Path) -> Path:
    """Theme directory whose registry has been populated by ``tpl scan``."""
    result = runner.invoke(cli, ["scan", str(theme_dir)])
    assert result.exit_code == 0, result.output
    return theme_dir
