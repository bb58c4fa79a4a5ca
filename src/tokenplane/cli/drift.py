"""tpl drift command - hardcoded values in one file."""

from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.core.progress import get_console, pluralize, status
from tokenplane.drift.detector import DriftDetector
from tokenplane.files.ops import validate_path_in_root


@click.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file", type=click.Path(path_type=Path))
def drift_command(path: Path, file: Path) -> None:
    """Report values in FILE that should use registry tokens.

    PATH is the theme root; FILE is relative to it.
    """
    with open_project(path) as project:
        try:
            full = validate_path_in_root(project.root, file)
            content = full.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise click.ClickException(f"Cannot read {file}: {e}") from e

        relative = full.relative_to(project.root).as_posix()
        result = DriftDetector(project.store).detect_drift(project.project_id, content, relative)

        if result.drift_count == 0:
            status(f"No drift in {relative}", style="success")
            return

        status(
            f"{relative}: {len(result.exact_matches)} exact, {len(result.near_matches)} near, "
            f"{len(result.hardcoded_values)} hardcoded",
            style="warning",
        )
        if not result.suggestions:
            return

        table = Table(title=pluralize(len(result.suggestions), "suggestion"))
        table.add_column("Line", justify="right")
        table.add_column("Value")
        table.add_column("Replacement", style="cyan")
        table.add_column("Confidence", justify="right")
        table.add_column("Reason", style="dim")
        for s in result.suggestions:
            table.add_row(
                str(s.line_number),
                s.hardcoded_value,
                s.suggested_replacement,
                f"{s.confidence:.2f}",
                s.reason,
            )
        get_console().print(table)
