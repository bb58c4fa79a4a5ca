"""tpl scan command - extract tokens from a theme into the registry."""

from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.core.progress import get_console, pluralize, spinner, status
from tokenplane.registry.ingest import ingest_project


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
def scan_command(path: Path) -> None:
    """Extract, infer and persist design tokens for a theme.

    PATH is the theme root (default: current directory). Re-running a scan
    refreshes usages of tokens that already exist.
    """
    with open_project(path) as project:
        with spinner(f"Scanning {project.root}"):
            report = ingest_project(project.project_id, project.files, project.store, project.extractor)

        console = get_console()
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_row("Files scanned", str(report.files_scanned))
        table.add_row("Files skipped", str(report.files_skipped))
        table.add_row("Values extracted", str(report.tokens_extracted))
        table.add_row("Tokens created", str(report.tokens_created))
        table.add_row("Tokens updated", str(report.tokens_updated))
        table.add_row("Usages recorded", str(report.usages_recorded))
        table.add_row("Aliases linked", str(report.parents_linked))
        table.add_row("Components detected", str(len(report.components)))
        console.print(table)

        if report.failures:
            status(f"{pluralize(len(report.failures), 'token')} could not be saved", style="warning")
            for failure in report.failures:
                status(failure, indent=4)
        else:
            status("Registry updated", style="success")
