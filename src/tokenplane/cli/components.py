"""tpl components command - list components found by the last scan."""

import json
from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.core.progress import get_console, status


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def components_command(path: Path, as_json: bool) -> None:
    """List theme components (files sharing a base name)."""
    with open_project(path) as project:
        components = project.store.list_components(project.project_id)

        if as_json:
            click.echo(
                json.dumps(
                    [
                        {
                            "name": c.name,
                            "type": c.component_type,
                            "primary_file": c.file_path,
                            "files": c.get_files(),
                            "variants": c.get_variants(),
                            "token_ids": c.get_token_ids(),
                            **c.get_details(),
                        }
                        for c in components
                    ],
                    indent=2,
                )
            )
            return

        if not components:
            status("No components. Run 'tpl scan' first.", style="info")
            return

        table = Table(title=f"{len(components)} components")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Files")
        table.add_column("Kind", style="dim")
        table.add_column("Tokens", justify="right")
        for c in components:
            details = c.get_details()
            kind = details.get("semantic_type") or ("button" if c.get_variants() else "")
            files = ", ".join(c.get_files())
            table.add_row(c.name, c.component_type, files, kind, str(len(c.get_token_ids())))
        get_console().print(table)
