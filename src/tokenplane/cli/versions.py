"""tpl versions command - applied change history."""

import json
from datetime import datetime
from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.core.progress import get_console, status


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def versions_command(path: Path, as_json: bool) -> None:
    """List recorded design system versions, newest first."""
    with open_project(path) as project:
        versions = project.store.list_versions(project.project_id)

        if as_json:
            click.echo(
                json.dumps(
                    [
                        {
                            "id": v.id,
                            "version_number": v.version_number,
                            "author_id": v.author_id,
                            "description": v.description,
                            "created_at": v.created_at,
                            "changes": v.get_changes(),
                        }
                        for v in versions
                    ],
                    indent=2,
                )
            )
            return

        if not versions:
            status("No versions recorded", style="info")
            return

        table = Table()
        table.add_column("ID", justify="right")
        table.add_column("Version", justify="right")
        table.add_column("Created")
        table.add_column("Author")
        table.add_column("Description")
        for v in versions:
            created = datetime.fromtimestamp(v.created_at).strftime("%Y-%m-%d %H:%M")
            table.add_row(str(v.id), str(v.version_number), created, v.author_id, v.description)
        get_console().print(table)
