"""tpl tokens command - list registry tokens."""

import json
from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.context import token_tier
from tokenplane.core.progress import get_console, status
from tokenplane.tokens.models import TokenCategory


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--category",
    type=click.Choice([c.value for c in TokenCategory]),
    help="Only tokens of this category",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tokens_command(path: Path, category: str | None, as_json: bool) -> None:
    """List the design tokens stored for a theme."""
    with open_project(path) as project:
        if category:
            tokens = project.store.list_by_category(project.project_id, TokenCategory(category))
        else:
            tokens = project.store.list_by_project(project.project_id)
        usages = project.store.count_usages(project.project_id)

        if as_json:
            click.echo(
                json.dumps(
                    [
                        {
                            "id": t.id,
                            "name": t.name,
                            "category": t.category,
                            "value": t.value,
                            "tier": token_tier(t).value,
                            "usages": usages.get(t.id or -1, 0),
                        }
                        for t in tokens
                    ],
                    indent=2,
                )
            )
            return

        if not tokens:
            status("No tokens. Run 'tpl scan' first.", style="info")
            return

        table = Table(title=f"{len(tokens)} tokens")
        table.add_column("Name", style="cyan")
        table.add_column("Category")
        table.add_column("Value")
        table.add_column("Tier", style="dim")
        table.add_column("Usages", justify="right")
        for t in tokens:
            table.add_row(t.name, t.category, t.value, token_tier(t).value, str(usages.get(t.id or -1, 0)))
        get_console().print(table)
