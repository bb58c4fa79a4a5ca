"""tpl palette command - dominant theme colors as CSS custom properties."""

import json
from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.core.progress import get_console, status
from tokenplane.inference.chromatic import chromatic_vars, extract_dominant_colors
from tokenplane.registry.ingest import read_project_files


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--intensity",
    default=1.0,
    show_default=True,
    type=click.FloatRange(0.0, 1.0, clamp=True),
    help="Chroma multiplier for the oklch values",
)
@click.option("--prefix", default="palette", show_default=True, help="Custom property prefix")
@click.option("--css", "as_css", is_flag=True, help="Output a :root block")
@click.option("--json", "as_json", is_flag=True, help="Output palette and variables as JSON")
def palette_command(path: Path, intensity: float, prefix: str, as_css: bool, as_json: bool) -> None:
    """Find the three dominant colors of a theme."""
    with open_project(path) as project:
        palette = extract_dominant_colors(list(read_project_files(project.project_id, project.files)))
    css_vars = chromatic_vars(palette, intensity, prefix=prefix)
    roles = {"primary": palette.primary, "secondary": palette.secondary, "accent": palette.accent}

    if as_json:
        payload = {
            "source": palette.source,
            "colors": {role: {"hex": c.hex, "frequency": c.frequency} for role, c in roles.items()},
            "vars": css_vars,
        }
        click.echo(json.dumps(payload, indent=2))
        return
    if as_css:
        click.echo(":root {")
        for name, value in css_vars.items():
            click.echo(f"  {name}: {value};")
        click.echo("}")
        return

    table = Table()
    table.add_column("Role", style="cyan")
    table.add_column("Hex")
    table.add_column("Seen", justify="right")
    table.add_column("Swatch")
    for role, color in roles.items():
        table.add_row(role, color.hex, str(color.frequency), f"[on {color.hex}]      [/]")
    get_console().print(table)
    status(f"Palette source: {palette.source}", style="none")
