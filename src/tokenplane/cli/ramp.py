"""tpl ramp command - lightness ramp for a base color."""

import click
from rich.table import Table

from tokenplane.core.progress import get_console
from tokenplane.inference.chromatic import generate_ramp


@click.command()
@click.argument("color")
@click.option("--steps", default=9, show_default=True, type=click.IntRange(min=2), help="Number of steps")
@click.option("--prefix", default="color", show_default=True, help="Token name prefix")
@click.option("--css", "as_css", is_flag=True, help="Output CSS custom properties")
def ramp_command(color: str, steps: int, prefix: str, as_css: bool) -> None:
    """Generate a light-to-dark ramp from COLOR, keeping its hue."""
    try:
        ramp = generate_ramp(color, steps, prefix=prefix)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="COLOR") from e

    if as_css:
        click.echo(":root {")
        for step in ramp:
            click.echo(f"  --{step.name}: {step.value};")
        click.echo("}")
        return

    table = Table()
    table.add_column("Token", style="cyan")
    table.add_column("Value")
    table.add_column("Swatch")
    for step in ramp:
        table.add_row(step.name, step.value, f"[on {step.value}]      [/]")
    get_console().print(table)
