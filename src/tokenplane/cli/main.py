"""TokenPlane CLI - tpl command."""

import click

from tokenplane.cli.apply import apply_command, impact_command, rollback_command
from tokenplane.cli.audit import audit_command
from tokenplane.cli.components import components_command
from tokenplane.cli.drift import drift_command
from tokenplane.cli.palette import palette_command
from tokenplane.cli.ramp import ramp_command
from tokenplane.cli.scan import scan_command
from tokenplane.cli.tokens import tokens_command
from tokenplane.cli.versions import versions_command
from tokenplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="tpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TokenPlane - design token extraction, drift detection and safe rollout."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(scan_command, name="scan")
cli.add_command(tokens_command, name="tokens")
cli.add_command(drift_command, name="drift")
cli.add_command(impact_command, name="impact")
cli.add_command(apply_command, name="apply")
cli.add_command(rollback_command, name="rollback")
cli.add_command(versions_command, name="versions")
cli.add_command(components_command, name="components")
cli.add_command(audit_command, name="audit")
cli.add_command(ramp_command, name="ramp")
cli.add_command(palette_command, name="palette")


if __name__ == "__main__":
    cli()
