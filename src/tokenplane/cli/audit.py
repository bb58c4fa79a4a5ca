"""tpl audit command - theme standardization audit."""

import json
from dataclasses import asdict
from pathlib import Path

import click
from rich.table import Table

from tokenplane.cli.utils import open_project
from tokenplane.core.progress import get_console, spinner, status
from tokenplane.standardization.models import StandardizationAudit
from tokenplane.standardization.ops import standardize_theme


def _print_audit(audit: StandardizationAudit, limit: int) -> None:
    console = get_console()
    stats = audit.stats
    status(
        f"{stats.files_scanned} files, {stats.values_found} values: "
        f"{stats.conform_count} conform, {stats.adopt_count} adopt, "
        f"{stats.unify_count} unify, {stats.remove_count} remove",
        style="none",
    )

    if audit.conform:
        table = Table(title="Conform to existing tokens")
        table.add_column("Location", style="cyan")
        table.add_column("Value")
        table.add_column("Token")
        table.add_column("Confidence", justify="right")
        for a in audit.conform[:limit]:
            table.add_row(
                f"{a.file_path}:{a.line}", a.hardcoded_value, a.target_token.name, f"{a.confidence:.2f}"
            )
        console.print(table)

    if audit.unify:
        table = Table(title="Unify near-identical colors")
        table.add_column("Suggested name", style="cyan")
        table.add_column("Canonical")
        table.add_column("Values")
        for u in audit.unify[:limit]:
            table.add_row(u.suggested_name, u.canonical_value, ", ".join(v.value for v in u.values))
        console.print(table)

    if audit.adopt:
        table = Table(title="Adopt as new tokens")
        table.add_column("Location", style="cyan")
        table.add_column("Value")
        table.add_column("Suggested name")
        table.add_column("Occurrences", justify="right")
        for a in audit.adopt[:limit]:
            table.add_row(
                f"{a.file_path}:{a.line}", a.hardcoded_value, a.suggested_name, str(a.occurrence_count)
            )
        console.print(table)

    if audit.remove:
        table = Table(title="Remove unused tokens")
        table.add_column("Token", style="cyan")
        table.add_column("Value")
        for r in audit.remove[:limit]:
            table.add_row(r.token_name, r.token_value)
        console.print(table)


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--limit", default=20, show_default=True, help="Rows shown per action")
@click.option("--json", "as_json", is_flag=True, help="Output the full audit as JSON")
def audit_command(path: Path, limit: int, as_json: bool) -> None:
    """Audit a theme for values that should use, become, or drop tokens."""
    with open_project(path) as project:
        if as_json:
            audit = standardize_theme(project.project_id, project.files, project.store, project.extractor)
            click.echo(json.dumps(asdict(audit), indent=2))
            return
        with spinner("Auditing theme"):
            audit = standardize_theme(project.project_id, project.files, project.store, project.extractor)
        _print_audit(audit, limit)
