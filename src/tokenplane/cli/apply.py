"""tpl impact / apply / rollback commands."""

import getpass
from pathlib import Path

import click
from rich.table import Table

from tokenplane.application.models import DeploymentResult, ImpactAnalysis
from tokenplane.cli.utils import build_changes, change_options, open_project
from tokenplane.core.progress import get_console, pluralize, status

_RISK_STYLES = {"low": "green", "medium": "yellow", "high": "red"}


def _default_author() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "unknown"


def _print_impact(impact: ImpactAnalysis) -> None:
    if not impact.files_affected:
        status(impact.risk_summary, style="info")
        return
    table = Table(title=f"{pluralize(impact.total_instances, 'instance')} to change")
    table.add_column("File", style="cyan")
    table.add_column("Instances", justify="right")
    table.add_column("Risk")
    for f in impact.files_affected:
        style = _RISK_STYLES[f.risk_level]
        table.add_row(f.file_path, str(f.instance_count), f"[{style}]{f.risk_level}[/{style}]")
    get_console().print(table)
    status(impact.risk_summary, style="warning" if "High" in impact.risk_summary else "info")


def _print_result(result: DeploymentResult) -> None:
    if not result.success:
        for error in result.errors:
            status(error, style="error")
        if result.files_modified:
            status(
                f"Partially applied: {pluralize(len(result.files_modified), 'file')} written",
                style="warning",
            )
        raise click.ClickException("Apply failed")
    if not result.files_modified:
        status("No matching values; nothing changed", style="info")
        return
    status(
        f"Changed {pluralize(result.instances_changed, 'instance')} "
        f"in {pluralize(len(result.files_modified), 'file')}",
        style="success",
    )
    for path in result.files_modified:
        status(path, indent=4)
    if result.version_id is not None:
        status(f"Recorded as version {result.version_id}", style="info")


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@change_options
def impact_command(
    path: Path, renames: tuple[str, ...], replaces: tuple[str, ...], deletes: tuple[str, ...]
) -> None:
    """Show which files a token change would touch, without writing."""
    with open_project(path) as project:
        changes = build_changes(project, renames, replaces, deletes)
        _print_impact(project.applicator.analyze_impact(project.project_id, changes))


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@change_options
@click.option("--author", default=None, help="Recorded author (default: current user)")
def apply_command(
    path: Path,
    renames: tuple[str, ...],
    replaces: tuple[str, ...],
    deletes: tuple[str, ...],
    author: str | None,
) -> None:
    """Apply token changes to every theme file.

    Nothing is written if any rewritten file fails its syntax check.
    """
    with open_project(path) as project:
        changes = build_changes(project, renames, replaces, deletes)
        result = project.applicator.apply_token_changes(
            project.project_id, changes, author or _default_author()
        )
        _print_result(result)


@click.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("version_id", type=int)
def rollback_command(path: Path, version_id: int) -> None:
    """Undo the changes recorded in VERSION_ID."""
    with open_project(path) as project:
        result = project.applicator.rollback(project.project_id, version_id)
        status(f"Rolled back version {version_id}", style="success")
        _print_result(result)
