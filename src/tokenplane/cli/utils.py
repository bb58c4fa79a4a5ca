"""CLI utilities."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import click
from pydantic import ValidationError

from tokenplane.application.models import TokenChange
from tokenplane.application.ops import TokenApplicator
from tokenplane.config.loader import get_registry_path, load_config
from tokenplane.config.models import TokenPlaneConfig
from tokenplane.core.errors import TokenPlaneError
from tokenplane.core.logging import begin_run, end_run
from tokenplane.core.telemetry import init_telemetry, span_context
from tokenplane.extraction.ops import TokenExtractor
from tokenplane.files.ops import LocalFileStore
from tokenplane.registry.store import RegistryStore


@dataclass
class Project:
    """Everything a command needs to work on one theme directory."""

    project_id: str
    root: Path
    config: TokenPlaneConfig
    store: RegistryStore
    files: LocalFileStore

    @property
    def extractor(self) -> TokenExtractor:
        return TokenExtractor(self.config.extraction)

    @property
    def applicator(self) -> TokenApplicator:
        return TokenApplicator(self.files, self.store, self.config.apply)


@contextmanager
def open_project(path: Path) -> Iterator[Project]:
    """Load config and open the registry for the directory at ``path``.

    The project id is the resolved directory path. Library errors surface
    as ``click.ClickException`` so commands exit with a message, not a trace.
    """
    root = path.resolve()
    try:
        config = load_config(root)
        init_telemetry(config.telemetry)
        store = RegistryStore.open(get_registry_path(root, config), config.database)
    except TokenPlaneError as e:
        raise click.ClickException(e.message) from e

    project_id = str(root)
    files = LocalFileStore({project_id: root})
    begin_run(project_id)
    try:
        with span_context("tpl.command", {"project_id": project_id}):
            yield Project(project_id, root, config, store, files)
    except TokenPlaneError as e:
        raise click.ClickException(e.message) from e
    finally:
        end_run()
        store.close()


def split_pair(raw: str, option: str) -> tuple[str, str]:
    """``OLD=NEW`` -> ("OLD", "NEW")."""
    old, sep, new = raw.partition("=")
    if not sep or not old.strip() or not new.strip():
        raise click.BadParameter(f"expected OLD=NEW, got '{raw}'", param_hint=option)
    return old.strip(), new.strip()


def build_changes(
    project: Project,
    renames: Sequence[str],
    replaces: Sequence[str],
    deletes: Sequence[str],
) -> list[TokenChange]:
    """Turn ``--rename/--replace/--delete`` options into token changes.

    A replace is attributed to the registry token holding the old value,
    when there is one. A delete may carry a fallback: ``--delete NAME=VALUE``.
    """
    by_value = {t.value.lower(): t.name for t in project.store.list_by_project(project.project_id)}
    changes: list[TokenChange] = []
    try:
        for raw in renames:
            old, new = split_pair(raw, "--rename")
            changes.append(
                TokenChange(
                    type="rename",
                    token_name=old.removeprefix("--"),
                    new_value=new.removeprefix("--"),
                )
            )
        for raw in replaces:
            old, new = split_pair(raw, "--replace")
            name = by_value.get(old.lower(), old)
            changes.append(TokenChange(type="replace", token_name=name, old_value=old, new_value=new))
        for raw in deletes:
            name, _, fallback = raw.partition("=")
            changes.append(
                TokenChange(
                    type="delete",
                    token_name=name.strip().removeprefix("--"),
                    new_value=fallback.strip() or None,
                )
            )
    except ValidationError as e:
        raise click.BadParameter(str(e.errors()[0]["msg"])) from e

    if not changes:
        raise click.UsageError("Nothing to do: pass at least one of --rename, --replace, --delete")
    return changes


def change_options(f):  # type: ignore[no-untyped-def]
    """Shared ``--rename/--replace/--delete`` options."""
    f = click.option(
        "--delete", "deletes", multiple=True, metavar="NAME[=FALLBACK]", help="Delete a token"
    )(f)
    f = click.option(
        "--replace", "replaces", multiple=True, metavar="OLD=NEW", help="Replace a literal value"
    )(f)
    f = click.option(
        "--rename", "renames", multiple=True, metavar="OLD=NEW", help="Rename a token"
    )(f)
    return f
