"""Project file access.

``FileStore`` is the narrow contract the applicator, drift tools and
ingestion consume. ``LocalFileStore`` implements it over directories on
disk, one root per project.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from tokenplane.core.logging import get_logger
from tokenplane.extraction.ops import FORMAT_BY_SUFFIX

logger = get_logger("files")

IGNORED_DIRS = frozenset(
    {".git", ".hg", ".svn", ".tokenplane", "node_modules", "__pycache__", ".venv", "venv"}
)


@dataclass(frozen=True)
class FileRef:
    """A file known to the store. ``path`` is relative to the project root."""

    id: str
    path: str


@dataclass(frozen=True)
class FileContent:
    id: str
    path: str
    content: str


@runtime_checkable
class FileStore(Protocol):
    def list_project_files(self, project_id: str) -> list[FileRef]: ...

    def get_file(self, file_id: str) -> FileContent: ...

    def update_file(self, file_id: str, content: str) -> None: ...


def validate_path_in_root(root: Path, user_path: str | Path) -> Path:
    """Resolve ``user_path`` against ``root`` and refuse anything outside it.

    Raises:
        PermissionError: the path escapes ``root``.
    """
    resolved_root = root.resolve()
    full_path = (root / user_path).resolve()
    if not full_path.is_relative_to(resolved_root):
        raise PermissionError(f"Path '{user_path}' escapes project root {resolved_root}")
    return full_path


class LocalFileStore:
    """Directories on disk as projects.

    File ids are absolute POSIX paths, so ``get_file`` and ``update_file``
    need no project id. A project id that was never registered is treated
    as a directory path itself.
    """

    def __init__(
        self,
        roots: Mapping[str, Path] | None = None,
        *,
        suffixes: Iterable[str] | None = None,
    ) -> None:
        self._roots: dict[str, Path] = {pid: root.resolve() for pid, root in (roots or {}).items()}
        self._suffixes = frozenset(suffixes) if suffixes is not None else frozenset(FORMAT_BY_SUFFIX)

    def register(self, project_id: str, root: Path) -> None:
        self._roots[project_id] = root.resolve()

    def root_for(self, project_id: str) -> Path:
        root = self._roots.get(project_id)
        if root is None:
            root = Path(project_id).resolve()
            self._roots[project_id] = root
        return root

    def _owning_root(self, file_id: str) -> Path:
        path = Path(file_id)
        for root in self._roots.values():
            if path.is_relative_to(root):
                return root
        raise PermissionError(f"File '{file_id}' is outside every registered project root")

    def list_project_files(self, project_id: str) -> list[FileRef]:
        root = self.root_for(project_id)
        if not root.is_dir():
            return []

        refs: list[FileRef] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
            for filename in sorted(filenames):
                if Path(filename).suffix.lower() not in self._suffixes:
                    continue
                full = Path(dirpath) / filename
                refs.append(FileRef(id=full.as_posix(), path=full.relative_to(root).as_posix()))
        return refs

    def get_file(self, file_id: str) -> FileContent:
        """Read a file, preserving its line endings.

        Raises:
            PermissionError: outside every project root.
            OSError / UnicodeDecodeError: unreadable.
        """
        root = self._owning_root(file_id)
        full = validate_path_in_root(root, file_id)
        with open(full, encoding="utf-8", newline="") as f:
            content = f.read()
        return FileContent(id=file_id, path=full.relative_to(root).as_posix(), content=content)

    def update_file(self, file_id: str, content: str) -> None:
        root = self._owning_root(file_id)
        full = validate_path_in_root(root, file_id)
        with open(full, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.debug("file_updated", path=full.relative_to(root).as_posix(), size=len(content))
