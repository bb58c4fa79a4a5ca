"""Project file access contract and local directory implementation."""

from tokenplane.files.ops import FileContent, FileRef, FileStore, LocalFileStore

__all__ = ["FileContent", "FileRef", "FileStore", "LocalFileStore"]
