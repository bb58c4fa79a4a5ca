"""Heuristic design-value extraction from stylesheets, templates, scripts and settings."""

from tokenplane.extraction.ops import (
    SourceFile,
    TokenExtractor,
    detect_format,
    extract_tokens,
)

__all__ = ["SourceFile", "TokenExtractor", "detect_format", "extract_tokens"]
