"""Per-file token collection shared by all format extractors."""

from __future__ import annotations

from tokenplane.extraction.lines import LineIndex
from tokenplane.extraction.patterns import clean, reference_target
from tokenplane.tokens.models import (
    AnnotationBase,
    ExtractedToken,
    ReferenceAnnotation,
    SourceAnnotation,
    SourceFormat,
    TokenCategory,
    TokenMetadata,
)


class TokenCollector:
    """Accumulates tokens for one file.

    Offsets passed to ``add`` are always absolute offsets into the whole
    file, so delegated extraction (a ``<style>`` block inside a template)
    gets correct line numbers and context without any post-hoc fix-ups.
    Tokens collected before a failure survive it; the dispatcher returns
    whatever is here.
    """

    def __init__(
        self,
        content: str,
        file_path: str,
        source_format: SourceFormat,
        *,
        context_chars: int = 80,
    ) -> None:
        self.content = content
        self.file_path = file_path
        self.source_format = source_format
        self.context_chars = context_chars
        self.lines = LineIndex(content)
        self.tokens: list[ExtractedToken] = []
        self._seen: set[tuple[int, str]] = set()
        self._declarations: list[tuple[int, int]] = []

    def add(
        self,
        value: str,
        category: TokenCategory,
        offset: int,
        *,
        name: str | None = None,
        selector: str | None = None,
        setting_type: str | None = None,
        context: str | None = None,
        annotations: tuple[AnnotationBase, ...] = (),
    ) -> ExtractedToken | None:
        value = clean(value)
        if not value:
            return None

        metadata = TokenMetadata(
            annotations=(
                SourceAnnotation(
                    format=self.source_format,
                    setting_type=setting_type,
                    selector=selector,
                ),
                *annotations,
            )
        )
        if (ref := reference_target(value)) is not None and metadata.reference is None:
            target, syntax = ref
            metadata = metadata.with_annotation(ReferenceAnnotation(target=target, syntax=syntax))

        line = self.lines.line_at(offset)
        token = ExtractedToken(
            id=f"{self.file_path}#{len(self.tokens) + 1}",
            name=name,
            category=category,
            value=value,
            file_path=self.file_path,
            line_number=line,
            context=context if context is not None else self.lines.context(offset, self.context_chars),
            metadata=metadata,
        )
        self.tokens.append(token)
        self._seen.add((line, value))
        return token

    def mark_declaration(self, start: int, end: int) -> None:
        """Record the absolute span of a named custom-property declaration."""
        self._declarations.append((start, end))

    def in_declaration(self, offset: int) -> bool:
        return any(start <= offset < end for start, end in self._declarations)

    def seen(self, offset: int, value: str) -> bool:
        """Whether ``value`` was already collected on the line containing ``offset``."""
        return (self.lines.line_at(offset), clean(value)) in self._seen
