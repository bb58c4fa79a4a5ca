"""Offset to line-number mapping for extracted matches."""

from __future__ import annotations

from bisect import bisect_right


class LineIndex:
    """Line-start offsets of one file, computed once.

    ``line_at`` is a binary search, so locating every match in a file costs
    O(m log n) instead of rescanning the prefix for each match.
    """

    def __init__(self, content: str) -> None:
        self.content = content
        starts = [0]
        pos = content.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = content.find("\n", pos + 1)
        self._starts = starts

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_at(self, offset: int) -> int:
        """1-based line number containing ``offset``."""
        return bisect_right(self._starts, max(offset, 0))

    def line_text(self, offset: int) -> str:
        """Full text of the line containing ``offset``, without the newline."""
        line = self.line_at(offset)
        start = self._starts[line - 1]
        end = self.content.find("\n", start)
        return self.content[start:] if end == -1 else self.content[start:end]

    def context(self, offset: int, chars: int) -> str:
        """Up to ``chars`` characters either side of ``offset``, flattened to one line."""
        start = max(0, offset - chars)
        end = min(len(self.content), offset + chars)
        return self.content[start:end].replace("\n", " ").strip()
