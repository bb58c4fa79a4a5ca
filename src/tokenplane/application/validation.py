"""Syntax gates for rewritten files.

Only structural validity is checked (balanced delimiters, paired block
tags); a file that passes may still render differently.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from tokenplane.extraction.lines import LineIndex


@dataclass
class ValidationResult:
    valid: bool = True
    errors: list[str] = field(default_factory=list)

    def fail(self, message: str) -> None:
        self.valid = False
        self.errors.append(message)


_CLOSERS = {")": "(", "]": "[", "}": "{"}
_OPENERS = {v: k for k, v in _CLOSERS.items()}
_LINE_COMMENT_AFTER = frozenset(";{}")


def validate_stylesheet(content: str, *, line_comments: bool = False) -> ValidationResult:
    """Braces, parentheses, brackets, strings and comments must balance.

    ``line_comments`` enables SCSS/Less ``//`` comments. They start at line
    start or after whitespace, ``;``, ``{`` or ``}``, so ``url(http://...)``
    is unaffected.
    """
    result = ValidationResult()
    lines = LineIndex(content)
    stack: list[tuple[str, int]] = []
    i = 0
    n = len(content)
    while i < n:
        ch = content[i]
        if content.startswith("/*", i):
            end = content.find("*/", i + 2)
            if end == -1:
                result.fail(f"Unclosed comment at line {lines.line_at(i)}")
                return result
            i = end + 2
            continue
        if line_comments and content.startswith("//", i) and (
            i == 0 or content[i - 1].isspace() or content[i - 1] in _LINE_COMMENT_AFTER
        ):
            newline = content.find("\n", i)
            i = n if newline == -1 else newline
            continue
        if ch in "\"'":
            j = i + 1
            while j < n and content[j] != ch and content[j] != "\n":
                j += 2 if content[j] == "\\" else 1
            if j >= n or content[j] != ch:
                result.fail(f"Unterminated string at line {lines.line_at(i)}")
                return result
            i = j + 1
            continue
        if ch in _OPENERS:
            stack.append((ch, i))
        elif ch in _CLOSERS:
            if not stack:
                result.fail(f"Unexpected '{ch}' at line {lines.line_at(i)}")
            elif stack[-1][0] != _CLOSERS[ch]:
                opener, at = stack.pop()
                result.fail(
                    f"Mismatched '{ch}' at line {lines.line_at(i)} "
                    f"(expected '{_OPENERS[opener]}' for '{opener}' at line {lines.line_at(at)})"
                )
            else:
                stack.pop()
        i += 1

    for opener, at in stack:
        result.fail(f"Unclosed '{opener}' at line {lines.line_at(at)}")
    return result


# Tags that open a block closed by ``end<tag>``
BLOCK_TAGS = frozenset(
    {
        "if",
        "unless",
        "for",
        "case",
        "capture",
        "form",
        "paginate",
        "tablerow",
        "comment",
        "raw",
        "schema",
        "style",
        "stylesheet",
        "javascript",
    }
)
# Block contents are not parsed as template code
_OPAQUE_BLOCKS = frozenset({"comment", "raw", "schema", "javascript", "stylesheet"})

_TAG = re.compile(r"\{%-?\s*(\w+)?(?:(?!\{%).)*?-?%\}", re.DOTALL)
_OUTPUT_OPEN = "{{"
_OUTPUT_CLOSE = "}}"


def _check_output_delimiters(content: str, lines: LineIndex, result: ValidationResult) -> None:
    """Every ``{{`` needs a ``}}`` before the next ``{{``.

    Stray ``}}`` are not flagged: nested CSS rules produce them legitimately.
    """
    i = 0
    while (start := content.find(_OUTPUT_OPEN, i)) != -1:
        end = content.find(_OUTPUT_CLOSE, start + 2)
        nested = content.find(_OUTPUT_OPEN, start + 2)
        if end == -1 or (nested != -1 and nested < end):
            result.fail(f"Unmatched Liquid output delimiter '{{{{' at line {lines.line_at(start)}")
            if end == -1:
                return
            i = nested
            continue
        i = end + 2


def _blank_opaque(content: str, spans: list[tuple[int, int]]) -> str:
    """Replace opaque block bodies with spaces so offsets stay valid."""
    chars = list(content)
    for start, end in spans:
        for k in range(start, end):
            if chars[k] != "\n":
                chars[k] = " "
    return "".join(chars)


def validate_template(content: str) -> ValidationResult:
    """``{% %}`` tags closed and block tags paired; ``{{ }}`` balanced."""
    result = ValidationResult()
    lines = LineIndex(content)
    stack: list[tuple[str, int]] = []
    opaque_spans: list[tuple[int, int]] = []

    pos = 0
    while True:
        open_at = content.find("{%", pos)
        if open_at == -1:
            break
        m = _TAG.match(content, open_at)
        if m is None:
            result.fail(f"Unclosed Liquid tag at line {lines.line_at(open_at)}")
            break
        pos = m.end()
        name = (m.group(1) or "").lower()

        if name in BLOCK_TAGS:
            stack.append((name, open_at))
            if name in _OPAQUE_BLOCKS:
                closer = re.compile(r"\{%-?\s*end" + name + r"\s*-?%\}")
                end = closer.search(content, pos)
                if end is None:
                    continue
                opaque_spans.append((pos, end.start()))
                pos = end.start()
        elif name.startswith("end") and name[3:] in BLOCK_TAGS:
            opened = name[3:]
            if not stack:
                result.fail(f"Unexpected {{% {name} %}} at line {lines.line_at(open_at)}")
            elif stack[-1][0] != opened:
                expected, at = stack.pop()
                result.fail(
                    f"Mismatched Liquid tags: {{% {expected} %}} opened at line "
                    f"{lines.line_at(at)} closed by {{% {name} %}} at line {lines.line_at(open_at)}"
                )
            else:
                stack.pop()

    for name, at in stack:
        result.fail(f"Unclosed Liquid tag {{% {name} %}} opened at line {lines.line_at(at)}")

    _check_output_delimiters(_blank_opaque(content, opaque_spans), lines, result)
    return result


def validate_settings(content: str) -> ValidationResult:
    result = ValidationResult()
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        result.fail(f"Invalid JSON at line {e.lineno}: {e.msg}")
    return result


def validate_by_file_type(path: str, content: str) -> ValidationResult:
    """Pick the validator by extension; unknown types always pass."""
    suffix = PurePosixPath(path).suffix.lower()
    if suffix in (".css", ".scss", ".less"):
        return validate_stylesheet(content, line_comments=suffix != ".css")
    if suffix == ".liquid":
        return validate_template(content)
    if suffix == ".json":
        return validate_settings(content)
    return ValidationResult()
