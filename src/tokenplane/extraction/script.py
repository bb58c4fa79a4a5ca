"""Script (JS/TS) style-object value extraction."""

from __future__ import annotations

from tokenplane.extraction import patterns as p
from tokenplane.extraction.base import TokenCollector
from tokenplane.tokens.models import TokenCategory


def extract_script(collector: TokenCollector) -> None:
    content = collector.content

    for value, offset in p.SCRIPT_COLOR_RULE.matches(content):
        collector.add(value, TokenCategory.COLOR, offset, selector=p.SCRIPT_COLOR_RULE.name)

    # String literals that look like colors, unless the style-prop pass already took them
    for m in p.SCRIPT_STRING_COLOR.finditer(content):
        value = m.group(1)
        if not collector.seen(m.start(), value):
            collector.add(value, TokenCategory.COLOR, m.start())

    for rule in p.SCRIPT_RULES:
        for value, offset in rule.matches(content):
            collector.add(value, rule.category, offset, selector=rule.name)
