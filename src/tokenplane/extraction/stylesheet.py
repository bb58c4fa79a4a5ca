"""Stylesheet (CSS/SCSS/Less) value extraction."""

from __future__ import annotations

from tokenplane.extraction import patterns as p
from tokenplane.extraction.base import TokenCollector
from tokenplane.tokens.models import TokenCategory


def extract_stylesheet(collector: TokenCollector, text: str | None = None, base: int = 0) -> None:
    """Collect tokens from stylesheet ``text`` located at offset ``base``.

    With no ``text`` the collector's whole file is scanned. Templates call
    this for ``<style>`` blocks and inline ``style`` attributes.
    """
    if text is None:
        text = collector.content

    # Custom property declarations carry a name
    for m in p.CSS_VAR_DECLARATION.finditer(text):
        collector.mark_declaration(base + m.start(), base + m.end())
        name = m.group(2)
        value = p.clean(m.group(3))
        collector.add(
            value,
            p.infer_category(name, value),
            base + m.start(),
            name=name,
            selector=m.group(1),
        )

    # Bare color literals, except inside declarations already captured above
    for regex in (p.HEX_COLOR, p.FUNC_COLOR):
        for m in regex.finditer(text):
            offset = base + m.start()
            if collector.in_declaration(offset):
                continue
            collector.add(m.group(0), TokenCategory.COLOR, offset)

    for m in p.VAR_COLOR_REFERENCE.finditer(text):
        collector.add(m.group(0), TokenCategory.COLOR, base + m.start())

    for rule in p.STYLESHEET_RULES:
        for value, start in rule.matches(text):
            offset = base + start
            parts = p.split_top_level(value) if rule.split_values else [value]
            for part in parts:
                collector.add(part, rule.category, offset, selector=rule.name)
