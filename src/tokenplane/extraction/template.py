"""Liquid-style template value extraction."""

from __future__ import annotations

import json

from tokenplane.core.logging import get_logger
from tokenplane.core.telemetry import record_suppressed_failure
from tokenplane.extraction import patterns as p
from tokenplane.extraction.base import TokenCollector
from tokenplane.extraction.settings import extract_settings_data
from tokenplane.extraction.stylesheet import extract_stylesheet
from tokenplane.tokens.models import TokenCategory

logger = get_logger("extraction.template")


def extract_template(collector: TokenCollector) -> None:
    content = collector.content

    for m in p.TEMPLATE_SETTINGS_REFERENCE.finditer(content):
        setting_id = m.group(1)
        collector.add(
            f"{{{{ settings.{setting_id} }}}}",
            p.infer_setting_category(setting_id),
            m.start(),
        )

    for m in p.TEMPLATE_ASSIGN.finditer(content):
        if p.is_color_value(m.group(2)):
            collector.add(m.group(2), TokenCategory.COLOR, m.start(), name=m.group(1))

    for m in p.TEMPLATE_INLINE_STYLE.finditer(content):
        extract_stylesheet(collector, m.group(2), base=m.start(2))

    for m in p.TEMPLATE_STYLE_BLOCK.finditer(content):
        extract_stylesheet(collector, m.group(1), base=m.start(1))

    for m in p.TEMPLATE_SCHEMA_BLOCK.finditer(content):
        block = m.group(1)
        try:
            schema = json.loads(block)
        except json.JSONDecodeError as e:
            # One bad schema block must not hide the rest of the template
            logger.warning(
                "schema_block_unparseable",
                file_path=collector.file_path,
                line=collector.lines.line_at(m.start()),
                error=str(e),
            )
            record_suppressed_failure("extraction", format="template")
            continue
        extract_settings_data(collector, schema, block, base=m.start(1))
