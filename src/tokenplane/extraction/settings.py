"""Structured-settings (JSON) value extraction.

Settings files describe theme options as objects shaped like
``{"type": "color", "id": "accent", "default": "#e94560"}`` at arbitrary
depth. Saved settings data additionally nests named color schemes:
``{"color_schemes": {"scheme-1": {"settings": {"background": "#fff"}}}}``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any

from tokenplane.core.errors import ExtractionError
from tokenplane.extraction.base import TokenCollector
from tokenplane.extraction.patterns import is_color_value
from tokenplane.tokens.models import SchemeAnnotation, TokenCategory

COLOR_SETTING_TYPES = frozenset({"color", "color_background"})
FONT_SETTING_TYPES = frozenset({"font_picker", "font"})


def collect_settings(node: Any) -> Iterator[dict[str, Any]]:
    """Yield every object exposing string ``type`` and ``id``, depth-first."""
    if isinstance(node, list):
        for item in node:
            yield from collect_settings(item)
    elif isinstance(node, dict):
        if isinstance(node.get("type"), str) and isinstance(node.get("id"), str):
            yield node
        for value in node.values():
            yield from collect_settings(value)


def collect_color_schemes(node: Any) -> Iterator[tuple[str, str, str]]:
    """Yield (scheme id, role, color) from every ``color_schemes`` block."""
    if isinstance(node, list):
        for item in node:
            yield from collect_color_schemes(item)
    elif isinstance(node, dict):
        for key, value in node.items():
            if key == "color_schemes" and isinstance(value, dict):
                for scheme_id, scheme in value.items():
                    roles = scheme.get("settings") if isinstance(scheme, dict) else None
                    if not isinstance(roles, dict):
                        continue
                    for role, color in roles.items():
                        if isinstance(color, str) and is_color_value(color):
                            yield scheme_id, role, color
            else:
                yield from collect_color_schemes(value)


def setting_token(setting: dict[str, Any]) -> tuple[TokenCategory, str] | None:
    """(category, value) for a descriptor whose type and default are compatible."""
    kind = setting["type"]
    default = setting.get("default")
    if kind in COLOR_SETTING_TYPES and isinstance(default, str) and default:
        return TokenCategory.COLOR, default
    if kind in FONT_SETTING_TYPES and isinstance(default, str) and default:
        return TokenCategory.TYPOGRAPHY, default
    if (
        kind == "range"
        and setting.get("unit") == "px"
        and isinstance(default, int | float)
        and not isinstance(default, bool)
    ):
        value = f"{default:g}px"
        setting_id = setting["id"].lower()
        if "radius" in setting_id:
            return TokenCategory.BORDER, value
        if "font" in setting_id or "size" in setting_id:
            return TokenCategory.TYPOGRAPHY, value
        return TokenCategory.SPACING, value
    return None


class _KeyLocator:
    """Finds successive offsets of `"key": "value"` pairs in raw JSON text."""

    def __init__(self, text: str, base: int) -> None:
        self._text = text
        self._base = base
        self._cursor: dict[tuple[str, str], int] = {}

    def find(self, key: str, value: str) -> int:
        pattern = re.compile(rf'"{re.escape(key)}"\s*:\s*"{re.escape(value)}"')
        start = self._cursor.get((key, value), 0)
        m = pattern.search(self._text, start)
        if m is None:
            return self._base
        self._cursor[(key, value)] = m.end()
        return self._base + m.start()


def extract_settings_data(
    collector: TokenCollector,
    data: Any,
    text: str,
    base: int = 0,
) -> None:
    """Collect tokens from already-parsed settings ``data`` whose source is ``text``."""
    locate = _KeyLocator(text, base)

    for setting in collect_settings(data):
        found = setting_token(setting)
        if found is None:
            continue
        category, value = found
        setting_id = setting["id"]
        collector.add(
            value,
            category,
            locate.find("id", setting_id),
            name=setting_id,
            setting_type=setting["type"],
            context=f"schema setting: {setting_id} ({setting['type']})",
        )

    for scheme_id, role, color in collect_color_schemes(data):
        collector.add(
            color,
            TokenCategory.COLOR,
            locate.find(role, color),
            name=f"{scheme_id}-{role}",
            context=f"color scheme {scheme_id}: {role}",
            annotations=(SchemeAnnotation(scheme=scheme_id, role=role),),
        )


def extract_settings(collector: TokenCollector) -> None:
    try:
        data = json.loads(collector.content)
    except json.JSONDecodeError as e:
        raise ExtractionError.bad_settings(collector.file_path, str(e)) from e
    extract_settings_data(collector, data, collector.content)
