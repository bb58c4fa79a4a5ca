"""Dominant palette extraction and lightness ramps.

The dominant palette is a frequency ranking of RGB clusters across
stylesheets, settings data and template schema blocks, with neutral
colors (greys, near-black, near-white) only used when nothing else exists.
"""

from __future__ import annotations

import colorsys
import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from tokenplane.core.logging import get_logger
from tokenplane.extraction import patterns as p
from tokenplane.extraction.ops import SourceFile, detect_format
from tokenplane.inference.color import RGB, brightness, parse_color, rgb_distance, rgb_to_oklch, to_hex
from tokenplane.tokens.models import RampAnnotation, TokenMetadata

logger = get_logger("inference.chromatic")

PaletteSource = Literal["css", "settings", "schema", "mixed"]

CLUSTER_DISTANCE = 35.0
DEFAULT_PALETTE: tuple[RGB, RGB, RGB] = ((66, 99, 235), (99, 102, 241), (168, 85, 247))
RAMP_LIGHTNESS_RANGE = (0.95, 0.15)


@dataclass(frozen=True)
class ChromaticColor:
    rgb: RGB
    frequency: int

    @property
    def hex(self) -> str:
        return to_hex(self.rgb)

    @property
    def hsl(self) -> tuple[int, int, int]:
        """(hue degrees, saturation %, lightness %)."""
        h, lightness, s = colorsys.rgb_to_hls(*(c / 255 for c in self.rgb))
        return round(h * 360), round(s * 100), round(lightness * 100)


@dataclass(frozen=True)
class ChromaticPalette:
    primary: ChromaticColor
    secondary: ChromaticColor
    accent: ChromaticColor
    source: PaletteSource


@dataclass
class _Cluster:
    center: RGB
    count: int = 1
    sources: set[str] = field(default_factory=set)

    def absorb(self, rgb: RGB, source: str) -> None:
        total = self.count + 1
        self.center = (
            round((self.center[0] * self.count + rgb[0]) / total),
            round((self.center[1] * self.count + rgb[1]) / total),
            round((self.center[2] * self.count + rgb[2]) / total),
        )
        self.count = total
        self.sources.add(source)


def is_neutral(rgb: RGB) -> bool:
    luminance = brightness(rgb) / 255
    return max(rgb) - min(rgb) < 20 or luminance < 0.05 or luminance > 0.95


def _stylesheet_colors(content: str) -> Iterator[RGB]:
    for regex in (p.HEX_COLOR, p.FUNC_COLOR):
        for m in regex.finditer(content):
            rgb = parse_color(m.group(0))
            if rgb is not None:
                yield rgb


def _json_colors(node: Any) -> Iterator[RGB]:
    if isinstance(node, str):
        if p.COLOR_VALUE.match(node.strip()):
            rgb = parse_color(node)
            if rgb is not None:
                yield rgb
    elif isinstance(node, list):
        for item in node:
            yield from _json_colors(item)
    elif isinstance(node, dict):
        for value in node.values():
            yield from _json_colors(value)


def _file_colors(file: SourceFile) -> Iterator[tuple[RGB, str]]:
    source_format = detect_format(file.path)
    if source_format == "stylesheet":
        for rgb in _stylesheet_colors(file.content):
            yield rgb, "css"
    elif source_format == "settings":
        try:
            data = json.loads(file.content)
        except json.JSONDecodeError:
            logger.debug("palette_settings_unparseable", file_path=file.path)
            return
        for rgb in _json_colors(data):
            yield rgb, "settings"
    elif source_format == "template":
        stripped = file.content
        for m in p.TEMPLATE_SCHEMA_BLOCK.finditer(file.content):
            stripped = stripped.replace(m.group(0), "")
            try:
                data = json.loads(m.group(1))
            except json.JSONDecodeError:
                logger.debug("palette_schema_unparseable", file_path=file.path)
                continue
            for rgb in _json_colors(data):
                yield rgb, "schema"
        for rgb in _stylesheet_colors(stripped):
            yield rgb, "css"


def _cluster(colors: Sequence[tuple[RGB, str]]) -> list[_Cluster]:
    clusters: list[_Cluster] = []
    for rgb, source in colors:
        for cluster in clusters:
            if rgb_distance(rgb, cluster.center) < CLUSTER_DISTANCE:
                cluster.absorb(rgb, source)
                break
        else:
            clusters.append(_Cluster(center=rgb, sources={source}))
    return sorted(clusters, key=lambda c: c.count, reverse=True)


def _resolve_source(clusters: Sequence[_Cluster]) -> PaletteSource:
    sources = set().union(*(c.sources for c in clusters))
    if len(sources) > 1:
        return "mixed"
    if "settings" in sources:
        return "settings"
    if "schema" in sources:
        return "schema"
    return "css"


def default_palette() -> ChromaticPalette:
    primary, secondary, accent = DEFAULT_PALETTE
    return ChromaticPalette(
        primary=ChromaticColor(primary, 0),
        secondary=ChromaticColor(secondary, 0),
        accent=ChromaticColor(accent, 0),
        source="css",
    )


def extract_dominant_colors(files: Sequence[SourceFile]) -> ChromaticPalette:
    """Three most frequent color clusters across ``files``.

    Missing secondary falls back to the primary darkened by 20%, missing
    accent to the primary's complementary hue. No colors at all yields the
    default palette.
    """
    raw = [pair for f in files for pair in _file_colors(f)]
    if not raw:
        return default_palette()

    chromatic = [pair for pair in raw if not is_neutral(pair[0])]
    clusters = _cluster(chromatic or raw)

    primary = ChromaticColor(clusters[0].center, clusters[0].count)
    if len(clusters) >= 2:
        secondary = ChromaticColor(clusters[1].center, clusters[1].count)
    else:
        secondary = ChromaticColor(
            (round(primary.rgb[0] * 0.8), round(primary.rgb[1] * 0.8), round(primary.rgb[2] * 0.8)), 0
        )
    if len(clusters) >= 3:
        accent = ChromaticColor(clusters[2].center, clusters[2].count)
    else:
        h, lightness, s = colorsys.rgb_to_hls(*(c / 255 for c in primary.rgb))
        r, g, b = colorsys.hls_to_rgb((h + 0.5) % 1.0, lightness, s)
        accent = ChromaticColor((round(r * 255), round(g * 255), round(b * 255)), 0)

    return ChromaticPalette(primary, secondary, accent, _resolve_source(clusters[:3]))


def chromatic_vars(
    palette: ChromaticPalette, intensity: float = 1.0, *, prefix: str = "palette"
) -> dict[str, str]:
    """CSS custom properties for ``palette``: an ``oklch()`` and an ``hsl()`` per role.

    ``intensity`` (clamped to 0..1) scales the oklch chroma, so lower values
    give a subtler tint; the hsl variants are unscaled.
    """
    scale = max(0.0, min(1.0, intensity))
    result: dict[str, str] = {}
    roles = (("primary", palette.primary), ("secondary", palette.secondary), ("accent", palette.accent))
    for role, color in roles:
        lightness, chroma, hue = rgb_to_oklch(color.rgb)
        result[f"--{prefix}-{role}"] = f"oklch({lightness:g} {round(chroma * scale, 4):g} {hue:g})"
    for role, color in roles:
        h, s, l_ = color.hsl
        result[f"--{prefix}-{role}-hsl"] = f"hsl({h}, {s}%, {l_}%)"
    return result


@dataclass(frozen=True)
class RampStep:
    """One generated ramp color, ready to become a registry token."""

    name: str
    value: str
    metadata: TokenMetadata


def generate_ramp(base: str, steps: int = 9, *, prefix: str = "color") -> list[RampStep]:
    """Lightness ramp around ``base``, keeping its hue and saturation.

    Steps run light to dark and are named ``<prefix>-100`` .. ``<prefix>-900``
    for the default nine steps.

    Raises:
        ValueError: ``base`` is not a parseable color or ``steps`` < 2.
    """
    rgb = parse_color(base)
    if rgb is None:
        raise ValueError(f"Not a color: {base!r}")
    if steps < 2:
        raise ValueError(f"A ramp needs at least 2 steps, got {steps}")

    hue, _, saturation = colorsys.rgb_to_hls(*(c / 255 for c in rgb))
    lightest, darkest = RAMP_LIGHTNESS_RANGE
    base_hex = to_hex(rgb)
    ramp: list[RampStep] = []
    for i in range(steps):
        lightness = round(lightest - (lightest - darkest) * i / (steps - 1), 4)
        r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
        step = (i + 1) * 100
        ramp.append(
            RampStep(
                name=f"{prefix}-{step}",
                value=to_hex((round(r * 255), round(g * 255), round(b * 255))),
                metadata=TokenMetadata(
                    annotations=(RampAnnotation(base=base_hex, step=step, lightness=lightness),)
                ),
            )
        )
    return ramp
