"""Inference: grouping, scale detection, naming and tiering of extracted tokens."""

from tokenplane.inference.chromatic import (
    ChromaticPalette,
    RampStep,
    chromatic_vars,
    extract_dominant_colors,
    generate_ramp,
)
from tokenplane.inference.grouping import group_similar_values
from tokenplane.inference.naming import NameSuggestion, suggest_token_name
from tokenplane.inference.ops import detect_inconsistencies, infer_tier, infer_tokens
from tokenplane.inference.scale import detect_scale_pattern, detect_typographic_scale

__all__ = [
    "ChromaticPalette",
    "NameSuggestion",
    "RampStep",
    "chromatic_vars",
    "detect_inconsistencies",
    "detect_scale_pattern",
    "detect_typographic_scale",
    "extract_dominant_colors",
    "generate_ramp",
    "group_similar_values",
    "infer_tier",
    "infer_tokens",
    "suggest_token_name",
]
