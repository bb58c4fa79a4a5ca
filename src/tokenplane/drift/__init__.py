"""Drift detection and tokenization suggestions."""

from tokenplane.drift.detector import DriftDetector
from tokenplane.drift.models import (
    DriftItem,
    DriftResult,
    StoredToken,
    TokenizationSuggestion,
    TokenSummary,
)
from tokenplane.drift.suggestions import build_replacement, generate_suggestions

__all__ = [
    "DriftDetector",
    "DriftItem",
    "DriftResult",
    "StoredToken",
    "TokenSummary",
    "TokenizationSuggestion",
    "build_replacement",
    "generate_suggestions",
]
