"""Component detection: files that belong to one theme component."""

from tokenplane.components.models import (
    ButtonTokenSet,
    DetectedComponent,
    IconMetadata,
    SemanticTokenSet,
)
from tokenplane.components.ops import detect_components

__all__ = [
    "ButtonTokenSet",
    "DetectedComponent",
    "IconMetadata",
    "SemanticTokenSet",
    "detect_components",
]
