"""Design token domain types."""

from tokenplane.tokens.models import (
    ExtractedToken,
    InferredToken,
    ReferenceAnnotation,
    ScalePattern,
    SourceAnnotation,
    TokenCategory,
    TokenGroup,
    TokenMetadata,
    TokenTier,
)

__all__ = [
    "ExtractedToken",
    "InferredToken",
    "ReferenceAnnotation",
    "ScalePattern",
    "SourceAnnotation",
    "TokenCategory",
    "TokenGroup",
    "TokenMetadata",
    "TokenTier",
]
