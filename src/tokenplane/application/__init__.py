"""Token application: impact analysis, validated atomic apply, rollback."""

from tokenplane.application.models import (
    DeploymentResult,
    FileImpact,
    ImpactAnalysis,
    TokenChange,
)
from tokenplane.application.ops import (
    TokenApplicator,
    apply_change,
    assess_risk,
    build_search_pattern,
)
from tokenplane.application.validation import (
    ValidationResult,
    validate_by_file_type,
    validate_settings,
    validate_stylesheet,
    validate_template,
)

__all__ = [
    "DeploymentResult",
    "FileImpact",
    "ImpactAnalysis",
    "TokenApplicator",
    "TokenChange",
    "ValidationResult",
    "apply_change",
    "assess_risk",
    "build_search_pattern",
    "validate_by_file_type",
    "validate_settings",
    "validate_stylesheet",
    "validate_template",
]
