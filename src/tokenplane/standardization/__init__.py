"""Theme standardization audit."""

from tokenplane.standardization.models import (
    AdoptAction,
    AuditStats,
    ConformAction,
    RemoveAction,
    StandardizationAudit,
    TargetToken,
    UnifyAction,
    ValueLocation,
)
from tokenplane.standardization.ops import standardize_theme

__all__ = [
    "AdoptAction",
    "AuditStats",
    "ConformAction",
    "RemoveAction",
    "StandardizationAudit",
    "TargetToken",
    "UnifyAction",
    "ValueLocation",
    "standardize_theme",
]
