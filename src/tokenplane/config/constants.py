"""Configuration constants.

Fixed algorithm thresholds that should NOT be user-configurable: tuning them
changes which values count as "the same design decision", and stored
confidences would stop being comparable across runs.

For configurable values, see models.py.
"""

# =============================================================================
# Similarity grouping
# =============================================================================

COLOR_CLUSTER_DELTA_E = 20.0
"""CIEDE2000 distance below which a color joins an existing cluster."""

SPACING_CLUSTER_PX = 2.0
"""Pixel distance from a spacing cluster's running average to join it."""

ROOT_FONT_SIZE_PX = 16.0
"""Conversion factor for rem/em values."""

# =============================================================================
# Inconsistency detection
# =============================================================================

NEAR_DUPLICATE_COLOR_DELTA_E = 6.0
"""CIEDE2000 distance below which two distinct colors are flagged as near-duplicates."""

# =============================================================================
# Scale detection
# =============================================================================

SPACING_SCALE_RATIOS = (2.0, 1.5, 1.25, 1.618, 3.0, 4.0)
"""Candidate ratios for spacing scales, in preference order."""

SPACING_SCALE_TOLERANCE = 0.15
"""Relative tolerance when matching a spacing ratio."""

TYPE_SCALE_RATIOS = (1.2, 1.25, 1.333, 1.414, 1.5, 1.618, 2.0)
"""Named typographic scales (minor third .. octave)."""

TYPE_SCALE_TOLERANCE = 0.12
"""Relative tolerance when matching a typographic ratio."""

SCALE_MIN_VALUES = 3
"""Minimum distinct values before a scale is considered."""

SCALE_MIN_MATCH_FRACTION = 0.6
"""Fraction of consecutive ratios that must match a candidate ratio."""

# =============================================================================
# Drift detection and suggestions
# =============================================================================

DRIFT_COLOR_NEAR_DISTANCE = 30.0
"""RGB Euclidean distance within which a color is a near match."""

DRIFT_NUMERIC_NEAR_RATIO = 0.15
"""Relative numeric difference within which a value is a near match."""

SUGGESTION_MIN_CONFIDENCE = 0.3
"""Suggestions below this confidence are dropped."""

COLOR_CONFIDENCE_BANDS = ((0.0, 1.0), (10.0, 0.9), (30.0, 0.7), (60.0, 0.4))
"""(max RGB distance, confidence) pairs, checked in order."""

NUMERIC_CONFIDENCE_BANDS = ((0.05, 0.85), (0.15, 0.6), (0.3, 0.35))
"""(max relative difference, confidence) pairs, checked in order."""

# =============================================================================
# Token application
# =============================================================================

RISK_LOW_MAX_INSTANCES = 2
"""Per-file instance count at or below which risk is low."""

RISK_MEDIUM_MAX_INSTANCES = 10
"""Per-file instance count at or below which risk is medium."""

# =============================================================================
# Standardization audit
# =============================================================================

AUDIT_COLOR_NEAR_DELTA_E = 6.0
"""CIEDE2000 distance treated as a near match to an existing token."""

AUDIT_COLOR_FAR_DELTA_E = 20.0
"""CIEDE2000 distance beyond which a color does not conform to any token."""

AUDIT_COLOR_UNIFY_DELTA_E = 3.0
"""CIEDE2000 distance below which untokenized colors should be unified."""

AUDIT_NUMERIC_NEAR_RATIO = 0.15
"""Relative difference treated as a near numeric match to an existing token."""
