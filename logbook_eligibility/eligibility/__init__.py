"""Licence upgrade eligibility rules."""

from .engine import (
    PATHWAY_THRESHOLDS,
    STATUS_RULES,
    EligibilityEngine,
    EligibilityFacts,
    apply_scanned_totals,
    calculate_credited_hours,
    derive_status,
)

__all__ = [
    "PATHWAY_THRESHOLDS",
    "STATUS_RULES",
    "EligibilityEngine",
    "EligibilityFacts",
    "apply_scanned_totals",
    "calculate_credited_hours",
    "derive_status",
]
