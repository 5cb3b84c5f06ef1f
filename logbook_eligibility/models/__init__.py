"""Data models for logbook scanning and licence eligibility."""

from .schema import (
    Confidence,
    CumulativeTotals,
    EligibilityOutcome,
    EligibilityStatus,
    ExtractionPayload,
    FieldIssue,
    LogbookRow,
    PageScanResult,
    PageTotals,
    PageType,
    PageTypeInfo,
    Pathway,
    ProfessionalCredit,
    StudentEligibilityRecord,
    SubtotalCheck,
    SupervisedTotals,
    ValidatedRow,
    ValidationRules,
    ValidationSummary,
)

__all__ = [
    "Confidence",
    "CumulativeTotals",
    "EligibilityOutcome",
    "EligibilityStatus",
    "ExtractionPayload",
    "FieldIssue",
    "LogbookRow",
    "PageScanResult",
    "PageTotals",
    "PageType",
    "PageTypeInfo",
    "Pathway",
    "ProfessionalCredit",
    "StudentEligibilityRecord",
    "SubtotalCheck",
    "SupervisedTotals",
    "ValidatedRow",
    "ValidationRules",
    "ValidationSummary",
]
