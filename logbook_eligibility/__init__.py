"""Learner logbook scanning and licence eligibility."""

from .aggregation import PageAggregator, calculate_cumulative_totals, calculate_professional_credit
from .eligibility import EligibilityEngine, apply_scanned_totals
from .exceptions import ExtractionError
from .scanner import LogbookScanner, ScanProgress
from .validation import RowValidator

__version__ = "1.0.0"

__all__ = [
    "EligibilityEngine",
    "ExtractionError",
    "LogbookScanner",
    "PageAggregator",
    "RowValidator",
    "ScanProgress",
    "apply_scanned_totals",
    "calculate_cumulative_totals",
    "calculate_professional_credit",
]
