"""Page and cross-page aggregation of validated logbook rows."""

from .cumulative import calculate_cumulative_totals, calculate_professional_credit
from .page import PAGE_TYPE_INFO, PageAggregator, sum_valid_minutes

__all__ = [
    "PAGE_TYPE_INFO",
    "PageAggregator",
    "calculate_cumulative_totals",
    "calculate_professional_credit",
    "sum_valid_minutes",
]
