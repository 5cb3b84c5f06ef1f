"""Cross-page aggregation of scanned logbook pages.

Buckets valid minutes by page category and applies the tiered
professional-instructor credit (3-for-1 on the first 10 actual hours,
1-for-1 thereafter).
"""

import logging
from typing import Iterable

from ..config import Config
from ..models.schema import (
    CumulativeTotals,
    PageScanResult,
    PageType,
    ProfessionalCredit,
    SupervisedTotals,
    ValidationSummary,
)
from .page import sum_valid_minutes

logger = logging.getLogger(__name__)


def calculate_professional_credit(actual_hours: float) -> ProfessionalCredit:
    """
    Apply the tiered professional-instructor credit rule.

    Args:
        actual_hours: Hours actually driven with a professional instructor

    Returns:
        ProfessionalCredit with first-tier, excess and total credit
    """
    cap = Config.PROFESSIONAL_CREDIT_CAP_HOURS
    first_tier = min(actual_hours, cap) * Config.PROFESSIONAL_CREDIT_MULTIPLIER
    excess = max(0, actual_hours - cap) * 1

    return ProfessionalCredit(
        actual_hours=actual_hours,
        first_tier_credit=first_tier,
        excess_credit=excess,
        total_credit=first_tier + excess,
    )


def calculate_cumulative_totals(pages: Iterable[PageScanResult]) -> CumulativeTotals:
    """
    Combine page results into category and grand totals.

    Issue counts are summed across pages, not deduplicated.
    """
    day_minutes = night_minutes = professional_minutes = 0
    total_entries = error_count = warning_count = 0
    page_count = 0

    for page in pages:
        page_count += 1
        minutes = sum_valid_minutes(page.entries)

        if page.page_type is PageType.DAY_SUPERVISED:
            day_minutes += minutes
        elif page.page_type is PageType.NIGHT_SUPERVISED:
            night_minutes += minutes
        elif page.page_type.is_professional:
            professional_minutes += minutes

        total_entries += len(page.entries)
        error_count += len(page.errors)
        warning_count += len(page.warnings)

    day_hours = day_minutes / 60
    night_hours = night_minutes / 60
    credit = calculate_professional_credit(professional_minutes / 60)

    totals = CumulativeTotals(
        day_minutes=day_minutes,
        night_minutes=night_minutes,
        professional_minutes=professional_minutes,
        supervised=SupervisedTotals(
            day_hours=day_hours,
            night_hours=night_hours,
            total_hours=day_hours + night_hours,
        ),
        professional=credit,
        grand_total_actual_hours=(day_minutes + night_minutes + professional_minutes) / 60,
        grand_total_credited_hours=day_hours + night_hours + credit.total_credit,
        validation=ValidationSummary(
            total_entries=total_entries,
            error_count=error_count,
            warning_count=warning_count,
        ),
    )

    logger.info(
        f"Cumulative totals over {page_count} page(s): "
        f"actual={totals.grand_total_actual_hours:.2f}h, "
        f"credited={totals.grand_total_credited_hours:.2f}h, "
        f"errors={error_count}, warnings={warning_count}"
    )
    return totals
