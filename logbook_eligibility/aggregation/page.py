"""Page-level aggregation of validated logbook rows.

Totals only count valid rows; invalid rows stay in the result for review.
The page's own handwritten subtotal is cross-checked but never trusted
over the computed sum.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..models.schema import (
    FieldIssue,
    PageScanResult,
    PageTotals,
    PageType,
    PageTypeInfo,
    SubtotalCheck,
    ValidatedRow,
    ValidationRules,
)
from ..parsing.parser import format_duration, parse_duration, token_state, TokenState

logger = logging.getLogger(__name__)

_SUPERVISED_COLUMNS = [
    'DATE', 'WEATHER CONDITIONS', 'SD NAME', 'SD LICENCE', 'SD SIGNATURE',
    'START TIME', 'FINISH TIME', 'ODOMETER START', 'ODOMETER FINISH', 'TOTAL TIME',
]

PAGE_TYPE_INFO: Dict[PageType, PageTypeInfo] = {
    PageType.DAY_SUPERVISED: PageTypeInfo(
        name='Supervised Day',
        header_color='blue/navy',
        credit_multiplier=1,
        columns=_SUPERVISED_COLUMNS,
    ),
    PageType.NIGHT_SUPERVISED: PageTypeInfo(
        name='Supervised Night',
        header_color='red',
        credit_multiplier=1,
        columns=_SUPERVISED_COLUMNS,
    ),
    PageType.PROFESSIONAL_DRIVING: PageTypeInfo(
        name='ADI Professional',
        header_color='green',
        credit_multiplier=3,  # First 10 hours only
        columns=[
            'DATE', 'WEATHER CONDITIONS', 'ADI NUMBER', 'ADI SIGNATURE',
            'START TIME', 'FINISH TIME', 'ODOMETER START', 'ODOMETER FINISH', 'TOTAL TIME',
        ],
    ),
    PageType.PROFESSIONAL_STAMP: PageTypeInfo(
        name='ADI Stamp Page',
        header_color='grey/white',
        credit_multiplier=3,
        columns=['DATE', 'ADI', 'HOURS SPENT DRIVING', 'STAMP'],
    ),
}


def sum_valid_minutes(rows: Sequence[ValidatedRow]) -> int:
    """Sum duration over valid rows; invalid rows contribute nothing."""
    return sum(row.duration_minutes or 0 for row in rows if row.is_valid)


class PageAggregator:
    """
    Builds a PageScanResult from a page's validated rows.

    Handles:
    - Totals over valid rows
    - Declared subtotal reconciliation (advisory warning only)
    - Daily driving limit across rows sharing a date
    """

    def __init__(self, rules: Optional[ValidationRules] = None):
        """
        Initialize the page aggregator.

        Args:
            rules: Thresholds for subtotal tolerance and daily limit
        """
        self.rules = rules or ValidationRules()
        self.logger = logging.getLogger(self.__class__.__name__)

    def aggregate(
        self,
        page_type: PageType,
        rows: Sequence[ValidatedRow],
        page_number: Optional[int] = None,
        declared_subtotal: Optional[str] = None,
        page_notes: Optional[str] = None,
    ) -> PageScanResult:
        """
        Aggregate one page.

        Args:
            page_type: Page category
            rows: Validated rows in page order
            page_number: Page number printed on the page, if any
            declared_subtotal: Handwritten page subtotal text, if any
            page_notes: Free-text notes from extraction

        Returns:
            PageScanResult with totals and collected issues
        """
        rows = list(rows)
        total_minutes = sum_valid_minutes(rows)
        totals = PageTotals(
            entries=len(rows),
            valid_entries=sum(1 for row in rows if row.is_valid),
            total_minutes=total_minutes,
            formatted_total=format_duration(total_minutes),
        )

        errors: List[FieldIssue] = [e for row in rows for e in row.errors]
        warnings: List[FieldIssue] = [w for row in rows for w in row.warnings]

        subtotal_check, subtotal_minutes = self._reconcile_subtotal(
            declared_subtotal, totals, warnings
        )
        self._check_daily_limit(rows, warnings)

        result = PageScanResult(
            page_type=page_type,
            page_type_info=PAGE_TYPE_INFO[page_type],
            page_number=page_number,
            entries=rows,
            totals=totals,
            errors=errors,
            warnings=warnings,
            declared_subtotal=declared_subtotal,
            declared_subtotal_minutes=subtotal_minutes,
            subtotal_check=subtotal_check,
            page_notes=page_notes,
            scanned_at=datetime.now(),
        )

        self.logger.info(
            f"Page {page_number} ({page_type.value}): {totals.valid_entries}/{totals.entries} "
            f"valid entries, total {totals.formatted_total}, "
            f"errors={len(errors)}, warnings={len(warnings)}"
        )
        return result

    def _reconcile_subtotal(self, declared, totals, warnings):
        if token_state(declared) is not TokenState.PRESENT:
            return SubtotalCheck.NOT_DECLARED, None

        declared_minutes = parse_duration(declared)
        if declared_minutes is None:
            self.logger.debug(f"Page subtotal not parseable: {declared!r}")
            return SubtotalCheck.UNPARSEABLE, None

        if abs(totals.total_minutes - declared_minutes) > self.rules.duration_tolerance_minutes:
            warnings.append(FieldIssue(
                field='subtotal',
                row='subtotal',
                message=(
                    f"Page subtotal ({declared}) doesn't match sum of entries "
                    f"({totals.formatted_total})"
                ),
                calculated=totals.total_minutes,
                recorded=declared_minutes,
            ))
            return SubtotalCheck.MISMATCHED, declared_minutes

        return SubtotalCheck.MATCHED, declared_minutes

    def _check_daily_limit(self, rows, warnings):
        minutes_by_date = defaultdict(int)
        for row in rows:
            if row.is_valid and row.parsed_date is not None:
                minutes_by_date[row.parsed_date] += row.duration_minutes or 0

        limit = self.rules.max_daily_hours * 60
        for day, minutes in sorted(minutes_by_date.items()):
            if minutes > limit:
                warnings.append(FieldIssue(
                    field='date',
                    row='daily',
                    message=(
                        f"{format_duration(minutes)} logged on {day.strftime('%d/%m/%Y')} "
                        f"exceeds the daily maximum of {self.rules.max_daily_hours:g} hours"
                    ),
                ))
