"""Tests for cross-page aggregation and professional credit."""

import pytest

from logbook_eligibility.aggregation.cumulative import (
    calculate_cumulative_totals,
    calculate_professional_credit,
)
from logbook_eligibility.aggregation.page import PageAggregator
from logbook_eligibility.models.schema import FieldIssue, PageType, ValidatedRow


def validated(minutes, errors=(), warnings=()):
    return ValidatedRow(
        row_number=1,
        duration_minutes=minutes,
        errors=list(errors),
        warnings=list(warnings),
    )


def page(page_type, *rows):
    return PageAggregator().aggregate(page_type, list(rows))


class TestProfessionalCredit:
    """Test suite for calculate_professional_credit."""

    def test_credit_above_cap(self):
        """Test 12 actual hours: 10 at 3-for-1, 2 at 1-for-1."""
        credit = calculate_professional_credit(12)

        assert credit.first_tier_credit == 30
        assert credit.excess_credit == 2
        assert credit.total_credit == 32

    def test_credit_below_cap(self):
        """Test hours under the cap are all tripled."""
        credit = calculate_professional_credit(4)

        assert credit.first_tier_credit == 12
        assert credit.excess_credit == 0
        assert credit.total_credit == 12

    def test_credit_at_cap(self):
        """Test exactly 10 hours."""
        assert calculate_professional_credit(10).total_credit == 30


class TestCumulativeTotals:
    """Test suite for calculate_cumulative_totals."""

    @pytest.fixture
    def pages(self):
        """Day (2h), night (1h) and professional driving + stamp pages (12h)."""
        warning = FieldIssue(field='signature', message='Signature appears to be missing')
        error = FieldIssue(field='date', message='Date is unclear or illegible')
        return [
            page(PageType.DAY_SUPERVISED, validated(60), validated(60), validated(45, errors=[error])),
            page(PageType.NIGHT_SUPERVISED, validated(60, warnings=[warning])),
            page(PageType.PROFESSIONAL_DRIVING, validated(600)),
            page(PageType.PROFESSIONAL_STAMP, validated(120)),
        ]

    def test_bucketing(self, pages):
        """Test minutes land in their category buckets, valid rows only."""
        totals = calculate_cumulative_totals(pages)

        assert totals.day_minutes == 120
        assert totals.night_minutes == 60
        assert totals.professional_minutes == 720
        assert totals.supervised.day_hours == 2
        assert totals.supervised.night_hours == 1
        assert totals.supervised.total_hours == 3

    def test_grand_totals(self, pages):
        """Test actual and credited grand totals."""
        totals = calculate_cumulative_totals(pages)

        assert totals.professional.actual_hours == 12
        assert totals.professional.total_credit == 32
        assert totals.grand_total_actual_hours == 15
        assert totals.grand_total_credited_hours == 35

    def test_validation_summary(self, pages):
        """Test entry and issue counts are summed across pages."""
        totals = calculate_cumulative_totals(pages)

        assert totals.validation.total_entries == 6
        assert totals.validation.error_count == 1
        assert totals.validation.warning_count == 1

    def test_no_pages(self):
        """Test an empty page set totals to zero."""
        totals = calculate_cumulative_totals([])

        assert totals.grand_total_actual_hours == 0
        assert totals.grand_total_credited_hours == 0
        assert totals.validation.total_entries == 0
