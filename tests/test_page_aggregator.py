"""Tests for page-level aggregation."""

from datetime import date

import pytest

from logbook_eligibility.aggregation.page import PageAggregator
from logbook_eligibility.models.schema import (
    LogbookRow,
    PageType,
    SubtotalCheck,
    ValidationRules,
)
from logbook_eligibility.validation.validator import RowValidator

TODAY = date(2026, 3, 1)


def row(number, start, finish, total, day='01/02/2026'):
    return LogbookRow.model_validate({
        'rowNumber': number,
        'date': day,
        'startTime': start,
        'finishTime': finish,
        'totalTime': total,
        'hasSignature': True,
        'confidence': 'high',
    })


class TestPageAggregator:
    """Test suite for PageAggregator class."""

    @pytest.fixture
    def aggregator(self):
        """Fixture to provide PageAggregator instance."""
        return PageAggregator(ValidationRules())

    @pytest.fixture
    def rows(self):
        """Two valid rows (60 + 90 mins) and one invalid row (30 mins computed)."""
        validator = RowValidator()
        return validator.validate_rows([
            row(1, '09:00', '10:00', '1:00'),
            row(2, '14:00', '15:30', '1:30'),
            row(3, '16:00', '16:30', '2:00'),
        ], TODAY)

    def test_totals_count_valid_rows_only(self, aggregator, rows):
        """Test invalid rows are kept but excluded from totals."""
        result = aggregator.aggregate(PageType.DAY_SUPERVISED, rows, page_number=4)

        assert rows[2].is_valid is False
        assert rows[2].duration_minutes == 30
        assert result.totals.entries == 3
        assert result.totals.valid_entries == 2
        assert result.totals.total_minutes == 150
        assert result.totals.formatted_total == '2:30'
        assert result.totals.total_hours == 2.5
        assert len(result.entries) == 3
        assert result.page_number == 4

    def test_row_issues_collected(self, aggregator, rows):
        """Test row errors are gathered onto the page with their row numbers."""
        result = aggregator.aggregate(PageType.DAY_SUPERVISED, rows)

        assert result.has_errors is True
        assert [e.row for e in result.errors] == [3]

    def test_subtotal_matches(self, aggregator, rows):
        """Test a declared subtotal within tolerance."""
        result = aggregator.aggregate(PageType.DAY_SUPERVISED, rows, declared_subtotal='2:33')

        assert result.subtotal_check is SubtotalCheck.MATCHED
        assert result.declared_subtotal_minutes == 153
        assert result.warnings == []

    def test_subtotal_mismatch_is_warning(self, aggregator, rows):
        """Test a mismatching subtotal adds a page warning, not an error."""
        result = aggregator.aggregate(PageType.DAY_SUPERVISED, rows, declared_subtotal='3:00')

        assert result.subtotal_check is SubtotalCheck.MISMATCHED
        assert len(result.errors) == 1
        subtotal_warnings = [w for w in result.warnings if w.row == 'subtotal']
        assert len(subtotal_warnings) == 1
        assert subtotal_warnings[0].recorded == 180
        assert subtotal_warnings[0].calculated == 150

    def test_subtotal_missing_or_unparseable(self, aggregator, rows):
        """Test absent and unreadable subtotals."""
        assert aggregator.aggregate(PageType.DAY_SUPERVISED, rows).subtotal_check \
            is SubtotalCheck.NOT_DECLARED
        assert aggregator.aggregate(PageType.DAY_SUPERVISED, rows, declared_subtotal='UNCLEAR') \
            .subtotal_check is SubtotalCheck.NOT_DECLARED
        assert aggregator.aggregate(PageType.DAY_SUPERVISED, rows, declared_subtotal='lots') \
            .subtotal_check is SubtotalCheck.UNPARSEABLE

    def test_daily_limit_warning(self, aggregator):
        """Test more than 8 valid hours on one date warns at page level."""
        sessions = [
            ('06:00', '08:00'), ('08:30', '10:30'), ('11:00', '13:00'),
            ('13:30', '15:30'), ('16:00', '18:00'),
        ]
        rows = RowValidator().validate_rows(
            [row(i + 1, s, f, '2:00') for i, (s, f) in enumerate(sessions)], TODAY
        )
        result = aggregator.aggregate(PageType.DAY_SUPERVISED, rows)

        daily = [w for w in result.warnings if w.row == 'daily']
        assert len(daily) == 1
        assert '01/02/2026' in daily[0].message
        assert result.totals.total_minutes == 600

    def test_page_type_info(self, aggregator, rows):
        """Test page metadata follows the page type."""
        stamp = aggregator.aggregate(PageType.PROFESSIONAL_STAMP, rows)
        night = aggregator.aggregate(PageType.NIGHT_SUPERVISED, rows)

        assert stamp.page_type_info.credit_multiplier == 3
        assert 'STAMP' in stamp.page_type_info.columns
        assert night.page_type_info.credit_multiplier == 1

    def test_empty_page(self, aggregator):
        """Test a page with no rows."""
        result = aggregator.aggregate(PageType.NIGHT_SUPERVISED, [])

        assert result.totals.total_minutes == 0
        assert result.totals.formatted_total == '0:00'
        assert result.has_errors is False
        assert result.has_warnings is False
