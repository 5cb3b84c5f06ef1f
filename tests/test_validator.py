"""Tests for logbook row validation."""

from datetime import date

import pytest

from logbook_eligibility.models.schema import Confidence, LogbookRow, ValidationRules
from logbook_eligibility.validation.validator import RowValidator

TODAY = date(2026, 3, 1)


def make_row(**overrides):
    """Build a clean row, overriding extraction fields by their JSON names."""
    data = {
        'rowNumber': 1,
        'date': '01/02/2026',
        'supervisorName': 'J. Smith',
        'licenceNumber': '1234567',
        'startTime': '09:00',
        'finishTime': '10:00',
        'totalTime': '1:00',
        'hasSignature': True,
        'confidence': 'high',
    }
    data.update(overrides)
    return LogbookRow.model_validate(data)


def fields(issues):
    return [issue.field for issue in issues]


class TestRowValidator:
    """Test suite for RowValidator class."""

    @pytest.fixture
    def validator(self):
        """Fixture to provide RowValidator instance."""
        return RowValidator(ValidationRules())

    def test_validate_clean_row(self, validator):
        """Test a complete, consistent row."""
        result = validator.validate(make_row(), TODAY)

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.parsed_date == date(2026, 2, 1)
        assert result.calculated_duration == 60
        assert result.duration_minutes == 60

    def test_unclear_date_is_never_valid(self, validator):
        """Test that an unclear date blocks validity."""
        result = validator.validate(make_row(date='UNCLEAR'), TODAY)

        assert result.is_valid is False
        assert fields(result.errors) == ['date']
        assert result.parsed_date is None

    def test_unclear_time_is_never_valid(self, validator):
        """Test that either unclear time endpoint blocks validity."""
        for overrides in ({'startTime': 'UNCLEAR'}, {'finishTime': 'UNCLEAR'}):
            result = validator.validate(make_row(**overrides), TODAY)

            assert result.is_valid is False
            assert 'time' in fields(result.errors)
            assert result.calculated_duration is None

    def test_malformed_time(self, validator):
        """Test a present but unparseable time."""
        result = validator.validate(make_row(startTime='9h', totalTime=None), TODAY)

        assert fields(result.errors) == ['startTime']
        assert result.calculated_duration is None

    def test_overnight_session(self, validator):
        """Test finish before start is treated as crossing midnight."""
        result = validator.validate(make_row(startTime='23:30', finishTime='00:30'), TODAY)

        assert result.is_valid is True
        assert result.calculated_duration == 60

    def test_session_too_short(self, validator):
        """Test sessions under the minimum length."""
        result = validator.validate(
            make_row(startTime='09:00', finishTime='09:03', totalTime=None), TODAY
        )

        assert result.is_valid is False
        assert fields(result.errors) == ['duration']
        assert 'too short' in result.errors[0].message.lower()

    def test_long_session_is_warning_only(self, validator):
        """Test sessions over the break limit warn but stay valid."""
        result = validator.validate(
            make_row(startTime='09:00', finishTime='12:00', totalTime='3:00'), TODAY
        )

        assert result.is_valid is True
        assert fields(result.warnings) == ['duration']
        assert 'break required' in result.warnings[0].message

    def test_recorded_duration_mismatch(self, validator):
        """Test recorded vs computed durations differing by more than 5 minutes."""
        result = validator.validate(make_row(totalTime='1:30'), TODAY)

        assert result.is_valid is False
        error = result.errors[0]
        assert error.field == 'totalTime'
        assert error.calculated == 60
        assert error.recorded == 90
        assert 'recorded 1:30 but calculated 1:00' in error.message
        # Computed value still wins
        assert result.duration_minutes == 60

    def test_recorded_duration_within_tolerance(self, validator):
        """Test handwriting slack of up to 5 minutes."""
        for recorded in ('1:05', '0:55', '1.0'):
            result = validator.validate(make_row(totalTime=recorded), TODAY)
            assert result.is_valid is True

    def test_unclear_recorded_duration(self, validator):
        """Test unclear total time falls back to the computed duration."""
        result = validator.validate(make_row(totalTime='UNCLEAR'), TODAY)

        assert result.is_valid is True
        assert fields(result.warnings) == ['totalTime']
        assert result.duration_minutes == 60

    def test_recorded_duration_without_times(self, validator):
        """Test rows with no times use the recorded duration."""
        result = validator.validate(
            make_row(startTime=None, finishTime=None, totalTime='1.5'), TODAY
        )

        assert result.is_valid is True
        assert result.calculated_duration is None
        assert result.duration_minutes == 90

    def test_future_date(self, validator):
        """Test dates after today are errors."""
        result = validator.validate(make_row(date='02/03/2026'), TODAY)

        assert result.is_valid is False
        assert any('future' in e.message.lower() for e in result.errors)

    def test_implausibly_old_date(self, validator):
        """Test dates before the earliest plausible date warn."""
        result = validator.validate(make_row(date='15/06/2019'), TODAY)

        assert result.is_valid is True
        assert any('unusually old' in w.message for w in result.warnings)

    def test_invalid_calendar_date(self, validator):
        """Test an impossible date is an error."""
        result = validator.validate(make_row(date='31/02/2024'), TODAY)

        assert result.is_valid is False
        assert 'Invalid date format' in result.errors[0].message

    def test_non_ascii_digit_date_is_row_error(self, validator):
        """Test OCR noise like superscripts yields a date error, not a crash."""
        result = validator.validate(make_row(date='5/3/2²'), TODAY)

        assert result.is_valid is False
        assert fields(result.errors) == ['date']
        assert result.parsed_date is None
        assert result.calculated_duration == 60

    def test_missing_signature(self, validator):
        """Test missing signature warns."""
        result = validator.validate(make_row(hasSignature=False), TODAY)

        assert result.is_valid is True
        assert fields(result.warnings) == ['signature']

    def test_odometer_finish_before_start(self, validator):
        """Test decreasing odometer readings are an error."""
        result = validator.validate(
            make_row(odometerStart=10500, odometerFinish=10400), TODAY
        )

        assert result.is_valid is False
        assert fields(result.errors) == ['odometer']

    def test_odometer_high_average_speed(self, validator):
        """Test implausible distance for the session length."""
        fast = validator.validate(
            make_row(odometerStart=10000, odometerFinish=10250), TODAY
        )
        assert fast.is_valid is True
        assert fields(fast.warnings) == ['odometer']
        assert '250 km/h' in fast.warnings[0].message

        plausible = validator.validate(
            make_row(startTime='09:00', finishTime='12:00', totalTime='3:00',
                     odometerStart=10000, odometerFinish=10250),
            TODAY,
        )
        assert 'odometer' not in fields(plausible.warnings)

    def test_low_confidence(self, validator):
        """Test low-confidence extractions warn regardless of other fields."""
        result = validator.validate(make_row(confidence='low'), TODAY)

        assert result.is_valid is True
        assert fields(result.warnings) == ['general']

    def test_warnings_never_block_validity(self, validator):
        """Test a row with zero errors and five warnings is valid."""
        row = make_row(
            date='01/06/2019',
            startTime='09:00',
            finishTime='12:00',
            totalTime='UNCLEAR',
            hasSignature=False,
            confidence='low',
        )
        result = validator.validate(row, TODAY)

        assert len(result.errors) == 0
        assert len(result.warnings) == 5
        assert result.is_valid is True

    def test_single_error_blocks_validity(self, validator):
        """Test a row with one error and zero warnings is invalid."""
        result = validator.validate(
            make_row(startTime='09:00', finishTime='09:02', totalTime=None), TODAY
        )

        assert len(result.errors) == 1
        assert len(result.warnings) == 0
        assert result.is_valid is False

    def test_rules_accumulate_without_short_circuit(self, validator):
        """Test several independent errors on one row."""
        row = make_row(
            date='UNCLEAR',
            totalTime='2:00',
            odometerStart=500,
            odometerFinish=400,
        )
        result = validator.validate(row, TODAY)

        assert set(fields(result.errors)) == {'date', 'totalTime', 'odometer'}

    def test_issues_carry_row_number(self, validator):
        """Test issues are tagged with their row."""
        result = validator.validate(make_row(rowNumber=7, hasSignature=False), TODAY)

        assert result.warnings[0].row == 7


class TestLogbookRowCoercion:
    """Test suite for LogbookRow field coercion."""

    def test_numeric_total_time(self):
        """Test numeric durations become text."""
        assert make_row(totalTime=1.5).total_time == '1.5'

    def test_odometer_text(self):
        """Test odometer strings are parsed, unreadable ones dropped."""
        row = make_row(odometerStart='12,345', odometerFinish='UNCLEAR')

        assert row.odometer_start == 12345.0
        assert row.odometer_finish is None

    def test_confidence_case(self):
        """Test confidence labels are case-insensitive."""
        assert make_row(confidence='LOW').confidence is Confidence.LOW
        assert make_row(confidence='unsure').confidence is None
