"""Logbook row validation.

This module validates a single extracted logbook row for legibility,
time consistency and plausibility, producing an immutable ValidatedRow.
"""

import logging
from datetime import date
from typing import List, Optional

from ..models.schema import Confidence, FieldIssue, LogbookRow, ValidatedRow, ValidationRules
from ..parsing.parser import (
    TokenState,
    format_duration,
    parse_clock_time,
    parse_date,
    parse_duration,
    token_state,
)

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


class RowValidator:
    """
    Validates extracted logbook rows.

    Performs:
    - Legibility checks (UNCLEAR dates and times)
    - Date checks (malformed, future, implausibly old)
    - Duration checks (too short, over the break limit, recorded vs computed)
    - Signature, odometer and extraction-confidence checks

    Every rule is evaluated; a row may collect several errors and warnings.
    """

    def __init__(self, rules: Optional[ValidationRules] = None):
        """
        Initialize the validator.

        Args:
            rules: Validation thresholds (defaults to ValidationRules())
        """
        self.rules = rules or ValidationRules()
        self.logger = logging.getLogger(self.__class__.__name__)

    def validate(self, row: LogbookRow, today: Optional[date] = None) -> ValidatedRow:
        """
        Validate one logbook row.

        Args:
            row: Extracted row
            today: Reference date for the future-date check (default: today)

        Returns:
            ValidatedRow carrying parsed values, errors and warnings
        """
        today = today or date.today()
        errors: List[FieldIssue] = []
        warnings: List[FieldIssue] = []

        parsed_date = self._check_date(row, today, errors, warnings)
        calculated = self._check_times(row, errors, warnings)
        recorded = self._check_recorded_duration(row, calculated, errors, warnings)

        if not row.has_signature:
            warnings.append(self._issue(row, 'signature', 'Signature appears to be missing'))

        self._check_odometer(row, calculated, errors, warnings)

        if row.confidence is Confidence.LOW:
            warnings.append(self._issue(row, 'general', 'Low confidence extraction - please verify'))

        duration = calculated if calculated is not None else recorded

        result = ValidatedRow(
            **row.model_dump(),
            parsed_date=parsed_date,
            calculated_duration=calculated,
            duration_minutes=duration,
            errors=errors,
            warnings=warnings,
        )

        self.logger.info(
            f"Row {row.row_number}: valid={result.is_valid}, "
            f"warnings={len(warnings)}, errors={len(errors)}"
        )
        for warning in warnings:
            self.logger.debug(f"Row {row.row_number} warning [{warning.field}]: {warning.message}")
        for error in errors:
            self.logger.debug(f"Row {row.row_number} error [{error.field}]: {error.message}")

        return result

    def validate_rows(self, rows: List[LogbookRow], today: Optional[date] = None) -> List[ValidatedRow]:
        """Validate each row independently, preserving order."""
        return [self.validate(row, today) for row in rows]

    @staticmethod
    def _issue(row: LogbookRow, field: str, message: str, **extra) -> FieldIssue:
        return FieldIssue(field=field, message=message, row=row.row_number, **extra)

    def _check_date(self, row, today, errors, warnings) -> Optional[date]:
        state = token_state(row.date_text)
        if state is TokenState.UNCLEAR:
            errors.append(self._issue(row, 'date', 'Date is unclear or illegible'))
            return None
        if state is TokenState.ABSENT:
            return None

        parsed = parse_date(row.date_text)
        if parsed is None:
            errors.append(self._issue(row, 'date', f"Invalid date format: {row.date_text}"))
        elif parsed > today:
            errors.append(self._issue(row, 'date', 'Date is in the future'))
        elif parsed < self.rules.earliest_plausible_date:
            warnings.append(self._issue(row, 'date', 'Date seems unusually old'))
        return parsed

    def _check_times(self, row, errors, warnings) -> Optional[int]:
        start_state = token_state(row.start_time)
        finish_state = token_state(row.finish_time)

        if TokenState.UNCLEAR in (start_state, finish_state):
            errors.append(self._issue(row, 'time', 'Start or finish time is unclear'))

        start = finish = None
        if start_state is TokenState.PRESENT:
            start = parse_clock_time(row.start_time)
            if start is None:
                errors.append(self._issue(row, 'startTime', f"Invalid start time: {row.start_time}"))
        if finish_state is TokenState.PRESENT:
            finish = parse_clock_time(row.finish_time)
            if finish is None:
                errors.append(self._issue(row, 'finishTime', f"Invalid finish time: {row.finish_time}"))

        if start is None or finish is None:
            return None

        # Overnight session
        if finish < start:
            finish += MINUTES_PER_DAY
        calculated = finish - start

        if calculated < self.rules.min_session_minutes:
            errors.append(self._issue(
                row, 'duration',
                f"Session too short ({calculated} mins) - possible time entry error"
            ))

        if calculated > self.rules.max_session_hours * 60:
            warnings.append(self._issue(
                row, 'duration',
                f"Session over {self.rules.max_session_hours:g} hours "
                f"({calculated / 60:.1f} hrs) - break required after "
                f"{self.rules.max_session_hours:g} hours"
            ))

        return calculated

    def _check_recorded_duration(self, row, calculated, errors, warnings) -> Optional[int]:
        state = token_state(row.total_time)
        if state is TokenState.UNCLEAR:
            warnings.append(self._issue(
                row, 'totalTime', 'Total time is unclear - will calculate from start/finish'
            ))
            return None
        if state is TokenState.ABSENT:
            return None

        recorded = parse_duration(row.total_time)
        if recorded is not None and calculated is not None:
            if abs(calculated - recorded) > self.rules.duration_tolerance_minutes:
                errors.append(self._issue(
                    row, 'totalTime',
                    f"Time mismatch: recorded {format_duration(recorded)} "
                    f"but calculated {format_duration(calculated)}",
                    calculated=calculated,
                    recorded=recorded,
                ))
        return recorded

    def _check_odometer(self, row, calculated, errors, warnings):
        if row.odometer_start is None or row.odometer_finish is None:
            return

        distance = row.odometer_finish - row.odometer_start
        if distance < 0:
            errors.append(self._issue(row, 'odometer', 'Odometer finish is less than start'))
        elif distance > self.rules.odometer_distance_threshold_km and calculated:
            average_speed = distance / (calculated / 60)
            if average_speed > self.rules.max_average_speed_kmh:
                warnings.append(self._issue(
                    row, 'odometer',
                    f"High average speed ({average_speed:.0f} km/h) - check odometer readings"
                ))
