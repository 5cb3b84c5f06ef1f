"""Licence upgrade eligibility rules.

Derives pathway, thresholds, credited hours, earliest eligible date and
status from a student's recorded hours, credits, assessments and dates.
Evaluation is a pure function of the record and the reference date.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, NamedTuple, Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..config import Config
from ..models.schema import (
    CumulativeTotals,
    EligibilityOutcome,
    EligibilityStatus,
    Pathway,
    StudentEligibilityRecord,
)

logger = logging.getLogger(__name__)


class Thresholds(NamedTuple):
    total_hours: int
    night_hours: int
    tenure_months: int


PATHWAY_THRESHOLDS = {
    Pathway.RED: Thresholds(total_hours=100, night_hours=10, tenure_months=12),
    Pathway.GREEN: Thresholds(total_hours=50, night_hours=5, tenure_months=6),
}

# Applies when the pathway cannot be determined
DEFAULT_THRESHOLDS = PATHWAY_THRESHOLDS[Pathway.RED]


@dataclass(frozen=True)
class EligibilityFacts:
    """Boolean facts the status rules are evaluated over."""

    hours_met: bool
    night_hours_met: bool
    assessments_complete: bool
    tenure_pending: bool
    age_requirement_met: bool


# Checked in order; the first matching rule wins. Hours dominate tenure,
# tenure dominates assessments. Night hours and minimum age are only
# checked for ELIGIBLE, so a shortfall there alone yields NOT_ELIGIBLE.
STATUS_RULES: Tuple[Tuple[EligibilityStatus, Callable[[EligibilityFacts], bool]], ...] = (
    (EligibilityStatus.PENDING_HOURS, lambda f: not f.hours_met),
    (EligibilityStatus.PENDING_TENURE, lambda f: f.tenure_pending),
    (EligibilityStatus.PENDING_ASSESSMENTS, lambda f: not f.assessments_complete),
    (EligibilityStatus.ELIGIBLE, lambda f: (
        f.hours_met
        and f.night_hours_met
        and f.assessments_complete
        and not f.tenure_pending
        and f.age_requirement_met
    )),
)


def derive_status(facts: EligibilityFacts) -> EligibilityStatus:
    """Return the first status whose rule matches, else NOT_ELIGIBLE."""
    for status, rule in STATUS_RULES:
        if rule(facts):
            return status
    return EligibilityStatus.NOT_ELIGIBLE


def age_on(date_of_birth: date, on: date) -> int:
    """Whole years between date of birth and a given date."""
    return relativedelta(on, date_of_birth).years


def calculate_credited_hours(record: StudentEligibilityRecord) -> float:
    """
    Flat credit formula over the stored totals.

    Professional hours earn 3-for-1 up to 10 actual hours; hours beyond
    the cap earn nothing here. Course credits are added as fixed hours.
    """
    professional = min(record.professional_hours or 0, Config.PROFESSIONAL_CREDIT_CAP_HOURS)
    total = professional * Config.PROFESSIONAL_CREDIT_MULTIPLIER + (record.supervised_hours or 0)

    if record.safer_driver_credit:
        total += Config.SAFER_DRIVER_CREDIT_HOURS
    if record.vru_credit:
        total += Config.VRU_CREDIT_HOURS
    if record.first_aid_credit:
        total += Config.FIRST_AID_CREDIT_HOURS

    return total


class EligibilityEngine:
    """
    Evaluates licence upgrade eligibility for one student record.

    The engine holds no state between evaluations; missing optional inputs
    are treated as zero or absent rather than raising.
    """

    def __init__(self):
        """Initialize the eligibility engine."""
        self.logger = logging.getLogger(self.__class__.__name__)

    def evaluate(
        self,
        record: StudentEligibilityRecord,
        today: Optional[date] = None,
    ) -> EligibilityOutcome:
        """
        Compute the derived eligibility fields.

        Args:
            record: Student record (input fields are read, derived ones ignored)
            today: Reference date (default: today)

        Returns:
            EligibilityOutcome with every derived field
        """
        today = today or date.today()

        issue_date = record.licence_issue_date
        if record.licence_expiry_date is not None:
            issue_date = record.licence_expiry_date - relativedelta(years=Config.LICENCE_VALIDITY_YEARS)

        age_at_issue = None
        pathway = None
        if record.date_of_birth is not None and issue_date is not None:
            age_at_issue = age_on(record.date_of_birth, issue_date)
            pathway = Pathway.RED if age_at_issue < Config.RED_PATHWAY_AGE_LIMIT else Pathway.GREEN

        thresholds = PATHWAY_THRESHOLDS.get(pathway, DEFAULT_THRESHOLDS)

        credited = calculate_credited_hours(record)
        remaining = max(thresholds.total_hours - credited, 0)

        earliest = None
        if record.tenure_start_date is not None:
            earliest = record.tenure_start_date + relativedelta(months=thresholds.tenure_months)

        facts = EligibilityFacts(
            hours_met=credited >= thresholds.total_hours,
            night_hours_met=(record.night_hours or 0) >= thresholds.night_hours,
            assessments_complete=bool(record.cbta_completed and record.final_assessment_completed),
            tenure_pending=earliest is not None and today < earliest,
            age_requirement_met=(age_at_issue or 0) >= Config.MIN_AGE_AT_ISSUE,
        )
        status = derive_status(facts)

        self.logger.info(
            f"Eligibility: pathway={pathway.value if pathway else None}, "
            f"credited={credited:g}/{thresholds.total_hours}, status={status.value}"
        )
        self.logger.debug(f"Eligibility facts: {facts}")

        return EligibilityOutcome(
            licence_issue_date=issue_date,
            age_at_issue=age_at_issue,
            pathway=pathway,
            hours_required=thresholds.total_hours,
            night_hours_required=thresholds.night_hours,
            tenure_months_required=thresholds.tenure_months,
            total_credited_hours=credited,
            hours_remaining=remaining,
            earliest_eligible_date=earliest,
            eligibility_status=status,
        )

    def apply(
        self,
        record: StudentEligibilityRecord,
        today: Optional[date] = None,
    ) -> StudentEligibilityRecord:
        """Return a copy of the record with its derived fields recomputed."""
        outcome = self.evaluate(record, today)
        return record.model_copy(update=outcome.model_dump())


def apply_scanned_totals(
    record: StudentEligibilityRecord,
    totals: CumulativeTotals,
) -> StudentEligibilityRecord:
    """
    Replace the record's hour fields with totals accumulated from scanned pages.

    Supervised hours include night hours. Professional hours are stored as
    actual hours; the engine applies its own credit formula on evaluation.
    """
    logger.info(
        f"Applying scanned totals: supervised={totals.supervised.total_hours:.2f}h, "
        f"night={totals.supervised.night_hours:.2f}h, "
        f"professional={totals.professional.actual_hours:.2f}h"
    )
    return record.model_copy(update={
        'supervised_hours': totals.supervised.total_hours,
        'night_hours': totals.supervised.night_hours,
        'professional_hours': totals.professional.actual_hours,
    })
