"""Pydantic models for logbook scanning and licence eligibility.

This module defines the structured data models that flow through the
pipeline: extracted logbook rows, validated rows, page scan results,
cumulative totals and the student eligibility record.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


class PageType(str, Enum):
    """Logbook page categories, tagged the way the extraction model reports them."""

    DAY_SUPERVISED = "BLUE_DAY"
    NIGHT_SUPERVISED = "RED_NIGHT"
    PROFESSIONAL_DRIVING = "GREEN_ADI"
    PROFESSIONAL_STAMP = "ADI_STAMP"

    @property
    def is_professional(self) -> bool:
        return self in (PageType.PROFESSIONAL_DRIVING, PageType.PROFESSIONAL_STAMP)


class Confidence(str, Enum):
    """Extraction confidence label."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SubtotalCheck(str, Enum):
    """Outcome of reconciling a page's declared subtotal with its entries."""

    NOT_DECLARED = "not_declared"
    UNPARSEABLE = "unparseable"
    MATCHED = "matched"
    MISMATCHED = "mismatched"


class Pathway(str, Enum):
    """Licence pathway: red for under-25 entrants, green otherwise."""

    RED = "red"
    GREEN = "green"


class EligibilityStatus(str, Enum):
    """Closed set of eligibility outcomes."""

    ELIGIBLE = "ELIGIBLE"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    PENDING_HOURS = "PENDING_HOURS"
    PENDING_TENURE = "PENDING_TENURE"
    PENDING_ASSESSMENTS = "PENDING_ASSESSMENTS"


def _as_text(v):
    """Models sometimes emit numbers where text is expected (e.g. totalTime 1.5)."""
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, (int, float)):
        return str(v)
    return v


class ValidationRules(BaseModel):
    """Fixed rule configuration applied by the row validator."""

    model_config = ConfigDict(frozen=True)

    max_session_hours: float = 2
    min_session_minutes: int = 5
    max_daily_hours: float = 8
    earliest_plausible_date: date = date(2020, 1, 1)
    duration_tolerance_minutes: int = 5
    odometer_distance_threshold_km: float = 200
    max_average_speed_kmh: float = 100


class LogbookRow(BaseModel):
    """
    One handwritten logbook row as extracted from a page image.

    Any text field may hold the sentinel "UNCLEAR" instead of data.
    Field aliases match the JSON emitted by the extraction model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    row_number: Optional[int] = Field(None, alias="rowNumber")
    date_text: Optional[str] = Field(None, alias="date", description="DD/MM/YYYY or UNCLEAR")
    weather: Optional[str] = Field(None, alias="weather")
    supervisor_name: Optional[str] = Field(None, alias="supervisorName")
    licence_number: Optional[str] = Field(None, alias="licenceNumber", description="Licence or ADI number")
    start_time: Optional[str] = Field(None, alias="startTime")
    finish_time: Optional[str] = Field(None, alias="finishTime")
    total_time: Optional[str] = Field(None, alias="totalTime", description="Recorded duration")
    has_signature: bool = Field(False, alias="hasSignature")
    odometer_start: Optional[float] = Field(None, alias="odometerStart")
    odometer_finish: Optional[float] = Field(None, alias="odometerFinish")
    confidence: Optional[Confidence] = Field(None, alias="confidence")
    notes: Optional[str] = Field(None, alias="notes")

    @field_validator(
        'date_text', 'weather', 'supervisor_name', 'licence_number',
        'start_time', 'finish_time', 'total_time', 'notes', mode='before'
    )
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    @field_validator('row_number', mode='before')
    @classmethod
    def coerce_row_number(cls, v):
        try:
            return int(v) if v is not None else None
        except (TypeError, ValueError):
            return None

    @field_validator('has_signature', mode='before')
    @classmethod
    def coerce_signature(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in ('true', 'yes', 'y', '1')
        return bool(v) if v is not None else False

    @field_validator('odometer_start', 'odometer_finish', mode='before')
    @classmethod
    def coerce_odometer(cls, v):
        """Unreadable odometer values are treated as not recorded."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, str):
            cleaned = v.replace(',', '').replace(' ', '')
            try:
                return float(cleaned)
            except ValueError:
                return None
        return v

    @field_validator('confidence', mode='before')
    @classmethod
    def coerce_confidence(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v if v in {c.value for c in Confidence} else None
        return v


class FieldIssue(BaseModel):
    """A single validation error or warning attached to a field."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    row: Optional[Union[int, str]] = Field(None, description="Row number, or 'subtotal'/'daily' for page issues")
    calculated: Optional[int] = Field(None, description="Computed minutes, for duration mismatches")
    recorded: Optional[int] = Field(None, description="Recorded minutes, for duration mismatches")


class ValidatedRow(LogbookRow):
    """A logbook row plus the values and issues derived while validating it."""

    parsed_date: Optional[date] = None
    calculated_duration: Optional[int] = Field(None, description="finish - start, in minutes")
    duration_minutes: Optional[int] = Field(None, description="Calculated, else recorded, minutes")
    errors: List[FieldIssue] = Field(default_factory=list)
    warnings: List[FieldIssue] = Field(default_factory=list)

    @computed_field
    @property
    def is_valid(self) -> bool:
        """Warnings never block validity."""
        return not self.errors


class PageTypeInfo(BaseModel):
    """Display and credit metadata for a page type."""

    model_config = ConfigDict(frozen=True)

    name: str
    header_color: str
    credit_multiplier: int
    columns: List[str]


class PageTotals(BaseModel):
    """Aggregate totals over a page's rows."""

    model_config = ConfigDict(frozen=True)

    entries: int
    valid_entries: int
    total_minutes: int
    formatted_total: str

    @computed_field
    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60


class PageScanResult(BaseModel):
    """Result of validating and totalling one logbook page."""

    model_config = ConfigDict(frozen=True)

    page_type: PageType
    page_type_info: PageTypeInfo
    page_number: Optional[int] = None
    entries: List[ValidatedRow] = Field(default_factory=list)
    totals: PageTotals
    errors: List[FieldIssue] = Field(default_factory=list)
    warnings: List[FieldIssue] = Field(default_factory=list)
    declared_subtotal: Optional[str] = None
    declared_subtotal_minutes: Optional[int] = None
    subtotal_check: SubtotalCheck = SubtotalCheck.NOT_DECLARED
    page_notes: Optional[str] = None
    scanned_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @computed_field
    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class ExtractionPayload(BaseModel):
    """The JSON object the vision model returns for one page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_type: PageType = Field(..., alias="pageType")
    page_number: Optional[int] = Field(None, alias="pageNumber")
    entries: List[LogbookRow] = Field(default_factory=list)
    subtotal: Optional[str] = None
    page_notes: Optional[str] = Field(None, alias="pageNotes")

    @field_validator('page_number', mode='before')
    @classmethod
    def coerce_page_number(cls, v):
        try:
            return int(v) if v is not None else None
        except (TypeError, ValueError):
            return None

    @field_validator('subtotal', 'page_notes', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    @field_validator('entries', mode='before')
    @classmethod
    def coerce_entries(cls, v):
        return [] if v is None else v


class SupervisedTotals(BaseModel):
    """Supervised (day/night) hours, carried without multiplier."""

    model_config = ConfigDict(frozen=True)

    day_hours: float
    night_hours: float
    total_hours: float


class ProfessionalCredit(BaseModel):
    """Tiered credit for hours driven with a professional instructor."""

    model_config = ConfigDict(frozen=True)

    actual_hours: float
    first_tier_credit: float
    excess_credit: float
    total_credit: float


class ValidationSummary(BaseModel):
    """Entry and issue counts summed across pages."""

    model_config = ConfigDict(frozen=True)

    total_entries: int
    error_count: int
    warning_count: int


class CumulativeTotals(BaseModel):
    """Hours bucketed by category across a set of scanned pages."""

    model_config = ConfigDict(frozen=True)

    day_minutes: int
    night_minutes: int
    professional_minutes: int
    supervised: SupervisedTotals
    professional: ProfessionalCredit
    grand_total_actual_hours: float
    grand_total_credited_hours: float
    validation: ValidationSummary


class StudentEligibilityRecord(BaseModel):
    """
    The subset of a student record the eligibility engine reads and rewrites.

    Input attributes:
        date_of_birth: Student's date of birth
        licence_issue_date: Learner licence issue date
        licence_expiry_date: Learner licence expiry (issue date is derived from it)
        supervised_hours: Logged supervised hours (day and night)
        professional_hours: Actual hours with a professional instructor
        night_hours: Logged night hours
        safer_driver_credit / vru_credit / first_aid_credit: Course credits
        cbta_completed / final_assessment_completed: Mandatory assessments
        tenure_start_date: Start of the minimum tenure period

    The remaining attributes are derived and recomputed on every evaluation.
    """

    model_config = ConfigDict(validate_assignment=True)

    date_of_birth: Optional[date] = None
    licence_issue_date: Optional[date] = None
    licence_expiry_date: Optional[date] = None
    supervised_hours: Optional[float] = 0
    professional_hours: Optional[float] = 0
    night_hours: Optional[float] = 0
    safer_driver_credit: Optional[bool] = False
    vru_credit: Optional[bool] = False
    first_aid_credit: Optional[bool] = False
    cbta_completed: Optional[bool] = False
    final_assessment_completed: Optional[bool] = False
    tenure_start_date: Optional[date] = None

    # Derived
    age_at_issue: Optional[int] = None
    pathway: Optional[Pathway] = None
    hours_required: int = 100
    night_hours_required: int = 10
    tenure_months_required: int = 12
    total_credited_hours: float = 0
    hours_remaining: float = 100
    earliest_eligible_date: Optional[date] = None
    eligibility_status: EligibilityStatus = EligibilityStatus.NOT_ELIGIBLE

    @field_validator('supervised_hours', 'professional_hours', 'night_hours')
    @classmethod
    def validate_hours(cls, v):
        """Ensure hours are non-negative if present."""
        if v is not None and v < 0:
            raise ValueError("Hours cannot be negative")
        return v


class EligibilityOutcome(BaseModel):
    """Derived eligibility fields for one evaluation."""

    model_config = ConfigDict(frozen=True)

    licence_issue_date: Optional[date] = None
    age_at_issue: Optional[int] = None
    pathway: Optional[Pathway] = None
    hours_required: int
    night_hours_required: int
    tenure_months_required: int
    total_credited_hours: float
    hours_remaining: float
    earliest_eligible_date: Optional[date] = None
    eligibility_status: EligibilityStatus
