"""Date, clock-time and duration parsing for handwritten logbook tokens.

Every parser returns None on failure rather than raising, so callers can
turn a failed parse into a row-level error.
"""

import logging
import re
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

UNCLEAR = "UNCLEAR"
NO_DURATION = "--:--"

_DATE_SEPARATORS = re.compile(r'[/\-.]')
_DATE_PART_PATTERN = re.compile(r'\d+', re.ASCII)
_CLOCK_PATTERN = re.compile(r'(\d{1,2})[:.](\d{2})', re.ASCII)
_HOURS_MINUTES_PATTERN = re.compile(r'(\d+)[:.](\d{2})', re.ASCII)
_DECIMAL_HOURS_PATTERN = re.compile(r'\d+(?:\.\d*)?|\.\d+', re.ASCII)


class TokenState(str, Enum):
    """Whether a raw text field is absent, marked unclear, or carries data."""

    ABSENT = "absent"
    UNCLEAR = "unclear"
    PRESENT = "present"


def token_state(text: Optional[str]) -> TokenState:
    """Classify a raw extracted text field."""
    if text is None or not text.strip():
        return TokenState.ABSENT
    if text.strip().upper() == UNCLEAR:
        return TokenState.UNCLEAR
    return TokenState.PRESENT


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Parse a day/month/year date.

    Accepts '/', '-' or '.' as separators. Two-digit years map to the
    1900s when greater than 50, otherwise to the 2000s.

    Args:
        text: Raw date string, e.g. "05/03/2024" or "5.3.24"

    Returns:
        Parsed date, or None if malformed or not a real calendar date
    """
    if not text:
        return None

    parts = _DATE_SEPARATORS.split(text.strip())
    if len(parts) != 3 or not all(_DATE_PART_PATTERN.fullmatch(p) for p in parts):
        logger.debug(f"Malformed date: {text!r}")
        return None

    day, month, year = (int(p) for p in parts)
    if year < 100:
        year += 1900 if year > 50 else 2000

    try:
        return date(year, month, day)
    except ValueError:
        logger.debug(f"Out-of-range date: {text!r}")
        return None


def parse_clock_time(text: Optional[str]) -> Optional[int]:
    """
    Parse a 24-hour H:MM or H.MM clock time.

    Returns:
        Minutes since midnight, or None if invalid
    """
    if not text:
        return None

    match = _CLOCK_PATTERN.fullmatch(text.strip())
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if 0 <= hours <= 23 and 0 <= minutes <= 59:
        return hours * 60 + minutes
    return None


def parse_duration(text: Optional[str]) -> Optional[int]:
    """
    Parse a recorded duration into minutes.

    Handles:
    - H:MM or H.MM (hours and minutes)
    - Bare decimal hours ("1.5"), rounded to the nearest minute

    Note that "1.30" is read as one hour thirty, not 1.3 hours.
    """
    if not text:
        return None

    cleaned = text.strip()

    match = _HOURS_MINUTES_PATTERN.fullmatch(cleaned)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    if _DECIMAL_HOURS_PATTERN.fullmatch(cleaned):
        minutes = Decimal(cleaned) * 60
        return int(minutes.quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    logger.debug(f"Could not parse duration: {text!r}")
    return None


def format_duration(minutes) -> str:
    """Format minutes as H:MM; None formats as a placeholder."""
    if minutes is None:
        return NO_DURATION

    total = int(Decimal(str(minutes)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    hours, remainder = divmod(total, 60)
    return f"{hours}:{remainder:02d}"
