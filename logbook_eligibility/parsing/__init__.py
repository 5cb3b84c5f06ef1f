"""Token parsing for handwritten logbook values."""

from .parser import (
    NO_DURATION,
    UNCLEAR,
    TokenState,
    format_duration,
    parse_clock_time,
    parse_date,
    parse_duration,
    token_state,
)

__all__ = [
    "NO_DURATION",
    "UNCLEAR",
    "TokenState",
    "format_duration",
    "parse_clock_time",
    "parse_date",
    "parse_duration",
    "token_state",
]
