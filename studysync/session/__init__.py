"""Quiz attempt session: state machine, countdown and result helpers."""

from .attempt import AttemptSession, AttemptStateError, AttemptStatus
from .countdown import Countdown
from .results import format_clock, is_low_time, letter_grade, percentage
from .ticker import SessionTicker

__all__ = [
    "AttemptSession",
    "AttemptStateError",
    "AttemptStatus",
    "Countdown",
    "SessionTicker",
    "format_clock",
    "is_low_time",
    "letter_grade",
    "percentage",
]
