"""
Time-of-day interval model and overlap detection.

A shift occupies [start, end) minutes on its calendar date. Overnight shifts
(end not after start) extend past midnight, so their effective end is
end + 1440 and the interval always has positive length.
"""

import re
from datetime import date
from typing import NamedTuple


MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


class InvalidTimeError(ValueError):
    pass


class EffectiveInterval(NamedTuple):
    date: date
    start: int  # minutes from midnight of `date`
    end: int


def parse_time_of_day(value: str) -> int:
    """Parse HH:MM into minutes after midnight."""
    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise InvalidTimeError(f"Time must be in HH:MM format, got {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def normalize_time_of_day(value: str) -> str:
    """Zero-padded HH:MM, so stored times sort as strings in time order."""
    minutes = parse_time_of_day(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_overnight(start_time: str, end_time: str) -> bool:
    return parse_time_of_day(end_time) <= parse_time_of_day(start_time)


def minute_span(start_time: str, end_time: str) -> tuple[int, int]:
    start = parse_time_of_day(start_time)
    end = parse_time_of_day(end_time)
    if end <= start:
        end += MINUTES_PER_DAY
    return start, end


def shift_duration_hours(start_time: str, end_time: str) -> float:
    start, end = minute_span(start_time, end_time)
    return round((end - start) / 60, 2)


def to_effective_interval(shift) -> EffectiveInterval:
    """Any object with date/start_time/end_time works (Shift or proposal)."""
    start, end = minute_span(shift.start_time, shift.end_time)
    return EffectiveInterval(shift.date, start, end)


def intervals_overlap(
    a: EffectiveInterval,
    b: EffectiveInterval,
    span_midnight: bool = False,
) -> bool:
    """
    Half-open overlap test.

    By default intervals on different calendar dates never overlap, even when
    an overnight interval runs into the other's date. With span_midnight the
    comparison happens on one absolute timeline instead.
    """
    if a.date != b.date:
        if not span_midnight:
            return False
        offset = (b.date - a.date).days * MINUTES_PER_DAY
        return a.start < b.end + offset and b.start + offset < a.end
    return a.start < b.end and b.start < a.end


def shifts_overlap(a, b, span_midnight: bool = False) -> bool:
    return intervals_overlap(to_effective_interval(a), to_effective_interval(b), span_midnight)
