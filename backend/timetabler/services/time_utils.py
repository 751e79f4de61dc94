from __future__ import annotations

import re

from timetabler.core.exceptions import TimetableValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
SHORT_DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

MINUTES_PER_DAY = 24 * 60


def validate_time(value: str) -> str:
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise TimetableValidationError(
            "Time must be in HH:MM 24-hour format",
            details={"value": value},
        )
    return value


def parse_to_minutes(value: str) -> int:
    validate_time(value)
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(value: int) -> str:
    if value < 0 or value >= MINUTES_PER_DAY:
        raise TimetableValidationError(
            "Minutes must fall within a single day",
            details={"value": value},
        )
    hours = value // 60
    minutes = value % 60
    return f"{hours:02d}:{minutes:02d}"


def validate_day_of_week(value: int) -> int:
    # bool is an int subclass; True/False are never valid days.
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
        raise TimetableValidationError(
            "Day of week must be an integer between 0 (Sunday) and 6 (Saturday)",
            details={"value": value},
        )
    return value


def day_name(day: int, *, short: bool = False) -> str:
    validate_day_of_week(day)
    return SHORT_DAY_NAMES[day] if short else DAY_NAMES[day]


def duration_minutes(start: str, end: str) -> int:
    start_minutes = parse_to_minutes(start)
    end_minutes = parse_to_minutes(end)
    if end_minutes <= start_minutes:
        raise TimetableValidationError(
            "End time must be after start time",
            details={"start_time": start, "end_time": end},
        )
    return end_minutes - start_minutes


def intervals_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open interval test: touching intervals do not overlap."""
    a_start, a_end = parse_to_minutes(start_a), parse_to_minutes(end_a)
    b_start, b_end = parse_to_minutes(start_b), parse_to_minutes(end_b)
    if a_end <= b_start or b_end <= a_start:
        return False
    return True


def overlap_minutes(start_a: str, end_a: str, start_b: str, end_b: str) -> int:
    a_start, a_end = parse_to_minutes(start_a), parse_to_minutes(end_a)
    b_start, b_end = parse_to_minutes(start_b), parse_to_minutes(end_b)
    return max(0, min(a_end, b_end) - max(a_start, b_start))


def format_duration(minutes: int) -> str:
    """Render a minute count as e.g. "1 hour and 30 minutes" or "45 minutes"."""
    hours, remainder = divmod(max(0, minutes), 60)
    parts: list[str] = []
    if hours:
        parts.append(f"{hours} hour{'s' if hours > 1 else ''}")
    if remainder:
        parts.append(f"{remainder} minute{'s' if remainder > 1 else ''}")
    if not parts:
        return "0 minutes"
    return " and ".join(parts)
