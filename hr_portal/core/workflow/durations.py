"""Inclusive day arithmetic shared by leave requests and absence justifications."""

from datetime import date, timedelta

from hr_portal.core.exceptions import ValidationError


def inclusive_days(start: date, end: date) -> int:
    """Number of days from start to end, both endpoints counted."""
    return (end - start).days + 1


def validate_range(start: date, end: date) -> int:
    """Validate a start/end pair and return its inclusive length."""
    if end < start:
        raise ValidationError(
            "end_date must be on or after start_date",
            {"end_date": ["The end date must be a date after or equal to the start date."]},
        )
    return inclusive_days(start, end)


def ensure_positive_duration(duration: int) -> None:
    if duration < 1:
        raise ValidationError(
            "duration must be at least 1",
            {"duration": ["The duration must be at least 1 day."]},
        )


def display_end_date(absence_date: date, duration: int) -> date:
    # Stored durations below one day still display as a single-day span
    return absence_date + timedelta(days=max(1, duration) - 1)
