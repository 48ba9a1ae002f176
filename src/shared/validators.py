"""Validation utilities for analytics request input."""

from typing import Any, Dict, List, Optional
from datetime import date, datetime, time, timedelta

from .exceptions import ValidationError


def validate_datetime(value: Optional[str], field: str, end_of_day: bool = False) -> datetime:
    """
    Validate an ISO 8601 date or datetime string.

    Args:
        value: String to validate (YYYY-MM-DD or full ISO datetime)
        field: Parameter name, used in error messages
        end_of_day: Expand a date-only value to the last instant of that day

    Returns:
        Parsed datetime

    Raises:
        ValidationError: If the value is missing or malformed
    """
    if not value:
        raise ValidationError(f"{field} is required")

    value = value.strip()

    if len(value) == 10:
        try:
            day = date.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"Invalid {field}. Use YYYY-MM-DD or ISO 8601 datetime")
        if end_of_day:
            return datetime.combine(day, time.min) + timedelta(days=1) - timedelta(microseconds=1)
        return datetime.combine(day, time.min)

    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}. Use YYYY-MM-DD or ISO 8601 datetime")


def validate_date_range(start: datetime, end: datetime) -> None:
    """
    Validate that a requested range is not inverted.

    Raises:
        ValidationError: If start is after end
    """
    if start > end:
        raise ValidationError("Start date must be on or before end date")


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Validate that required fields are present in data.

    Args:
        data: Data dictionary to validate
        required_fields: List of required field names

    Raises:
        ValidationError: If any required field is missing
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None]

    if missing_fields:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing_fields)}"
        )


def validate_first_weekday(value: Any) -> int:
    """
    Validate a first-day-of-week setting (0 = Monday ... 6 = Sunday).

    Raises:
        ValidationError: If the value is not an integer in range
    """
    try:
        weekday = int(value)
    except (ValueError, TypeError):
        raise ValidationError("First weekday must be an integer")

    if weekday < 0 or weekday > 6:
        raise ValidationError("First weekday must be between 0 (Monday) and 6 (Sunday)")

    return weekday
