"""
Form validation helpers.

Validation runs before any state is touched; a failure raises
FormValidationError with a message meant for the person filling the form.
"""

from datetime import datetime
from typing import Dict, Optional, Union

from wardshift.core.config import SchedulingRules
from wardshift.core.exceptions import FormValidationError


def is_blank(value: Optional[Union[str, int]]) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(fields: Dict[str, Optional[Union[str, int]]], message: Optional[str] = None) -> None:
    """
    Raise if any of the labelled values is blank.

    Args:
        fields: Mapping of human-readable label to submitted value
        message: Override for the default "Please fill in required fields" text
    """
    missing = [label for label, value in fields.items() if is_blank(value)]
    if missing:
        raise FormValidationError(
            message or f"Please fill in required fields: {', '.join(missing)}"
        )


def parse_birth_year(value: Optional[Union[str, int]], current_year: int) -> int:
    """Parse a birth year and check it lies in [1900, current_year]."""
    if isinstance(value, bool):
        raise FormValidationError("Birth year must be a number")
    try:
        year = int(str(value).strip())
    except (TypeError, ValueError):
        raise FormValidationError("Birth year must be a number")

    if year < SchedulingRules.MIN_BIRTH_YEAR or year > current_year:
        raise FormValidationError(
            f"Birth year must be between {SchedulingRules.MIN_BIRTH_YEAR} and {current_year}"
        )
    return year


def clean(value: Optional[str]) -> str:
    return (value or "").strip()


def to_local_time(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
