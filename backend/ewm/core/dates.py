"""
Date-time wire format helpers.

Timestamps travel as "yyyy-MM-dd HH:mm:ss" strings and are handled as naive
local times throughout both services.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BeforeValidator, PlainSerializer

from ewm.core.exceptions import ValidationError

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_datetime(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def from_wire(value):
    """Accept "yyyy-MM-dd HH:mm:ss" strings; anything else goes to pydantic."""
    if isinstance(value, str):
        try:
            return datetime.strptime(value, DATE_FORMAT)
        except ValueError:
            return value
    return value


def to_naive(value: datetime) -> datetime:
    """Convert tz-aware values to naive local time, drop microseconds."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(microsecond=0)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a query-string timestamp; None passes through."""
    if value is None or value == "":
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected format yyyy-MM-dd HH:mm:ss") from None


def now() -> datetime:
    return datetime.now().replace(microsecond=0)


def ensure_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and start > end:
        raise ValidationError("rangeStart must not be after rangeEnd")


# Pydantic field type: accepts ISO or "yyyy-MM-dd HH:mm:ss", emits the latter
DateTimeField = Annotated[
    datetime,
    BeforeValidator(from_wire),
    AfterValidator(to_naive),
    PlainSerializer(format_datetime, return_type=str),
]
