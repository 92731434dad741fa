from datetime import datetime, timezone
from typing import Any, Optional, Union

Timestamp = Union[str, datetime]


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive datetimes are taken to be UTC already"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: Optional[Timestamp]) -> Any:
    """RFC 3339 string for Square; anything but a datetime is passed through"""
    if not isinstance(value, datetime):
        return value
    return as_utc(value).replace(tzinfo=None).isoformat() + "Z"
