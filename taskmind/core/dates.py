"""Calendar-date helpers.

All calendar-day comparisons happen in the single timezone configured by
``settings.timezone``; timestamps are stored as ISO strings in UTC.
"""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from taskmind.core.config import settings
from taskmind.core.errors import ValidationFailureError


DATE_FORMAT = "%Y-%m-%d"


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO timestamp; naive values are taken to be UTC."""
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_iso(value: datetime) -> str:
    return parse_timestamp(value).astimezone(UTC).isoformat().replace("+00:00", "Z")


def local_date(value: str | datetime) -> date:
    """Calendar date of a timestamp in the configured timezone."""
    return parse_timestamp(value).astimezone(get_timezone()).date()


def date_string(value: str | datetime) -> str:
    """`YYYY-MM-DD` of a timestamp in the configured timezone."""
    return local_date(value).strftime(DATE_FORMAT)


def today_string(now: datetime | None = None) -> str:
    return date_string(now or utc_now())


def previous_day(day: str) -> str:
    """The calendar day before a `YYYY-MM-DD` string."""
    return (parse_date(day) - timedelta(days=1)).strftime(DATE_FORMAT)


def parse_date(day: str) -> date:
    """Parse a `YYYY-MM-DD` string.

    Raises:
        ValidationFailureError: If the string is not a valid calendar date
    """
    msg = f"Invalid date '{day}', expected YYYY-MM-DD"
    try:
        parsed = datetime.strptime(day, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise ValidationFailureError(msg) from e
    # strptime tolerates unpadded months and days
    if parsed.strftime(DATE_FORMAT) != day:
        raise ValidationFailureError(msg)
    return parsed
