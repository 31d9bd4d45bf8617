import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(dt_value, default_now: bool = True) -> datetime | None:
    """
    Parse a datetime from a GitHub API response to an aware UTC datetime.

    Handles:
    - ISO string with timezone (e.g., "2024-01-01T00:00:00Z")
    - datetime object with timezone -> converted to UTC
    - naive datetime object -> assumed UTC
    - None or invalid -> current UTC time (if default_now=True) or None

    Args:
        dt_value: The datetime value to parse (str, datetime, or None)
        default_now: If True, return current UTC time for None/invalid values.
                     If False, return None for None/invalid values.
    """
    if dt_value is None:
        return utc_now() if default_now else None

    if isinstance(dt_value, str):
        try:
            dt = datetime.fromisoformat(dt_value.replace("Z", "+00:00"))
        except (ValueError, AttributeError):
            logger.warning(f"Failed to parse datetime string: {dt_value}")
            return utc_now() if default_now else None
        return ensure_utc(dt)

    if isinstance(dt_value, datetime):
        return ensure_utc(dt_value)

    logger.warning(f"Unexpected datetime type: {type(dt_value)}")
    return utc_now() if default_now else None


def ensure_utc(dt_value: datetime | None) -> datetime | None:
    """
    Ensure a datetime is timezone-aware UTC.

    Naive values (older documents, test fixtures) are assumed to already be UTC.
    """
    if dt_value is None:
        return None

    if isinstance(dt_value, datetime):
        if dt_value.tzinfo is None:
            return dt_value.replace(tzinfo=timezone.utc)
        return dt_value.astimezone(timezone.utc)

    return None


def start_of_utc_day(dt_value: datetime) -> datetime:
    dt_value = ensure_utc(dt_value)
    return dt_value.replace(hour=0, minute=0, second=0, microsecond=0)
