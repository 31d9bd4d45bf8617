"""Display formatting for dates, counts and growth rates."""

import logging
import math
from datetime import datetime
from typing import Optional, Union

from repo_radar.utils.datetime import parse_datetime, utc_now

logger = logging.getLogger(__name__)

INVALID_DATE = "Invalid date"

# (seconds per unit, unit name), checked from largest to smallest
_RELATIVE_UNITS = (
    (31536000, "year"),
    (2592000, "month"),
    (86400, "day"),
    (3600, "hour"),
    (60, "minute"),
)


def format_relative_time(
    value: Union[str, datetime, None], now: Optional[datetime] = None
) -> str:
    """
    Format a timestamp as "N <unit>s ago".

    Unparseable and future timestamps return "Invalid date".
    """
    moment = parse_datetime(value, default_now=False)
    now = now or utc_now()

    if moment is None:
        logger.warning("Invalid date provided to format_relative_time: %r", value)
        return INVALID_DATE
    if moment > now:
        logger.warning("Future date provided to format_relative_time: %s", moment.isoformat())
        return INVALID_DATE

    elapsed = int((now - moment).total_seconds())
    if elapsed < 60:
        return "just now"

    for seconds, unit in _RELATIVE_UNITS:
        if elapsed >= seconds:
            count = elapsed // seconds
            return f"{count} {unit}{'' if count == 1 else 's'} ago"
    return "just now"


def _compact(value: float, suffix: str) -> str:
    # Half-up rounding to one decimal
    rounded = math.floor(value * 10 + 0.5) / 10
    if rounded % 1 == 0:
        return f"{int(rounded)}{suffix}"
    return f"{rounded:.1f}{suffix}"


def format_compact_number(value: int) -> str:
    """1234 -> "1.2k", 1234567 -> "1.2M", 500 -> "500"."""
    if value < 1000:
        return str(value)
    if value < 1000000:
        return _compact(value / 1000, "k")
    return _compact(value / 1000000, "M")


def format_growth_rate(
    rate: Optional[float], decimals: int = 0, absolute_gain: Optional[int] = None
) -> str:
    """
    Format a decimal growth rate with a sign: 0.25 -> "+25%", -0.1 -> "-10%".

    Without a rate (no baseline) the absolute gain is shown instead, or "New".
    """
    if rate is None:
        if absolute_gain is not None:
            return f"+{absolute_gain} stars" if absolute_gain >= 0 else f"{absolute_gain} stars"
        return "New"

    formatted = f"{rate * 100:.{decimals}f}"
    if rate > 0:
        return f"+{formatted}%"
    if rate < 0:
        return f"{formatted}%"
    return "0%"


def format_short_date(value: Union[str, datetime, None]) -> str:
    """"2025-01-15T12:00:00Z" -> "Jan 15, 2025" (UTC)."""
    moment = parse_datetime(value, default_now=False)
    if moment is None:
        logger.warning("Invalid date provided to format_short_date: %r", value)
        return INVALID_DATE
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"
