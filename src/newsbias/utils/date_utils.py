"""Date and time utilities."""

import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

_DATE_PREFIX = re.compile(r"^\s*(published|updated|last modified|posted)\s*(on|at)?\s*:?\s*", re.IGNORECASE)


def parse_date(date_string: Optional[str]) -> Optional[datetime]:
    """Parse date string to datetime object.

    Handles various date formats commonly found in news feeds and article
    pages, including "Published: ..." / "Updated: ..." prefixes.

    Args:
        date_string: Date string to parse

    Returns:
        Timezone-aware datetime, or None if parsing fails
    """
    if not date_string:
        return None

    cleaned = _DATE_PREFIX.sub("", date_string).strip()
    # Indian publishers append "IST"; dateutil does not know that zone name
    cleaned = re.sub(r"\bIST\b", "+05:30", cleaned)
    if not cleaned:
        return None

    try:
        dt = date_parser.parse(cleaned)
    except (ValueError, TypeError, OverflowError):
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt


def hours_since(dt: datetime, now: Optional[datetime] = None) -> float:
    """Hours elapsed between dt and now (negative for future dates)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    now = now or now_utc()
    return (now - dt).total_seconds() / 3600


def now_utc() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current UTC datetime (timezone-aware)
    """
    return datetime.now(timezone.utc)
