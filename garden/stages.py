from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from .dates import parse_date

FRESH = "fresh"
WANING = "waning"
WITHERING = "withering"
UNKNOWN = "unknown"

# days since last contact
WANING_AFTER_DAYS = 14
WITHERING_AFTER_DAYS = 28


def classify(count: int) -> int:
    """Growth stage 1-4 for a cumulative contact count."""
    if count <= 2:
        return 1
    if count <= 5:
        return 2
    if count <= 9:
        return 3
    return 4


def classify_freshness(date_str: str, *, now: Optional[datetime] = None) -> str:
    """
    How stale a client's latest contact is.

    Args:
        date_str (str): raw latest contact date from the sheet.
        now (datetime): reference moment, defaults to the local time. A plain
            date is taken as midnight.

    Returns:
        str: "fresh", "waning" (14+ whole days elapsed), "withering" (28+) or
        "unknown" when the date is missing or unreadable.
    """
    parsed = parse_date(date_str)
    if parsed is None:
        return UNKNOWN
    if now is None:
        now = datetime.now()
    elif not isinstance(now, datetime):
        now = datetime.combine(now, time.min)

    days = int((now - parsed).total_seconds() // 86400)
    if days >= WITHERING_AFTER_DAYS:
        return WITHERING
    if days >= WANING_AFTER_DAYS:
        return WANING
    return FRESH
