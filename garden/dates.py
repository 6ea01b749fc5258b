from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

# Sheet cells arrive as 'YYYY/MM/DD' or 'YYYY-MM-DD', sometimes with a time.
# Everything is parsed as a naive local datetime; no timezone conversion is
# applied, so stats can skew by a day between hosts in different zones.
# A trailing "Z" is dropped and the time read as local, not shifted from UTC.
_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
)


def normalise(raw: str) -> str:
    return (raw or "").strip().replace("/", "-")


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse a raw sheet date string.

    Returns None for blank or unrecognised input rather than raising, so a
    malformed cell is treated exactly like an empty one.
    """
    if not raw or not isinstance(raw, str):
        return None
    s = normalise(raw)
    if s[-1:] in ("Z", "z"):
        s = s[:-1]
    if not s:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def is_more_recent(candidate: str, current: str) -> bool:
    """
    True if `candidate` should replace `current` as the latest date.

    An unparseable candidate never wins. A parseable candidate always beats an
    empty/unparseable current value, otherwise it must be strictly later.
    """
    cand = parse_date(candidate)
    if cand is None:
        return False
    cur = parse_date(current)
    return cur is None or cand > cur


def resolve_latest(candidates: Iterable[str]) -> str:
    """
    Return the original string of the chronologically latest candidate.

    Candidates that don't parse are ignored. Equal instants written
    differently ('2025/01/01' vs '2025-01-01') are settled on the raw string
    so the result doesn't depend on column order. Returns "" when nothing
    parses.
    """
    latest: Optional[datetime] = None
    latest_raw = ""
    for raw in candidates:
        parsed = parse_date(raw)
        if parsed is None:
            continue
        if latest is None or (parsed, raw) > (latest, latest_raw):
            latest = parsed
            latest_raw = raw
    return latest_raw
