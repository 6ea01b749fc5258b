from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from .dates import parse_date


@dataclass(frozen=True)
class EmployeeWeeklyStat:
    name: str
    count: int
    clients_touched: Tuple[str, ...]    # distinct, first-seen order


def start_of_week(now: Optional[datetime] = None) -> datetime:
    """Most recent Monday 00:00 local time (a Sunday belongs to the week that began 6 days earlier)."""
    if now is None:
        now = datetime.now()
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def aggregate_weekly_ranking(
    rows: Iterable,
    *,
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> Tuple[EmployeeWeeklyStat, ...]:
    """
    Rank employees by confirmed entries since this week's Monday.

    Only `employee_name`, `client_name` and `confirmed_date` are read from each
    row. Ties keep the order in which employees were first seen.
    """
    window_start = start_of_week(now)
    counts: Dict[str, int] = {}
    clients: Dict[str, Dict[str, None]] = {}

    for row in rows:
        name = row.employee_name
        if not name or not row.confirmed_date:
            continue
        confirmed = parse_date(row.confirmed_date)
        if confirmed is None or confirmed < window_start:
            continue
        counts[name] = counts.get(name, 0) + 1
        touched = clients.setdefault(name, {})
        if row.client_name:
            touched.setdefault(row.client_name, None)

    ranked: List[EmployeeWeeklyStat] = [
        EmployeeWeeklyStat(name=name, count=count, clients_touched=tuple(clients[name]))
        for name, count in counts.items()
    ]
    # sorted() is stable, so equal counts stay in first-seen order
    ranked = sorted(ranked, key=lambda s: s.count, reverse=True)
    if limit is not None:
        ranked = ranked[:max(0, limit)]
    return tuple(ranked)
