"""JSON-ready dicts shared by the Flask API and the CLI."""
from __future__ import annotations

from typing import Dict, List, Optional

from .growth import aggregate_client_growth
from .ranking import aggregate_weekly_ranking
from .rows import UNKNOWN_CLIENT
from .stages import classify_freshness


def growth_payload(rows, employee: str, unknown_label: str = UNKNOWN_CLIENT) -> Dict:
    summary = aggregate_client_growth(rows, employee, unknown_label=unknown_label)
    return {
        "employee": employee,
        "clients": {
            name: {
                "count": stat.count,
                "latestContactDate": stat.latest_contact_date,
                "latestConfirmedDate": stat.latest_confirmed_date,
                "stage": stat.stage,
                "freshness": classify_freshness(stat.latest_contact_date),
            }
            for name, stat in summary.clients.items()
        },
        "latestContactDate": summary.latest_contact_date,
        "latestConfirmedDate": summary.latest_confirmed_date,
        "totalContributions": summary.total_contributions,
    }


def ranking_payload(rows, limit: Optional[int] = None) -> List[Dict]:
    return [
        {"name": stat.name, "count": stat.count, "clients": list(stat.clients_touched)}
        for stat in aggregate_weekly_ranking(rows, limit=limit)
    ]
