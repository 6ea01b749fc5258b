from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping

from .dates import is_more_recent
from .rows import UNKNOWN_CLIENT, ContactRow
from .stages import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientStat:
    count: int
    latest_contact_date: str = ""
    latest_confirmed_date: str = ""

    @property
    def stage(self) -> int:
        return classify(self.count)


@dataclass(frozen=True)
class GardenSummary:
    clients: Mapping[str, ClientStat] = field(default_factory=lambda: MappingProxyType({}))
    latest_contact_date: str = ""
    latest_confirmed_date: str = ""

    @property
    def total_contributions(self) -> int:
        return sum(stat.count for stat in self.clients.values())


@dataclass
class _ClientTally:
    count: int = 0
    latest_contact_date: str = ""
    latest_confirmed_date: str = ""


def aggregate_client_growth(
    rows: Iterable[ContactRow],
    employee_name: str,
    *,
    unknown_label: str = UNKNOWN_CLIENT,
) -> GardenSummary:
    """
    Fold one employee's contact rows into per-client garden stats.

    Rows for other employees are ignored (exact, case-sensitive match), so the
    caller may pass the whole sheet or an already-filtered slice. Rows without
    content or without any readable contact date are dropped silently.

    :param rows: contact rows in sheet order.
    :param employee_name: whose garden to build.
    :param unknown_label: client name used for rows with a blank client cell.
    :return: GardenSummary with a read-only client mapping and the overall
        latest contact / confirmed dates ("" when none).
    """
    tallies: Dict[str, _ClientTally] = {}
    overall_contact = ""
    overall_confirmed = ""
    skipped = 0

    for row in rows:
        if row.employee_name != employee_name:
            continue
        if not row.is_valid:
            skipped += 1
            continue
        contact_date = row.contact_date

        tally = tallies.setdefault(row.client_label(unknown_label), _ClientTally())
        tally.count += 1

        if is_more_recent(contact_date, tally.latest_contact_date):
            tally.latest_contact_date = contact_date
        if row.confirmed_date and is_more_recent(row.confirmed_date, tally.latest_confirmed_date):
            tally.latest_confirmed_date = row.confirmed_date

        if is_more_recent(contact_date, overall_contact):
            overall_contact = contact_date
        if row.confirmed_date and is_more_recent(row.confirmed_date, overall_confirmed):
            overall_confirmed = row.confirmed_date

    if skipped:
        logger.debug("Skipped %d incomplete rows for %s", skipped, employee_name)

    clients = {
        name: ClientStat(t.count, t.latest_contact_date, t.latest_confirmed_date)
        for name, t in tallies.items()
    }
    return GardenSummary(
        clients=MappingProxyType(clients),
        latest_contact_date=overall_contact,
        latest_confirmed_date=overall_confirmed,
    )
