from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .dates import resolve_latest
from .exceptions import RowSourceError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "不明な作物"

# Column order of the contact log as read by fetch_contact_rows():
# D name, E client, I/J/K contact dates, N confirmed date, O content.
DEFAULT_RANGES = ("D2:D", "E2:E", "I2:I", "J2:J", "K2:K", "N2:N", "O2:O")


@dataclass(frozen=True)
class ContactRow:
    employee_name: str
    client_name: str
    contact_dates: Tuple[str, ...]      # up to three "last touched" columns, raw
    confirmed_date: str = ""            # raw, may be blank or junk
    content: str = ""

    @property
    def contact_date(self) -> str:
        """Latest of the contact date columns, "" if none parse."""
        return resolve_latest(self.contact_dates)

    @property
    def is_valid(self) -> bool:
        return bool(self.employee_name and self.content and self.contact_date)

    def client_label(self, unknown_label: str = UNKNOWN_CLIENT) -> str:
        return self.client_name or unknown_label


def _cell(column: Sequence[Any], i: int) -> str:
    """values.batchGet returns each row of a single-column range as [value] (or [] / missing)."""
    if i >= len(column):
        return ""
    value = column[i]
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return "" if value is None else str(value).strip()


def rows_from_columns(columns: Sequence[Sequence[Any]]) -> Tuple[ContactRow, ...]:
    """
    Zip the seven contact-log columns into rows.

    Columns may be ragged (the Sheets API trims trailing empty cells), so every
    column is padded out to the longest one.
    """
    if len(columns) < len(DEFAULT_RANGES):
        raise RowSourceError(
            f"Expected {len(DEFAULT_RANGES)} columns (name, client, 3 dates, confirmed, content), "
            f"got {len(columns)}"
        )
    names, clients, date_i, date_j, date_k, confirmed, contents = columns[:7]
    max_rows = max((len(c) for c in columns[:7]), default=0)

    rows: List[ContactRow] = []
    for i in range(max_rows):
        rows.append(ContactRow(
            employee_name=_cell(names, i),
            client_name=_cell(clients, i),
            contact_dates=(_cell(date_i, i), _cell(date_j, i), _cell(date_k, i)),
            confirmed_date=_cell(confirmed, i),
            content=_cell(contents, i),
        ))
    return tuple(rows)


def _first(record: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in record and record[k] is not None:
            return record[k]
    return ""


def row_from_record(record: Dict[str, Any]) -> ContactRow:
    dates = _first(record, "contactDates", "contact_dates", "dates", "date")
    if not isinstance(dates, (list, tuple)):
        # a lone value (string, or a number from a hand-written record) is one candidate
        dates = [dates] if dates not in ("", None) else []
    return ContactRow(
        employee_name=str(_first(record, "employeeName", "employee_name", "name")).strip(),
        client_name=str(_first(record, "clientName", "client_name", "client")).strip(),
        contact_dates=tuple(str(d).strip() for d in dates[:3] if d is not None),
        confirmed_date=str(_first(record, "confirmedDate", "confirmed_date", "confirmed")).strip(),
        content=str(_first(record, "content")).strip(),
    )


def rows_from_records(records: Iterable[Dict[str, Any]]) -> Tuple[ContactRow, ...]:
    return tuple(row_from_record(r) for r in records)


def employee_names(rows: Iterable[ContactRow]) -> List[str]:
    """Distinct employee names, first-seen order, from rows with a name, content and confirmed date."""
    seen: Dict[str, None] = {}
    for row in rows:
        if row.employee_name and row.content and row.confirmed_date:
            seen.setdefault(row.employee_name, None)
    return list(seen)


def fetch_contact_rows(sheets_service, spreadsheet_id: str, ranges: Sequence[str] = DEFAULT_RANGES) -> Tuple[ContactRow, ...]:
    """
    Read the contact log through a GoogleSheetsService.

    Any failure of the row source is logged and reported as "no rows", which
    the aggregators handle as empty input.
    """
    try:
        columns = sheets_service.batch_get_cached(spreadsheet_id, list(ranges))
        return rows_from_columns(columns)
    except Exception as e:
        logger.error(f"Error fetching contact rows from {spreadsheet_id}: {e}")
        return ()
