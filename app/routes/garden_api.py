from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from garden.config_service import ContactLogSettings
from garden.exceptions import ConfigurationError
from garden.google_sheets_service import GoogleSheetsService
from garden.payloads import growth_payload, ranking_payload
from garden.rows import employee_names, fetch_contact_rows

logger = logging.getLogger(__name__)

garden_api_bp = Blueprint("garden_api", __name__, url_prefix="/api")


def _sheets_service() -> GoogleSheetsService:
    svc = current_app.extensions.get("sheets_service")
    if svc is None:
        svc = GoogleSheetsService(cache_ttl=current_app.config.get("SHEETS_CACHE_TTL", 15))
        current_app.extensions["sheets_service"] = svc
    return svc


def _load_rows():
    settings = ContactLogSettings.from_config(current_app.config)
    rows = fetch_contact_rows(_sheets_service(), settings.spreadsheet_id, settings.ranges)
    return settings, rows


def _error(what: str, exc: Exception):
    logger.error(f"Error fetching {what}: {exc}")
    details = exc.message if isinstance(exc, ConfigurationError) else str(exc)
    return jsonify({"error": f"Failed to fetch {what}", "details": details}), 500


@garden_api_bp.route("/sheets", methods=["GET"])
def sheets():
    """Flat contact log (rows with a name, confirmed date and content) plus the employee directory."""
    try:
        settings, rows = _load_rows()
    except Exception as exc:
        return _error("sheet data", exc)

    data = [
        {
            "name": row.employee_name,
            "client": row.client_label(settings.unknown_client_label),
            "date": row.confirmed_date,
            "content": row.content,
        }
        for row in rows
        if row.employee_name and row.confirmed_date and row.content
    ]
    return jsonify({"data": data, "employees": employee_names(rows)})


@garden_api_bp.route("/employee/<path:employee_name>", methods=["GET"])
def employee(employee_name: str):
    """One employee's garden: per-client growth and the overall latest dates."""
    try:
        settings, rows = _load_rows()
    except Exception as exc:
        return _error("employee data", exc)

    return jsonify({"data": growth_payload(rows, employee_name, settings.unknown_client_label)})


@garden_api_bp.route("/ranking", methods=["GET"])
def ranking():
    """This week's leaderboard; ?limit=N overrides ranking.limit from config (0 = everyone)."""
    try:
        settings, rows = _load_rows()
    except Exception as exc:
        return _error("ranking data", exc)

    limit = request.args.get("limit", type=int)
    if limit is None:
        limit = settings.ranking_limit
    elif limit <= 0:
        limit = None

    return jsonify({"data": ranking_payload(rows, limit)})
