import json
import logging
import time
import os
import gspread
from gspread.exceptions import APIError
from google.oauth2.service_account import Credentials
from pathlib import Path

logger = logging.getLogger(__name__)


class GoogleSheetsService:
    """
    Read-only access to the contact log spreadsheet.
    Uses the service account JSON from GSHEETS_CREDENTIALS / GOOGLE_APPLICATION_CREDENTIALS
    or a credentials/ folder next to the project.
    """

    @staticmethod
    def _get_service_account_path():
        env = os.environ.get("GSHEETS_CREDENTIALS") or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        if env and os.path.isfile(env):
            return env

        candidates = [
            Path(__file__).resolve().parents[1] / "credentials" / "service_account.json",
            Path.cwd() / "credentials" / "service_account.json",
            Path.cwd() / "service_account.json",
        ]
        for p in candidates:
            if p.is_file():
                return str(p)

        raise FileNotFoundError(
            "service_account.json not found. Set GSHEETS_CREDENTIALS or GOOGLE_APPLICATION_CREDENTIALS.")

    @staticmethod
    def _authenticate_google_sheets(json_file: str) -> Credentials:
        """
        Authenticate with the Google Sheets API (read-only scope).

        :param json_file: JSON file containing service account credentials.
        :type json_file: str
        :return: Credentials object for use in authorization.
        :rtype: google.oauth2.service_account.Credentials
        """
        with open(json_file) as f:
            creds = json.load(f)
        scope = [
            "https://www.googleapis.com/auth/spreadsheets.readonly"
        ]
        return Credentials.from_service_account_info(creds, scopes=scope)

    def __init__(self, json_file: str = None, *, cache_ttl: float = 15, spreadsheet_ttl: float = 60):
        """
        :param json_file: Path to the service account JSON; discovered if omitted.
        :param cache_ttl: seconds a fetched range is reused.
        :param spreadsheet_ttl: seconds an opened spreadsheet handle is reused.
        """
        if json_file is None:
            json_file = self._get_service_account_path()
        creds = self._authenticate_google_sheets(json_file)
        self._client = gspread.authorize(creds)

        self._cache: dict[tuple[str, str], tuple[float, list[list[str]]]] = {}
        self._cache_ttl = cache_ttl
        self._ss_cache: dict[str, tuple[float, gspread.Spreadsheet]] = {}
        self._ss_ttl = spreadsheet_ttl

    def _open(self, spreadsheet_id: str) -> gspread.Spreadsheet:
        now = time.time()
        hit = self._ss_cache.get(spreadsheet_id)
        if hit and (now - hit[0] < self._ss_ttl):
            return hit[1]
        sh = self._with_backoff(lambda: self._client.open_by_key(spreadsheet_id))
        self._ss_cache[spreadsheet_id] = (now, sh)
        return sh

    def batch_get(self, spreadsheet_id: str, ranges: list[str]) -> list[list[list[str]]]:
        sh = self._open(spreadsheet_id)
        resp = self._with_backoff(lambda: sh.values_batch_get(ranges))
        return [vr.get("values", []) for vr in resp.get("valueRanges", [])]

    def batch_get_cached(self, spreadsheet_id: str, ranges: list[str]):
        now = time.time()
        hits, misses = {}, []
        for r in ranges:
            k = (spreadsheet_id, r)
            if k in self._cache and now - self._cache[k][0] < self._cache_ttl:
                hits[r] = self._cache[k][1]
            else:
                misses.append(r)
        if misses:
            fetched = self.batch_get(spreadsheet_id, misses)
            for r, vals in zip(misses, fetched, strict=False):
                self._cache[(spreadsheet_id, r)] = (now, vals)
                hits[r] = vals
        # the API omits trailing ranges that have no values at all
        return [hits.get(r, []) for r in ranges]

    @staticmethod
    def _with_backoff(fn, *, tries: int = 5, base: float = 0.6, factor: float = 2.0):
        """Generic retry for Sheets 429 rate limits."""
        delay = base
        for attempt in range(tries):
            try:
                return fn()
            except APIError as e:
                code = getattr(getattr(e, "response", None), "status_code", None)
                if code == 429 or "quota" in str(e).lower() or "rate" in str(e).lower():
                    if attempt == tries - 1:
                        raise
                    logger.warning(f"Sheets rate limited, retrying in {delay:.1f}s")
                    time.sleep(delay)
                    delay *= factor
                    continue
                raise
