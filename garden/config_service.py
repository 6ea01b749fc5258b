import json
import os
import logging
from typing import List, Optional

from .exceptions import ConfigurationError
from .rows import DEFAULT_RANGES, UNKNOWN_CLIENT


# Configure logging
logger = logging.getLogger(__name__)


class ConfigManager:
    def __init__(self, config_path="config.json"):
        self._config_path = config_path
        if os.path.isabs(config_path):
            self._resolved_path = config_path
        else:
            self._resolved_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), self._config_path)
        self._last_load_error = None
        self.config = self._load_config()

    @property
    def last_load_error(self):
        return self._last_load_error

    def _load_config(self):
        """Load configuration from the file or initialize an empty config."""
        path = self._resolved_path
        if os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                self._last_load_error = e
                logger.error(f"Invalid JSON in {path}. Loading empty configuration.")
        return {}

    def get(self, *keys, default=None):
        """
        Access nested values.
        Supports both:
          get("a", "b", "c")  and  get("a.b.c")
        """
        if len(keys) == 1 and isinstance(keys[0], str) and "." in keys[0]:
            keys = keys[0].split(".")

        node = self.config
        for k in keys:
            if isinstance(node, dict) and k in node:
                node = node[k]
            else:
                return default
        return node


class ContactLogSettings:
    """Where the contact log lives and how to read it."""

    def __init__(self, spreadsheet_id: str, ranges: List[str], unknown_client_label: str = UNKNOWN_CLIENT,
                 ranking_limit: Optional[int] = None):
        self.spreadsheet_id = spreadsheet_id
        self.ranges = ranges
        self.unknown_client_label = unknown_client_label
        self.ranking_limit = ranking_limit

    @classmethod
    def from_config(cls, config: dict) -> "ContactLogSettings":
        """
        Build settings from a loaded config dict (app.config or ConfigManager().config).

        GARDEN_SPREADSHEET_ID in the environment wins over the file.

        :raises ConfigurationError: if no spreadsheet id is configured or the ranges are incomplete.
        """
        sheet_cfg = ((config.get("spreadsheets") or {}).get("contact_log") or {})
        spreadsheet_id = os.getenv("GARDEN_SPREADSHEET_ID") or sheet_cfg.get("id")
        if not spreadsheet_id:
            raise ConfigurationError(
                "Contact log spreadsheet id missing. Set spreadsheets.contact_log.id in config.json "
                "or GARDEN_SPREADSHEET_ID."
            )

        ranges = list(sheet_cfg.get("ranges") or DEFAULT_RANGES)
        if len(ranges) != len(DEFAULT_RANGES):
            raise ConfigurationError(
                f"spreadsheets.contact_log.ranges needs {len(DEFAULT_RANGES)} entries "
                f"(name, client, 3 contact dates, confirmed date, content), got {len(ranges)}"
            )
        tab = sheet_cfg.get("tab")
        if tab:
            ranges = [r if "!" in r else f"'{tab}'!{r}" for r in ranges]

        limit = (config.get("ranking") or {}).get("limit")
        return cls(
            spreadsheet_id=spreadsheet_id,
            ranges=ranges,
            unknown_client_label=config.get("unknown_client_label") or UNKNOWN_CLIENT,
            ranking_limit=int(limit) if limit else None,
        )
