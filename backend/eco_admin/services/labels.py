"""
Localization Tables

Display strings for enum tokens live in per-deployment JSON files
(eco_admin/locales/<locale>.json, or ECO_ADMIN_LOCALE_DIR). Component code
only asks for a label by group and token; swapping the deployment locale
never touches rendering logic.

Every lookup is total: a token missing from the table renders as itself.
"""
import json
import logging
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from .. import config

logger = logging.getLogger(__name__)

BUNDLED_LOCALE_DIR = Path(__file__).resolve().parent.parent / "locales"


class Labels:
    """Lookup tables for one locale."""

    def __init__(self, locale: str, tables: Dict[str, Any]):
        self.locale = locale
        self.tables = tables

    def label(self, group: str, token: Any) -> str:
        """Display string for token, or the raw token when the table has no entry."""
        if token is None:
            return ""
        key = str(token).lower() if isinstance(token, bool) else str(getattr(token, "value", token))
        table = self.tables.get(group) or {}
        if key not in table:
            logger.warning("No %s label for %r in locale %s", group, key, self.locale)
            return key
        return table[key]

    def group(self, group: str) -> Dict[str, str]:
        return dict(self.tables.get(group) or {})

    # -------------------------------------------------------------------------
    # Typed helpers
    # -------------------------------------------------------------------------

    def trash_type(self, value) -> str:
        return self.label("trash_type", value)

    def status(self, value) -> str:
        return self.label("status", value)

    def status_action(self, value) -> str:
        return self.label("status_action", value)

    def priority(self, value) -> str:
        return self.label("priority", value)

    def log_level(self, value) -> str:
        return self.label("log_level", value)

    def role(self, value) -> str:
        return self.label("role", value)

    def active(self, value: bool) -> str:
        return self.label("active", bool(value))

    def format_datetime(self, value: Optional[datetime], style: str = "datetime") -> Optional[str]:
        if value is None:
            return None
        fmt = (self.tables.get("formats") or {}).get(style, "%Y-%m-%d %H:%M")
        return value.strftime(fmt)


def _locale_path(locale: str, locale_dir: Optional[str]) -> Path:
    base = Path(locale_dir) if locale_dir else BUNDLED_LOCALE_DIR
    return base / f"{locale}.json"


@lru_cache(maxsize=8)
def load_labels(locale: Optional[str] = None, locale_dir: Optional[str] = None) -> Labels:
    """
    Load the label tables for a locale.

    Raises FileNotFoundError when the locale file does not exist; a deployment
    without its locale file is misconfigured.
    """
    locale = locale or config.LOCALE
    locale_dir = locale_dir or config.LOCALE_DIR
    path = _locale_path(locale, locale_dir)
    with path.open(encoding="utf-8") as fh:
        tables = json.load(fh)
    logger.info("Loaded locale %s from %s", locale, path)
    return Labels(locale, tables)
