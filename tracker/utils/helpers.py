"""Shared utility functions used across services and blueprints.

to_bool:       one parser for the loosely-typed boolean cells (TRUE / 'false' / '')
parse_date:    returns None on bad input, accepts 'YYYY-MM-DD' and datetime strings
now_iso:       UTC timestamp in the format stored in createdAt / updatedAt columns
today_kst:     calendar date in Korea Standard Time
paginate:      page/pageSize slicing with the paging metadata the UI expects
"""
import json
import logging
import math
from datetime import date, datetime, timedelta, timezone

logger = logging.getLogger(__name__)

KST = timezone(timedelta(hours=9))

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "n"})


def to_bool(value, default=False):
    """Normalise a boolean cell value.

    Sheets hand back 'TRUE' / 'FALSE' for values written as booleans, but
    rows edited by hand or written by older code may hold 'true', 'false',
    '' or nothing at all.  Empty values resolve to ``default``; anything
    unrecognised also resolves to ``default`` rather than raising.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if not text:
        return default
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return default


def to_int(value, default=0):
    """Parse an integer cell ('3', '3.0', '') leniently."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default


def parse_date(value):
    """Parse a date string to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD
    - YYYY-MM-DDTHH:MM:SS[.fff][Z]  (ISO datetime → .date())
    - 'YYYY-MM-DD HH:MM'            (meeting minutes store date + time)
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except (ValueError, TypeError):
        return None


def now_iso():
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_kst():
    return datetime.now(KST)


def today_kst():
    """Today's calendar date in KST; used for IDs, progress and week bucketing."""
    return now_kst().date()


def split_csv(value):
    """Split a comma-joined cell ('a, b,c') into trimmed, non-empty parts."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def parse_json(value, default):
    """Decode a JSON cell, returning ``default`` when empty or malformed."""
    if not value:
        return default
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed JSON cell: %.40s", value)
        return default


def paginate(items, page=1, page_size=20):
    """Slice ``items`` for one page.

    Returns a dict with ``items``, ``total``, ``page``, ``pageSize``,
    ``totalPages``, ``hasNext`` and ``hasPrev``.  ``page`` and ``page_size``
    are clamped to at least 1.
    """
    page = max(1, to_int(page, 1))
    page_size = max(1, to_int(page_size, 20))
    total = len(items)
    total_pages = math.ceil(total / page_size) if total else 0
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "total": total,
        "page": page,
        "pageSize": page_size,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def require_fields(data, *fields):
    """Return the names of ``fields`` that are missing or empty in ``data``."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()) or value == []:
            missing.append(field)
    return missing
