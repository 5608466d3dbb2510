"""Date keyword resolution.

Date literals in filters stay unresolved in the expression tree and are turned
into calendar dates only when a comparison runs, relative to the day the
evaluation happens.

Supported forms (case-insensitive):
- today, tomorrow, yesterday
- today+3, tomorrow-1, yesterday+2d (offset in days)
- monday ... sunday (the next such day strictly after today)
- 2024-12-25 (ISO calendar date)
"""

from __future__ import annotations

import re
from datetime import date, timedelta

_BASE_OFFSETS = {
    "today": 0,
    "tomorrow": 1,
    "yesterday": -1,
}

_WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_RELATIVE_RE = re.compile(r"^(today|tomorrow|yesterday)([+-])(\d{1,5})d?$")
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_iso(raw: str) -> date | None:
    if not _ISO_RE.match(raw):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def resolve_date_keyword(raw: str, today: date) -> date | None:
    """Resolve a date keyword relative to `today`.

    Returns None if `raw` is not a recognised date form.
    """
    keyword = raw.strip().lower()

    if keyword in _BASE_OFFSETS:
        return today + timedelta(days=_BASE_OFFSETS[keyword])

    match = _RELATIVE_RE.match(keyword)
    if match:
        base, sign, amount = match.groups()
        days = int(amount) if sign == "+" else -int(amount)
        return today + timedelta(days=_BASE_OFFSETS[base] + days)

    if keyword in _WEEKDAYS:
        delta = (_WEEKDAYS.index(keyword) - today.weekday()) % 7
        return today + timedelta(days=delta or 7)

    return _parse_iso(keyword)


def is_date_keyword(raw: str) -> bool:
    """True if `raw` resolves to a date on any day."""
    return resolve_date_keyword(raw, date(2000, 1, 1)) is not None
