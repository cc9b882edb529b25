"""Date helpers for chapter release times.

Sites print dates in local formats; adapters store ISO dates (YYYY-MM-DD).
"""

from __future__ import annotations

import datetime
from typing import Optional

# genitive month names as printed on Russian sites ("5 марта")
RUSSIAN_MONTHS = {
    "января": 1,
    "февраля": 2,
    "марта": 3,
    "апреля": 4,
    "мая": 5,
    "июня": 6,
    "июля": 7,
    "августа": 8,
    "сентября": 9,
    "октября": 10,
    "ноября": 11,
    "декабря": 12,
}


def parse_russian_date(
    text: Optional[str], today: Optional[datetime.date] = None
) -> Optional[str]:
    """Parse "DD.MM.YYYY" or "D <month>" into an ISO date.

    The second form has no year, the current one is assumed. Text that does
    not look like a date is returned unchanged; empty text gives None.
    """
    text = (text or "").strip()
    if not text:
        return None

    if "." in text:
        parts = text.split(".")
        if len(parts) == 3 and all(p.strip().isdigit() for p in parts):
            day, month, year = (int(p) for p in parts)
            try:
                return datetime.date(year, month, day).isoformat()
            except ValueError:
                return text
    elif " " in text:
        day, month = text.split(" ")[:2]
        number = RUSSIAN_MONTHS.get(month.lower())
        if day.isdigit() and number:
            year = (today or datetime.date.today()).year
            try:
                return datetime.date(year, number, int(day)).isoformat()
            except ValueError:
                return text
    return text


def format_iso_date(value: Optional[str]) -> Optional[str]:
    """Cut an ISO timestamp ("2024-05-01T10:00:00Z") down to its date."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None
