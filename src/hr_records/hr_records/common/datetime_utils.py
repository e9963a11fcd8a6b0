from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Longer ISO timestamps (``2024-01-05T00:00:00.000Z``) are cut to the date part.
    """
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def parse_hhmm(value: str) -> int:
    """Parse a 24-hour ``HH:MM`` string into minutes since midnight."""
    parsed = datetime.strptime(value.strip(), "%H:%M")
    return parsed.hour * 60 + parsed.minute


def month_range(value: str) -> tuple[date, date]:
    """``YYYY-MM`` -> [first day of month, first day of next month)."""
    start = datetime.strptime(value.strip(), "%Y-%m").date()
    if start.month == 12:
        end = date(start.year + 1, 1, 1)
    else:
        end = date(start.year, start.month + 1, 1)
    return start, end


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()
