import calendar
import re
from datetime import date, datetime, timedelta
from typing import Iterator

from errors import InvalidDate, InvalidRange


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)


def to_civil_date(value) -> date:
    """Parse a YYYY-MM-DD string (or pass through a plain date)."""
    if isinstance(value, datetime):
        raise InvalidDate(f"Expected a calendar date, got a timestamp: {value.isoformat()}")
    if isinstance(value, date):
        return value
    raw = value if isinstance(value, str) else ""
    if not ISO_DATE_PATTERN.fullmatch(raw):
        raise InvalidDate(f"Missing or invalid date '{raw}' (YYYY-MM-DD)")
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate(f"Not a calendar date: '{raw}'")


def civil_date_equals(a: date, b: date) -> bool:
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def same_month_day(a: date, b: date) -> bool:
    """Yearly matching: month and day agree, year ignored."""
    return a.month == b.month and a.day == b.day


def same_day_of_month(a: date, b: date) -> bool:
    """Monthly matching: day-of-month agrees."""
    return a.day == b.day


def month_bounds(year, month):
    """Return (first, last) day of a month."""
    try:
        year, month = int(year), int(month)
        _, last_dom = calendar.monthrange(year, month)
        return date(year, month, 1), date(year, month, last_dom)
    except (TypeError, ValueError, calendar.IllegalMonthError):
        raise InvalidDate(f"Invalid month: {year}-{month}")


class DayRange:
    """Every date from start to end inclusive, ascending.

    Iterating twice yields the same dates; nothing is computed until iterated.
    """

    def __init__(self, start: date, end: date):
        if start > end:
            raise InvalidRange(f"end {end.isoformat()} is before start {start.isoformat()}")
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __len__(self):
        return (self.end - self.start).days + 1

    def __repr__(self):
        return f"DayRange({self.start.isoformat()}..{self.end.isoformat()})"


def days_inclusive(start: date, end: date) -> DayRange:
    return DayRange(start, end)
