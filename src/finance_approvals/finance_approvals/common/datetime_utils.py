from __future__ import annotations

from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def parse_month(value: str) -> date:
    """Parse a YYYY-MM string into the first day of that month."""
    return datetime.strptime(value, "%Y-%m").date()


def format_month(value: date) -> str:
    return value.strftime("%Y-%m")


def add_months(value: date, months: int) -> date:
    """Shift by whole calendar months, clamping to the last day of a shorter month."""
    return value + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Number of complete calendar months from ``start`` to ``end`` (negative if end < start)."""
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)
