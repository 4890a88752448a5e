# peso_tracker/utils.py
from calendar import monthrange
from datetime import date, datetime, timedelta


def as_date(value):
    """Drop the time of day from a ``datetime``; pass a ``date`` through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def iter_days(start, end):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def days_in_month(year, month):
    return monthrange(year, month)[1]


def month_bounds(year, month):
    """
    Return the first and last calendar day of the given month.
    """
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def parse_month(month_str):
    """
    Parse a YYYY-MM string into a (year, month) tuple.
    """
    parsed = datetime.strptime(month_str, "%Y-%m")
    return parsed.year, parsed.month


def next_month(year, month):
    if month == 12:
        return year + 1, 1
    return year, month + 1


def sort_transactions(transactions, descending=False):
    """
    Order rows by date; rows on the same day keep their original order.
    """
    return sorted(transactions, key=lambda tx: tx.date, reverse=descending)
