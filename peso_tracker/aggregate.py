# peso_tracker/aggregate.py
"""Sum record amounts over calendar ranges.

``sum_in_range`` walks the range day by day; ``monthly_projected_total``
computes the same figure for a whole month from per-source occurrence counts.
The two must always agree for a calendar month.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from peso_tracker.core.models import FinancialRecord
from peso_tracker.core.recurrence import occurrences_in_month, occurs_on
from peso_tracker.core.sources import (
    expand_sources,
    is_active_recurring,
    is_one_time,
)
from peso_tracker.utils import as_date, iter_days

logger = logging.getLogger(__name__)


def date_key(day: date) -> int:
    return day.year * 10000 + day.month * 100 + day.day


def sum_in_range(records: Iterable[FinancialRecord], start_date, end_date) -> float:
    """Total the amounts that fall between ``start_date`` and ``end_date``.

    Both bounds are inclusive and only their calendar day matters. A start
    after the end yields 0.
    """
    start = as_date(start_date)
    end = as_date(end_date)
    if start > end:
        return 0

    start_key = date_key(start)
    end_key = date_key(end)
    total = 0
    for record in records:
        for source in expand_sources(record):
            if is_one_time(source):
                if start_key <= date_key(source.date) <= end_key:
                    total += source.amount
            elif is_active_recurring(source):
                for day in iter_days(start, end):
                    if occurs_on(source.recurrence, day):
                        total += source.amount
            else:
                logger.debug("Skipping source %r of record %s", source.name, source.record_id)
    return total


def monthly_projected_total(records: Iterable[FinancialRecord], year: int, month: int) -> float:
    """Projected total for ``year``/``month`` (1-12) without walking each day."""
    total = 0
    for record in records:
        for source in expand_sources(record):
            if is_one_time(source):
                if source.date.year == year and source.date.month == month:
                    total += source.amount
            elif is_active_recurring(source):
                total += source.amount * occurrences_in_month(source.recurrence, year, month)
    return total


def net_in_range(income_records, expense_records, start_date, end_date) -> float:
    return sum_in_range(income_records, start_date, end_date) - sum_in_range(
        expense_records, start_date, end_date
    )
