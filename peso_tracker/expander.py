# peso_tracker/expander.py
"""Itemize record occurrences into dated transaction rows."""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List

from peso_tracker.core.models import FinancialRecord, RecordKind, Transaction
from peso_tracker.core.recurrence import occurs_on
from peso_tracker.core.sources import (
    OccurrenceSource,
    expand_sources,
    is_active_recurring,
    is_one_time,
)
from peso_tracker.utils import as_date, iter_days, month_bounds

logger = logging.getLogger(__name__)


def _row(source: OccurrenceSource, day: date) -> Transaction:
    return Transaction(
        date=day,
        name=source.name,
        amount=source.amount,
        category=source.category,
        occurrence_type=source.occurrence_type,
        kind=source.kind,
    )


def expand_range(records: Iterable[FinancialRecord], start_date, end_date) -> List[Transaction]:
    """Return one row per occurrence between the inclusive bounds.

    Records of different kinds may be mixed; every row carries the kind of
    the record it came from. Rows are not sorted.
    """
    start = as_date(start_date)
    end = as_date(end_date)
    if start > end:
        return []

    days = list(iter_days(start, end))
    rows = []
    for record in records:
        for source in expand_sources(record):
            if is_one_time(source):
                if start <= source.date <= end:
                    rows.append(_row(source, source.date))
            elif is_active_recurring(source):
                rows.extend(_row(source, day) for day in days if occurs_on(source.recurrence, day))
            else:
                logger.debug("Skipping source %r of record %s", source.name, source.record_id)
    return rows


def expand_month(records: Iterable[FinancialRecord], year: int, month: int) -> List[Transaction]:
    start, end = month_bounds(year, month)
    return expand_range(records, start, end)


def occurrence_calendar(records: Iterable[FinancialRecord], year: int, month: int) -> Dict[date, Dict[str, bool]]:
    """Map each day of the month with at least one occurrence to per-kind flags."""
    calendar: Dict[date, Dict[str, bool]] = {}
    for row in expand_month(records, year, month):
        flags = calendar.setdefault(row.date, {kind.value: False for kind in RecordKind})
        flags[row.kind.value] = True
    return calendar
