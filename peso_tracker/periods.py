# peso_tracker/periods.py
"""Current-period windows and carry-over balance for the dashboard.

Two boundary policies are supported:

``paydate``
    The window follows the most frequent recurrence among all recurring
    sources: a single day, the Monday-to-Sunday week, a half month, or the
    calendar month.
``fortnight``
    The window is always the half month containing ``today`` (1-15 or
    16 to the last day), whatever the records recur on.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Tuple

from peso_tracker.aggregate import monthly_projected_total, sum_in_range
from peso_tracker.core.models import FinancialRecord, OccurrenceType, RecurrenceKind
from peso_tracker.core.sources import expand_sources, is_one_time
from peso_tracker.utils import days_in_month, month_bounds

logger = logging.getLogger(__name__)

# Highest frequency first.
_FREQUENCY_PRIORITY = (
    RecurrenceKind.DAILY,
    RecurrenceKind.WEEKLY,
    RecurrenceKind.BIWEEKLY,
)


class PeriodPolicy(str, Enum):
    PAYDATE = "paydate"
    FORTNIGHT = "fortnight"


@dataclass
class PeriodSummary:
    frequency: RecurrenceKind
    start: date
    end: date
    income: float
    expense: float
    carry_over: float
    monthly_income: float
    monthly_expense: float

    @property
    def net(self) -> float:
        return self.income - self.expense

    @property
    def remaining(self) -> float:
        return self.carry_over + self.income - self.expense


def dominant_frequency(records: Iterable[FinancialRecord]) -> RecurrenceKind:
    """Return the highest recurrence frequency in use, monthly by default."""
    kinds = set()
    for record in records:
        for source in expand_sources(record):
            if source.occurrence_type is OccurrenceType.RECURRING and source.recurrence:
                kinds.add(source.recurrence.kind)
    for kind in _FREQUENCY_PRIORITY:
        if kind in kinds:
            return kind
    return RecurrenceKind.MONTHLY


def _half_month(today: date) -> Tuple[date, date]:
    if today.day <= 15:
        return today.replace(day=1), today.replace(day=15)
    return today.replace(day=16), today.replace(day=days_in_month(today.year, today.month))


def period_window(frequency: RecurrenceKind, today: date) -> Tuple[date, date]:
    if frequency is RecurrenceKind.DAILY:
        return today, today
    if frequency is RecurrenceKind.WEEKLY:
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if frequency is RecurrenceKind.BIWEEKLY:
        return _half_month(today)
    return month_bounds(today.year, today.month)


def current_period(records, today: date, policy=PeriodPolicy.PAYDATE) -> Tuple[date, date]:
    policy = PeriodPolicy(policy)
    if policy is PeriodPolicy.FORTNIGHT:
        return _half_month(today)
    return period_window(dominant_frequency(records), today)


def history_start(records: Iterable[FinancialRecord], today: date) -> date:
    """Earliest known activity: creation stamps and one-time dates."""
    candidates: List[date] = []
    for record in records:
        if record.created_at is not None:
            try:
                candidates.append(datetime.fromtimestamp(record.created_at / 1000).date())
            except (OverflowError, OSError, ValueError):
                logger.debug("Ignoring out-of-range created_at on record %s", record.id)
        for source in expand_sources(record):
            if is_one_time(source):
                candidates.append(source.date)
    return min(candidates) if candidates else today


def carry_over_balance(income_records, expense_records, period_start: date, today: date) -> float:
    """Net balance accumulated before ``period_start``."""
    income_records = list(income_records)
    expense_records = list(expense_records)
    start = history_start(income_records + expense_records, today)
    day_before = period_start - timedelta(days=1)
    return sum_in_range(income_records, start, day_before) - sum_in_range(
        expense_records, start, day_before
    )


def period_summary(income_records, expense_records, today: date, policy=PeriodPolicy.PAYDATE) -> PeriodSummary:
    income_records = list(income_records)
    expense_records = list(expense_records)
    records = income_records + expense_records

    policy = PeriodPolicy(policy)
    if policy is PeriodPolicy.FORTNIGHT:
        frequency = RecurrenceKind.BIWEEKLY
    else:
        frequency = dominant_frequency(records)
    start, end = current_period(records, today, policy)

    return PeriodSummary(
        frequency=frequency,
        start=start,
        end=end,
        income=sum_in_range(income_records, start, end),
        expense=sum_in_range(expense_records, start, end),
        carry_over=carry_over_balance(income_records, expense_records, start, today),
        monthly_income=monthly_projected_total(income_records, today.year, today.month),
        monthly_expense=monthly_projected_total(expense_records, today.year, today.month),
    )
