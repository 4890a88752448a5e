# peso_tracker/core/recurrence.py
"""Recurrence evaluation and installment completion.

Both helpers are pure: they never raise for malformed rules or sources and
simply report that nothing fires (or that nothing is completed).
"""
from __future__ import annotations

import math
from calendar import monthrange
from datetime import date
from typing import Optional

from peso_tracker.core.models import RecurrenceKind, RecurrenceRule

# Day names are persisted verbatim in records, so this table is part of the
# stored format. Indexes follow date.weekday() (Monday == 0).
DAY_NAME_TO_INDEX = {
    "Lunes": 0,
    "Martes": 1,
    "Miércoles": 2,
    "Jueves": 3,
    "Viernes": 4,
    "Sábado": 5,
    "Domingo": 6,
}

_DAY_OF_MONTH_KINDS = (RecurrenceKind.BIWEEKLY, RecurrenceKind.MONTHLY)


def weekday_index(day_name: Optional[str]) -> Optional[int]:
    if not day_name:
        return None
    return DAY_NAME_TO_INDEX.get(day_name)


def occurs_on(rule: Optional[RecurrenceRule], day: date) -> bool:
    """Return True when ``rule`` fires on the calendar date ``day``."""
    if rule is None or rule.kind is None:
        return False
    if rule.kind is RecurrenceKind.DAILY:
        return True
    if rule.kind is RecurrenceKind.WEEKLY:
        target = weekday_index(rule.day_of_week)
        return target is not None and day.weekday() == target
    if rule.kind in _DAY_OF_MONTH_KINDS:
        return day.day in (rule.days_of_month or ())
    return False


def is_positive_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def installments_paid_count(source) -> float:
    """Installments paid so far; anything that is not a number counts as none."""
    paid = getattr(source, "installments_paid", None)
    if isinstance(paid, bool) or not isinstance(paid, (int, float)):
        return 0
    return paid


def is_completed(source) -> bool:
    """Return True when a bounded installment plan has been fully paid.

    ``source`` is anything exposing ``is_infinite``, ``duration_in_months``
    and ``installments_paid`` (a record, a sub-item or an occurrence source).
    Open-ended sources are never completed.
    """
    duration = getattr(source, "duration_in_months", None)
    if not is_positive_number(duration):
        return False
    if getattr(source, "is_infinite", False) is True:
        return False
    return installments_paid_count(source) >= duration


def occurrences_in_month(rule: Optional[RecurrenceRule], year: int, month: int) -> int:
    """Count the days of ``year``/``month`` on which ``rule`` fires, in closed form."""
    if rule is None or rule.kind is None:
        return 0
    days_in_month = monthrange(year, month)[1]
    if rule.kind is RecurrenceKind.DAILY:
        return days_in_month
    if rule.kind is RecurrenceKind.WEEKLY:
        target = weekday_index(rule.day_of_week)
        if target is None:
            return 0
        first_weekday = date(year, month, 1).weekday()
        first_match = 1 + (target - first_weekday) % 7
        return (days_in_month - first_match) // 7 + 1
    if rule.kind in _DAY_OF_MONTH_KINDS:
        return len({d for d in (rule.days_of_month or ()) if 1 <= d <= days_in_month})
    return 0
