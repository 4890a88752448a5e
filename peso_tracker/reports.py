# peso_tracker/reports.py
"""Monthly financial report and next-month forecast."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from itertools import groupby
from typing import Dict, List, Optional, Tuple

import pandas as pd

from peso_tracker.aggregate import monthly_projected_total
from peso_tracker.core.models import OccurrenceType, RecordKind, Transaction
from peso_tracker.expander import expand_month
from peso_tracker.utils import days_in_month, next_month, sort_transactions


@dataclass
class MonthReport:
    year: int
    month: int
    income: float
    expense: float
    recurring_income: float
    fixed_expense: float
    variable_expense: float
    rows: List[Transaction] = field(default_factory=list)

    @property
    def balance(self) -> float:
        return self.income - self.expense

    @property
    def daily_average_expense(self) -> float:
        if self.expense <= 0:
            return 0.0
        return self.expense / days_in_month(self.year, self.month)


@dataclass
class ForecastReport:
    current: MonthReport
    forecast: MonthReport
    income_change: Optional[float]
    expense_change: Optional[float]


def _total(rows, kind, occurrence_type=None) -> float:
    return sum(
        row.amount
        for row in rows
        if row.kind is kind and (occurrence_type is None or row.occurrence_type is occurrence_type)
    )


def month_report(income_records, expense_records, year: int, month: int) -> MonthReport:
    income_records = list(income_records)
    expense_records = list(expense_records)
    rows = sort_transactions(expand_month(income_records + expense_records, year, month))
    fixed = _total(rows, RecordKind.EXPENSE, OccurrenceType.RECURRING)
    expense = monthly_projected_total(expense_records, year, month)
    return MonthReport(
        year=year,
        month=month,
        income=monthly_projected_total(income_records, year, month),
        expense=expense,
        recurring_income=_total(rows, RecordKind.INCOME, OccurrenceType.RECURRING),
        fixed_expense=fixed,
        variable_expense=expense - fixed,
        rows=rows,
    )


def percent_change(current: float, previous: float) -> Optional[float]:
    """Relative change in percent, or None when there is no baseline."""
    if not previous:
        return None
    return (current - previous) / previous * 100


def forecast_report(income_records, expense_records, today: date) -> ForecastReport:
    """Project the month after ``today`` and compare it with the current one."""
    income_records = list(income_records)
    expense_records = list(expense_records)
    current = month_report(income_records, expense_records, today.year, today.month)
    year, month = next_month(today.year, today.month)
    forecast = month_report(income_records, expense_records, year, month)
    return ForecastReport(
        current=current,
        forecast=forecast,
        income_change=percent_change(forecast.income, current.income),
        expense_change=percent_change(forecast.expense, current.expense),
    )


def transactions_frame(rows: List[Transaction]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "date": row.date,
                "kind": row.kind.value,
                "type": row.occurrence_type.value if row.occurrence_type else "",
                "name": row.name,
                "category": row.category,
                "amount": float(row.amount),
            }
            for row in rows
        ],
        columns=["date", "kind", "type", "name", "category", "amount"],
    )


def category_breakdown(rows: List[Transaction], kind=RecordKind.EXPENSE) -> List[Tuple[str, float]]:
    """Category totals for one kind of row, largest first."""
    frame = transactions_frame(rows)
    frame = frame[frame["kind"] == RecordKind(kind).value]
    if frame.empty:
        return []
    totals = frame.groupby("category", sort=False)["amount"].sum()
    totals = totals.sort_values(ascending=False, kind="stable")
    return [(category, float(amount)) for category, amount in totals.items()]


def group_by_date(rows: List[Transaction], descending=False) -> List[Tuple[date, List[Transaction]]]:
    ordered = sort_transactions(rows, descending=descending)
    return [(day, list(group)) for day, group in groupby(ordered, key=lambda row: row.date)]


def totals_by_kind(rows: List[Transaction]) -> Dict[str, float]:
    totals = {kind.value: 0.0 for kind in RecordKind}
    for row in rows:
        totals[row.kind.value] += row.amount
    return totals
