from datetime import date

import pytest

from peso_tracker.core.models import OccurrenceType, RecordKind, Transaction
from peso_tracker.reports import (
    category_breakdown,
    forecast_report,
    group_by_date,
    month_report,
    percent_change,
    totals_by_kind,
)
from peso_tracker.store import parse_record


def _state():
    income = [
        parse_record(
            {"id": "inc-1", "type": "Recurrente", "name": "Salario", "amount": 1000,
             "recurrence": {"type": "Quincenal", "daysOfMonth": [15, 30]}},
            "income",
        ),
        parse_record(
            {"id": "inc-2", "type": "Único", "name": "Venta", "amount": 200,
             "date": "2024-05-09"},
            "income",
        ),
    ]
    expense = [
        parse_record(
            {"id": "exp-1", "type": "Recurrente", "name": "Renta", "category": "Vivienda",
             "amount": 700, "recurrence": {"type": "Mensual", "daysOfMonth": [1]},
             "isInfinite": True},
            "expense",
        ),
        parse_record(
            {"id": "exp-2", "type": "Único", "name": "Cena", "category": "Comida",
             "amount": 45, "date": "2024-05-20"},
            "expense",
        ),
        parse_record(
            {"id": "exp-3", "type": "Único", "name": "Super", "amount": 0, "isGroup": True,
             "items": [
                 {"name": "Arroz", "amount": 5, "date": "2024-05-02"},
                 {"name": "Aceite", "amount": 10, "date": "2024-05-20"},
             ]},
            "expense",
        ),
    ]
    return income, expense


def test_month_report_splits_recurring_and_one_time():
    income, expense = _state()
    report = month_report(income, expense, 2024, 5)
    assert report.income == 2200
    assert report.recurring_income == 2000
    assert report.expense == 760
    assert report.fixed_expense == 700
    assert report.variable_expense == 60
    assert report.balance == 1440
    assert report.daily_average_expense == pytest.approx(760 / 31)
    assert [row.date for row in report.rows] == sorted(row.date for row in report.rows)


def test_month_report_with_nothing_scheduled():
    report = month_report([], [], 2024, 5)
    assert report.income == 0
    assert report.expense == 0
    assert report.daily_average_expense == 0.0
    assert report.rows == []


def test_percent_change():
    assert percent_change(150, 100) == pytest.approx(50.0)
    assert percent_change(50, 100) == pytest.approx(-50.0)
    assert percent_change(10, 0) is None


def test_forecast_report_projects_following_month():
    income, expense = _state()
    report = forecast_report(income, expense, date(2024, 4, 20))
    assert (report.current.year, report.current.month) == (2024, 4)
    assert (report.forecast.year, report.forecast.month) == (2024, 5)
    assert report.current.income == 2000
    assert report.income_change == pytest.approx(10.0)
    assert report.current.expense == 700
    assert report.expense_change == pytest.approx(60 / 700 * 100)


def test_forecast_report_wraps_year():
    report = forecast_report([], [], date(2024, 12, 31))
    assert (report.forecast.year, report.forecast.month) == (2025, 1)
    assert report.income_change is None


def test_category_breakdown_orders_by_total():
    income, expense = _state()
    rows = month_report(income, expense, 2024, 5).rows
    assert category_breakdown(rows) == [("Vivienda", 700.0), ("Comida", 45.0), ("Super", 15.0)]
    assert category_breakdown(rows, RecordKind.INCOME) == [("General", 2200.0)]
    assert category_breakdown(rows, "saving") == []
    assert category_breakdown([]) == []


def test_group_by_date_and_totals():
    rows = [
        Transaction(date(2024, 5, 2), "b", 1, "General", OccurrenceType.ONE_TIME, RecordKind.EXPENSE),
        Transaction(date(2024, 5, 1), "a", 2, "General", OccurrenceType.ONE_TIME, RecordKind.INCOME),
        Transaction(date(2024, 5, 2), "c", 3, "General", OccurrenceType.ONE_TIME, RecordKind.SAVING),
    ]
    grouped = group_by_date(rows, descending=True)
    assert [day for day, _ in grouped] == [date(2024, 5, 2), date(2024, 5, 1)]
    assert [tx.name for tx in grouped[0][1]] == ["b", "c"]
    assert totals_by_kind(rows) == {"income": 2.0, "expense": 1.0, "saving": 3.0}
