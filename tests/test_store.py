import json
import logging
from datetime import date

import pytest

from peso_tracker.core.models import OccurrenceType, RecordKind, RecurrenceKind
from peso_tracker.store import (
    created_at_from_id,
    load_state,
    parse_record,
    parse_rule,
    parse_state,
    records_of,
)


def write_state(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


SAMPLE = {
    "userProfile": {"firstName": "Ana"},
    "incomeRecords": [
        {"id": "inc-1714000000000", "type": "Recurrente", "name": "Salario",
         "source": "Empresa", "amount": 1500, "description": "",
         "recurrence": {"type": "Quincenal", "daysOfMonth": [15, 30]}},
    ],
    "expenseRecords": [
        {"id": "exp-1714000000001", "type": "Recurrente", "name": "Moto",
         "category": "Transporte", "amount": 120, "totalAmount": 1440,
         "durationInMonths": 12, "installmentsPaid": 4, "isInfinite": False,
         "recurrence": {"type": "Mensual", "daysOfMonth": [5]}},
        {"id": "exp-1714000000002", "type": "Único", "name": "Hogar",
         "category": "Grupo", "amount": 30, "isGroup": True,
         "items": [{"name": "Focos", "amount": 30, "date": "2024-04-25"}]},
    ],
    "savingRecords": [
        {"id": "sav-1", "type": "Único", "name": "Fondo", "amount": 500,
         "date": "2024-03-10", "storageType": "Banco", "createdAt": 1709000000000},
    ],
    "archivedRecords": [{"id": "exp-old", "archivedAt": 1}],
}


def test_load_state_from_json_export(tmp_path):
    state = load_state(write_state(tmp_path / "pesoAppData.json", SAMPLE))

    [salary] = state.income_records
    assert salary.kind is RecordKind.INCOME
    assert salary.occurrence_type is OccurrenceType.RECURRING
    assert salary.recurrence.kind is RecurrenceKind.BIWEEKLY
    assert salary.recurrence.days_of_month == (15, 30)
    assert salary.created_at == 1714000000000

    loan, group = state.expense_records
    assert loan.duration_in_months == 12
    assert loan.installments_paid == 4
    assert loan.total_amount == 1440
    assert loan.is_infinite is False
    assert group.is_group
    assert group.items[0].date == date(2024, 4, 25)

    [fund] = state.saving_records
    assert fund.created_at == 1709000000000
    assert state.archived_records == [{"id": "exp-old", "archivedAt": 1}]
    assert len(state.all_records()) == 4
    assert records_of(state, ["income", "saving"]) == [salary, fund]


def test_load_state_from_yaml(tmp_path):
    path = tmp_path / "state.yaml"
    path.write_text(
        """\
incomeRecords:
  - id: inc-a
    type: Único
    name: Bono
    amount: 250
    date: 2024-06-01
expenseRecords:
  - id: exp-a
    type: recurring
    name: Cafe
    amount: 2.5
    recurrence:
      type: weekly
      dayOfWeek: Lunes
""",
        encoding="utf-8",
    )
    state = load_state(path)
    assert state.income_records[0].date == date(2024, 6, 1)
    assert state.income_records[0].occurrence_type is OccurrenceType.ONE_TIME
    cafe = state.expense_records[0]
    assert cafe.occurrence_type is OccurrenceType.RECURRING
    assert cafe.recurrence.kind is RecurrenceKind.WEEKLY
    assert cafe.recurrence.day_of_week == "Lunes"
    assert state.saving_records == []


def test_empty_and_missing_collections(tmp_path):
    state = load_state(write_state(tmp_path / "empty.json", {}))
    assert state.all_records() == []
    assert parse_state(None).all_records() == []


@pytest.mark.parametrize("payload", [[1, 2], "text"])
def test_non_mapping_state_is_rejected(payload):
    with pytest.raises(ValueError):
        parse_state(payload)


def test_bad_entries_are_rejected():
    with pytest.raises(ValueError, match="Record must be a mapping"):
        parse_state({"incomeRecords": ["oops"]})
    with pytest.raises(ValueError, match="amount"):
        parse_record({"id": "x", "type": "Único", "amount": "mucho"}, "expense")
    with pytest.raises(ValueError, match="Group item"):
        parse_record({"id": "x", "isGroup": True, "items": [3]}, "expense")


def test_unknown_values_are_tolerated_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="peso_tracker.store"):
        record = parse_record(
            {"id": "x", "type": "Alguna vez", "name": "?", "amount": 5,
             "date": "2024-02-30", "recurrence": {"type": "Anual", "daysOfMonth": ["x", 3]}},
            "expense",
        )
    assert record.occurrence_type is None
    assert record.date is None
    assert record.recurrence.kind is None
    assert record.recurrence.days_of_month == (3,)
    assert "Alguna vez" in caplog.text
    assert "Anual" in caplog.text


def test_parse_rule_aliases():
    assert parse_rule({"type": "Diario"}).kind is RecurrenceKind.DAILY
    assert parse_rule({"type": "BIWEEKLY"}).kind is RecurrenceKind.BIWEEKLY
    assert parse_rule({"type": "mensual", "daysOfMonth": ["15"]}).days_of_month == (15,)
    assert parse_rule(None) is None


def test_created_at_from_id():
    assert created_at_from_id("exp-1714000000000") == 1714000000000
    assert created_at_from_id("inc-sal-sal-1714000000000") == 1714000000000
    assert created_at_from_id("exp-1") is None
    assert created_at_from_id("custom") is None
    assert created_at_from_id(None) is None


@pytest.mark.parametrize("field_name", ["amount", "createdAt", "goalAmount"])
@pytest.mark.parametrize("value", [float("inf"), float("nan"), "-inf"])
def test_non_finite_numbers_are_rejected(field_name, value):
    entry = {"id": "sav-x", "type": "Único", "name": "X", "amount": 10, "date": "2024-01-01"}
    entry[field_name] = value
    with pytest.raises(ValueError, match=field_name):
        parse_record(entry, "saving")


def test_non_finite_created_at_in_json_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(
        '{"incomeRecords": [{"id": "a", "type": "Único", "amount": 5,'
        ' "date": "2024-05-01", "createdAt": 1e999}]}',
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="createdAt"):
        load_state(path)


@pytest.mark.parametrize("value, expected", [
    (True, True), (False, False), ("true", True), ("false", False),
    ("False", False), ("no", False), ("sí", True), (0, False), (1, True), (None, False),
])
def test_flags_accept_common_spellings(value, expected):
    record = parse_record(
        {"id": "x", "type": "Recurrente", "name": "Cuota", "amount": 5, "isInfinite": value},
        "expense",
    )
    assert record.is_infinite is expected


def test_unrecognized_flag_is_rejected():
    with pytest.raises(ValueError, match="isGroup"):
        parse_record({"id": "x", "name": "Hogar", "isGroup": "maybe"}, "expense")


def test_yaml_string_flags(tmp_path):
    path = tmp_path / "state.yml"
    path.write_text(
        """\
expenseRecords:
  - id: exp-tv
    type: Recurrente
    name: TV
    amount: 40
    isInfinite: "false"
    durationInMonths: 10
    installmentsPaid: 10
    recurrence: {type: Mensual, daysOfMonth: [3]}
savingRecords:
  - id: sav-meta
    type: Único
    name: Meta
    amount: 100
    date: 2024-01-01
    goalAmount: 400
""",
        encoding="utf-8",
    )
    state = load_state(path)
    assert state.expense_records[0].is_infinite is False
    assert state.saving_records[0].goal_amount == 400
