# peso_tracker/store.py
"""Read saved application state into the record model.

The app persists its state as JSON (the ``pesoAppData`` export); YAML files
with the same keys are accepted for hand-written data. Loading never writes.
"""
from __future__ import annotations

import json
import logging
import math
from datetime import date
from pathlib import Path
from typing import List, Optional

import yaml

from peso_tracker.core.models import (
    AppState,
    ExpenseSubItem,
    FinancialRecord,
    OccurrenceType,
    RecordKind,
    RecurrenceKind,
    RecurrenceRule,
)

logger = logging.getLogger(__name__)

_COLLECTIONS = {
    "incomeRecords": RecordKind.INCOME,
    "expenseRecords": RecordKind.EXPENSE,
    "savingRecords": RecordKind.SAVING,
}

_RECURRENCE_ALIASES = {
    "daily": RecurrenceKind.DAILY,
    "weekly": RecurrenceKind.WEEKLY,
    "biweekly": RecurrenceKind.BIWEEKLY,
    "monthly": RecurrenceKind.MONTHLY,
}

_OCCURRENCE_ALIASES = {
    "one_time": OccurrenceType.ONE_TIME,
    "onetime": OccurrenceType.ONE_TIME,
    "unico": OccurrenceType.ONE_TIME,
    "recurring": OccurrenceType.RECURRING,
}


def _lookup_enum(enum_cls, aliases, value):
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for member in enum_cls:
        if text.lower() in (member.value.lower(), member.name.lower()):
            return member
    return aliases.get(text.lower().replace("-", "_").replace(" ", "_"))


def parse_recurrence_kind(value) -> Optional[RecurrenceKind]:
    kind = _lookup_enum(RecurrenceKind, _RECURRENCE_ALIASES, value)
    if kind is None and value is not None:
        logger.warning("Unrecognized recurrence type %r", value)
    return kind


def parse_occurrence_type(value) -> Optional[OccurrenceType]:
    occurrence = _lookup_enum(OccurrenceType, _OCCURRENCE_ALIASES, value)
    if occurrence is None and value is not None:
        logger.warning("Unrecognized record type %r", value)
    return occurrence


def _parse_date(value, entry) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning("Ignoring unparseable date %r in entry: %s", value, entry)
        return None


def _parse_amount(value, field_name, entry) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"Invalid '{field_name}' in entry: {entry}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid '{field_name}' in entry: {entry}") from exc
    if not math.isfinite(number):
        raise ValueError(f"Invalid '{field_name}' in entry: {entry}")
    return number


_TRUE_STRINGS = ("true", "yes", "si", "sí", "1")
_FALSE_STRINGS = ("false", "no", "0", "")


def _parse_flag(value, field_name, entry) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"Invalid '{field_name}' in entry: {entry}")


def _parse_optional_number(value, field_name, entry) -> Optional[float]:
    if value is None or value == "":
        return None
    return _parse_amount(value, field_name, entry)


def _parse_days(values) -> tuple:
    days = []
    for value in values or ():
        try:
            days.append(int(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring day of month %r", value)
    return tuple(days)


def parse_rule(entry) -> Optional[RecurrenceRule]:
    if not entry:
        return None
    if not isinstance(entry, dict):
        raise ValueError(f"Recurrence must be a mapping: {entry}")
    return RecurrenceRule(
        kind=parse_recurrence_kind(entry.get("type")),
        day_of_week=str(entry["dayOfWeek"]) if entry.get("dayOfWeek") else None,
        days_of_month=_parse_days(entry.get("daysOfMonth")),
    )


def parse_sub_item(entry) -> ExpenseSubItem:
    if not isinstance(entry, dict):
        raise ValueError(f"Group item must be a mapping: {entry}")
    return ExpenseSubItem(
        name=entry.get("name", ""),
        amount=_parse_amount(entry.get("amount"), "amount", entry),
        date=_parse_date(entry.get("date"), entry),
        recurrence=parse_rule(entry.get("recurrence")),
        is_infinite=_parse_flag(entry.get("isInfinite"), "isInfinite", entry),
        total_amount=_parse_optional_number(entry.get("totalAmount"), "totalAmount", entry),
        duration_in_months=_parse_optional_number(entry.get("durationInMonths"), "durationInMonths", entry),
        installments_paid=_parse_optional_number(entry.get("installmentsPaid"), "installmentsPaid", entry),
    )


def created_at_from_id(record_id) -> Optional[int]:
    """Read the creation timestamp embedded in legacy ids such as ``exp-1700000000000``."""
    if not record_id:
        return None
    tail = str(record_id).rsplit("-", 1)[-1]
    # Only millisecond Date.now() stamps; shorter numeric tails are ignored.
    if len(tail) < 10 or not tail.isdigit():
        return None
    return int(tail)


def parse_record(entry, kind) -> FinancialRecord:
    if not isinstance(entry, dict):
        raise ValueError(f"Record must be a mapping: {entry}")
    kind = RecordKind(kind)
    record_id = str(entry.get("id", ""))
    created_at = _parse_optional_number(entry.get("createdAt"), "createdAt", entry)
    if created_at is None:
        created_at = created_at_from_id(record_id)
    return FinancialRecord(
        id=record_id,
        kind=kind,
        occurrence_type=parse_occurrence_type(entry.get("type")),
        name=entry.get("name", ""),
        amount=_parse_amount(entry.get("amount"), "amount", entry),
        date=_parse_date(entry.get("date"), entry),
        recurrence=parse_rule(entry.get("recurrence")),
        description=entry.get("description") or "",
        category=entry.get("category"),
        source=entry.get("source"),
        is_infinite=_parse_flag(entry.get("isInfinite"), "isInfinite", entry),
        total_amount=_parse_optional_number(entry.get("totalAmount"), "totalAmount", entry),
        duration_in_months=_parse_optional_number(entry.get("durationInMonths"), "durationInMonths", entry),
        installments_paid=_parse_optional_number(entry.get("installmentsPaid"), "installmentsPaid", entry),
        goal_amount=_parse_optional_number(entry.get("goalAmount"), "goalAmount", entry),
        is_group=_parse_flag(entry.get("isGroup"), "isGroup", entry),
        items=[parse_sub_item(item) for item in entry.get("items") or []],
        created_at=int(created_at) if created_at is not None else None,
    )


def parse_state(data) -> AppState:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Saved state must be a mapping of record collections.")
    collections = {}
    for key, kind in _COLLECTIONS.items():
        collections[kind] = [parse_record(entry, kind) for entry in data.get(key) or []]
    return AppState(
        income_records=collections[RecordKind.INCOME],
        expense_records=collections[RecordKind.EXPENSE],
        saving_records=collections[RecordKind.SAVING],
        archived_records=list(data.get("archivedRecords") or []),
    )


def load_state(path) -> AppState:
    """Load saved state from a JSON or YAML file."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    state = parse_state(data)
    logger.debug(
        "Loaded %d income, %d expense, %d saving record(s) from %s",
        len(state.income_records),
        len(state.expense_records),
        len(state.saving_records),
        path,
    )
    return state


def records_of(state: AppState, kinds: List[str]) -> List[FinancialRecord]:
    by_kind = {
        RecordKind.INCOME: state.income_records,
        RecordKind.EXPENSE: state.expense_records,
        RecordKind.SAVING: state.saving_records,
    }
    records = []
    for kind in kinds:
        records.extend(by_kind[RecordKind(kind)])
    return records
