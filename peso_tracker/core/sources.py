# peso_tracker/core/sources.py
"""Flatten records into the occurrence sources the engine evaluates."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from peso_tracker.core.models import (
    FinancialRecord,
    OccurrenceType,
    RecordKind,
    RecurrenceRule,
)
from peso_tracker.core.recurrence import is_completed

DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class OccurrenceSource:
    record_id: str
    kind: RecordKind
    name: str
    amount: float
    occurrence_type: Optional[OccurrenceType]
    date: Optional[date] = None
    recurrence: Optional[RecurrenceRule] = None
    is_infinite: bool = False
    duration_in_months: Optional[float] = None
    installments_paid: Optional[float] = None
    total_amount: Optional[float] = None
    category: str = DEFAULT_CATEGORY
    parent_name: Optional[str] = None


def _record_label(record: FinancialRecord) -> str:
    if record.kind is RecordKind.EXPENSE:
        if record.is_group:
            return record.name
        return record.category or DEFAULT_CATEGORY
    if record.kind is RecordKind.INCOME:
        return record.source or DEFAULT_CATEGORY
    return DEFAULT_CATEGORY


def _infer_type(item) -> Optional[OccurrenceType]:
    if item.recurrence is not None and item.date is None:
        return OccurrenceType.RECURRING
    if item.date is not None and item.recurrence is None:
        return OccurrenceType.ONE_TIME
    return None


def expand_sources(record: FinancialRecord) -> List[OccurrenceSource]:
    """Return the occurrence sources of ``record``.

    A group contributes one source per item and nothing of its own; its
    cached ``amount`` is ignored. Any other record is its own single source.
    """
    label = _record_label(record)
    if record.is_group:
        return [
            OccurrenceSource(
                record_id=record.id,
                kind=record.kind,
                name=item.name,
                amount=item.amount,
                occurrence_type=record.occurrence_type or _infer_type(item),
                date=item.date,
                recurrence=item.recurrence,
                is_infinite=item.is_infinite,
                duration_in_months=item.duration_in_months,
                installments_paid=item.installments_paid,
                total_amount=item.total_amount,
                category=label,
                parent_name=record.name,
            )
            for item in record.items
        ]
    return [
        OccurrenceSource(
            record_id=record.id,
            kind=record.kind,
            name=record.name,
            amount=record.amount,
            occurrence_type=record.occurrence_type,
            date=record.date,
            recurrence=record.recurrence,
            is_infinite=record.is_infinite,
            duration_in_months=record.duration_in_months,
            installments_paid=record.installments_paid,
            total_amount=record.total_amount,
            category=label,
        )
    ]


def is_one_time(source: OccurrenceSource) -> bool:
    return source.occurrence_type is OccurrenceType.ONE_TIME and source.date is not None


def is_active_recurring(source: OccurrenceSource) -> bool:
    """Recurring, carrying a rule, and not yet paid off."""
    return (
        source.occurrence_type is OccurrenceType.RECURRING
        and source.recurrence is not None
        and not is_completed(source)
    )
