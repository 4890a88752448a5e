# peso_tracker/core/progress.py
"""Installment plan and savings goal progress."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from peso_tracker.core.recurrence import (
    installments_paid_count,
    is_completed,
    is_positive_number,
)


@dataclass
class InstallmentProgress:
    installments_paid: float
    duration_in_months: float
    amount_paid: float
    total_amount: Optional[float]
    percent: Optional[float]
    months_remaining: float
    completed: bool


@dataclass
class SavingsProgress:
    saved: float
    goal: float
    percent: float
    remaining: float


def installment_progress(source) -> Optional[InstallmentProgress]:
    """Progress of a bounded installment plan, or None for open-ended sources.

    ``percent`` is measured against ``total_amount`` and is None when the
    plan has no positive total.
    """
    duration = getattr(source, "duration_in_months", None)
    if not is_positive_number(duration):
        return None
    if getattr(source, "is_infinite", False) is True:
        return None

    paid = installments_paid_count(source)
    amount_paid = paid * (getattr(source, "amount", 0) or 0)
    total = getattr(source, "total_amount", None)
    if not is_positive_number(total):
        total = None
    return InstallmentProgress(
        installments_paid=paid,
        duration_in_months=duration,
        amount_paid=amount_paid,
        total_amount=total,
        percent=amount_paid / total * 100 if total else None,
        months_remaining=max(duration - paid, 0),
        completed=is_completed(source),
    )


def savings_progress(record) -> Optional[SavingsProgress]:
    goal = getattr(record, "goal_amount", None)
    if not is_positive_number(goal):
        return None
    saved = getattr(record, "amount", 0) or 0
    return SavingsProgress(
        saved=saved,
        goal=goal,
        percent=saved / goal * 100,
        remaining=max(goal - saved, 0),
    )
