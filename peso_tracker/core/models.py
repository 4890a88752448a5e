# peso_tracker/core/models.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple


class RecordKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"


class OccurrenceType(str, Enum):
    ONE_TIME = "Único"
    RECURRING = "Recurrente"


class RecurrenceKind(str, Enum):
    DAILY = "Diario"
    WEEKLY = "Semanal"
    BIWEEKLY = "Quincenal"
    MONTHLY = "Mensual"


@dataclass(frozen=True)
class RecurrenceRule:
    kind: Optional[RecurrenceKind]
    day_of_week: Optional[str] = None
    days_of_month: Tuple[int, ...] = ()


@dataclass
class ExpenseSubItem:
    name: str
    amount: float
    date: Optional[date] = None
    recurrence: Optional[RecurrenceRule] = None
    is_infinite: bool = False
    total_amount: Optional[float] = None
    duration_in_months: Optional[float] = None
    installments_paid: Optional[float] = None


@dataclass
class FinancialRecord:
    id: str
    kind: RecordKind
    occurrence_type: Optional[OccurrenceType]
    name: str
    amount: float
    date: Optional[date] = None
    recurrence: Optional[RecurrenceRule] = None
    description: str = ""
    category: Optional[str] = None   # expenses
    source: Optional[str] = None     # income
    is_infinite: bool = False
    total_amount: Optional[float] = None
    duration_in_months: Optional[float] = None
    installments_paid: Optional[float] = None
    goal_amount: Optional[float] = None  # savings
    is_group: bool = False
    items: List[ExpenseSubItem] = field(default_factory=list)
    created_at: Optional[int] = None  # epoch milliseconds


@dataclass
class Transaction:
    date: date
    name: str
    amount: float
    category: str
    occurrence_type: OccurrenceType
    kind: RecordKind


@dataclass
class AppState:
    income_records: List[FinancialRecord] = field(default_factory=list)
    expense_records: List[FinancialRecord] = field(default_factory=list)
    saving_records: List[FinancialRecord] = field(default_factory=list)
    archived_records: List[dict] = field(default_factory=list)

    def all_records(self) -> List[FinancialRecord]:
        return self.income_records + self.expense_records + self.saving_records
