"""Typed records passed between the store and the KPI calculations.

Rows are converted into these once, at the storage boundary; everything
downstream works on these immutable values only.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class StaffMember:
    id: int
    name: str


@dataclass(frozen=True)
class RosterEntry:
    staff_id: int
    date: date
    shift_hours: float


@dataclass(frozen=True)
class BudgetDay:
    date: date
    total_budget: float
    total_hours: Optional[float] = None  # None/0 -> derive from roster


@dataclass(frozen=True)
class SalesEntry:
    staff_id: int
    date: date
    shift_hours: float
    actual_sales: float
    target_sales: float
    ips: float = 0
    avg_sale: float = 0
    jcp_sales: float = 0


@dataclass(frozen=True)
class DayRecord:
    staff_id: int
    name: str
    date: date
    shift_hours: float
    actual_sales: float
    target_sales: float
    ips: float
    avg_sale: float
    jcp_sales: float
    is_submitted: bool


@dataclass(frozen=True)
class StaffMonthTotals:
    staff_id: int
    name: str
    total_sales: float
    total_target: float
    total_hours: float
    avg_ips: float
    avg_sale_val: float


@dataclass(frozen=True)
class StoreTotals:
    total_budget: float
    total_hours: float


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    staff: List[StaffMonthTotals]
    store: StoreTotals
    daily_budgets: List[BudgetDay]


@dataclass(frozen=True)
class TrackerDay:
    date: date
    actual: float
    target: float
    variance: float
    running_actual: float
    running_target: float
    running_variance: float


@dataclass(frozen=True)
class TrackerWeek:
    number: int
    week_actual: float
    week_target: float
    days: List[TrackerDay] = field(default_factory=list)


@dataclass(frozen=True)
class StaffTracker:
    staff_id: int
    name: str
    year: int
    month: int
    total_sales: float
    total_target: float
    weeks: List[TrackerWeek]
