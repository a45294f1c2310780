"""Daily, monthly and weekly KPI rollups.

The build_*/roll_* functions are pure: they work only on the records passed
in. The compute_* functions load those records through an injected KpiStore
and are what the API routes call.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional
from allocation import effective_budget, effective_target
from errors import NotFoundError
from records import (
    BudgetDay, DayRecord, MonthlySummary, RosterEntry, SalesEntry, StaffMember,
    StaffMonthTotals, StaffTracker, StoreTotals, TrackerDay, TrackerWeek,
)
from utils import month_bounds, month_dates, parse_day


def _by_name(staff: Iterable[StaffMember]) -> List[StaffMember]:
    # Plain str ordering compares code points, so it is locale independent.
    return sorted(staff, key=lambda s: (s.name, s.id))


def build_day_records(
    day: date,
    staff: List[StaffMember],
    rosters: Iterable[RosterEntry],
    sales: Iterable[SalesEntry],
    budget: Optional[BudgetDay],
) -> List[DayRecord]:
    """One DayRecord per staff member for a single date, sorted by name.

    Roster and sales rows for other dates are ignored. Missing targets are
    allocated from the day's budget, whose hours fall back to the total
    rostered hours of every staff member that day.
    """
    roster_map = {r.staff_id: r for r in rosters if r.date == day}
    sales_map = {s.staff_id: s for s in sales if s.date == day}
    roster_hours = sum(r.shift_hours for r in roster_map.values())
    budget = effective_budget(day, budget, roster_hours)

    records = []
    for member in _by_name(staff):
        roster = roster_map.get(member.id)
        entry = sales_map.get(member.id)
        if entry is not None:
            shift_hours = entry.shift_hours
        elif roster is not None:
            shift_hours = roster.shift_hours
        else:
            shift_hours = 0
        persisted = entry.target_sales if entry else 0
        records.append(DayRecord(
            staff_id=member.id,
            name=member.name,
            date=day,
            shift_hours=shift_hours,
            actual_sales=entry.actual_sales if entry else 0,
            target_sales=effective_target(persisted, budget, shift_hours),
            ips=entry.ips if entry else 0,
            avg_sale=entry.avg_sale if entry else 0,
            jcp_sales=entry.jcp_sales if entry else 0,
            is_submitted=entry is not None,
        ))
    return records


def _group_by_day(rows) -> Dict[date, list]:
    grouped = defaultdict(list)
    for row in rows:
        grouped[row.date].append(row)
    return grouped


def month_details(
    year: int,
    month: int,
    staff: List[StaffMember],
    rosters: Iterable[RosterEntry],
    sales: Iterable[SalesEntry],
    budgets: Iterable[BudgetDay],
) -> List[DayRecord]:
    """DayRecords for every (day, staff member) of the month, by date then name."""
    rosters_by_day = _group_by_day(rosters)
    sales_by_day = _group_by_day(sales)
    budget_map = {b.date: b for b in budgets}

    details = []
    for day in month_dates(year, month):
        details.extend(build_day_records(
            day, staff, rosters_by_day.get(day, []), sales_by_day.get(day, []), budget_map.get(day),
        ))
    return details


def roll_month(
    year: int,
    month: int,
    staff: List[StaffMember],
    rosters: Iterable[RosterEntry],
    sales: Iterable[SalesEntry],
    budgets: Iterable[BudgetDay],
) -> MonthlySummary:
    rosters = list(rosters)
    budget_map = {b.date: b for b in budgets}

    roster_hours = defaultdict(float)
    for r in rosters:
        roster_hours[r.date] += r.shift_hours

    daily_budgets = [
        effective_budget(day, budget_map.get(day), roster_hours.get(day, 0))
        for day in month_dates(year, month)
    ]
    store = StoreTotals(
        total_budget=sum(b.total_budget for b in daily_budgets),
        total_hours=sum(b.total_hours for b in daily_budgets),
    )

    details = month_details(year, month, staff, rosters, sales, budget_map.values())
    per_staff = defaultdict(list)
    for record in details:
        per_staff[record.staff_id].append(record)

    totals = []
    for member in _by_name(staff):
        records = per_staff.get(member.id, [])
        ips_values = [r.ips for r in records if r.ips > 0]
        avg_sale_values = [r.avg_sale for r in records if r.avg_sale > 0]
        totals.append(StaffMonthTotals(
            staff_id=member.id,
            name=member.name,
            total_sales=sum(r.actual_sales for r in records),
            total_target=sum(r.target_sales for r in records),
            total_hours=sum(r.shift_hours for r in records),
            avg_ips=sum(ips_values) / len(ips_values) if ips_values else 0,
            avg_sale_val=sum(avg_sale_values) / len(avg_sale_values) if avg_sale_values else 0,
        ))

    return MonthlySummary(year=year, month=month, staff=totals, store=store, daily_budgets=daily_budgets)


def build_weekly_tracker(days: List[date], records: Iterable[DayRecord]) -> List[TrackerWeek]:
    """Split one staff member's month into Monday-start weeks with running totals.

    A week closes after each Sunday and on the last day, so the first and
    last weeks may be short. Running totals carry on across weeks and each
    day shows the totals including itself.
    """
    by_day = {r.date: r for r in records}
    weeks = []
    current = []
    week_actual = week_target = 0
    running_actual = running_target = running_variance = 0

    for i, day in enumerate(days):
        record = by_day.get(day)
        actual = record.actual_sales if record else 0
        target = record.target_sales if record else 0
        running_actual += actual
        running_target += target
        running_variance += actual - target
        week_actual += actual
        week_target += target
        current.append(TrackerDay(
            date=day,
            actual=actual,
            target=target,
            variance=actual - target,
            running_actual=running_actual,
            running_target=running_target,
            running_variance=running_variance,
        ))
        if day.weekday() == 6 or i == len(days) - 1:
            weeks.append(TrackerWeek(
                number=len(weeks) + 1, week_actual=week_actual, week_target=week_target, days=current,
            ))
            current = []
            week_actual = week_target = 0

    return weeks


# ----- Store-backed entry points -----

def _load_month(store, year: int, month: int):
    first, last = month_bounds(year, month)
    return (
        store.list_staff(),
        store.rosters_between(first, last),
        store.sales_between(first, last),
        store.budgets_between(first, last),
    )


def compute_day_records(store, day) -> List[DayRecord]:
    day = parse_day(day)
    return build_day_records(
        day,
        store.list_staff(),
        store.rosters_between(day, day),
        store.sales_between(day, day),
        store.get_budget(day),
    )


def compute_monthly_summary(store, year: int, month: int) -> MonthlySummary:
    staff, rosters, sales, budgets = _load_month(store, year, month)
    return roll_month(year, month, staff, rosters, sales, budgets)


def compute_monthly_details(store, year: int, month: int) -> List[DayRecord]:
    staff, rosters, sales, budgets = _load_month(store, year, month)
    return month_details(year, month, staff, rosters, sales, budgets)


def compute_staff_tracker(store, staff_id: int, year: int, month: int) -> StaffTracker:
    member = store.get_staff(staff_id)
    if member is None:
        raise NotFoundError(f"Staff member {staff_id} not found")

    _, rosters, sales, budgets = _load_month(store, year, month)
    # All staff rosters still count towards the day's hours; only the output is narrowed.
    details = month_details(year, month, [member], rosters, sales, budgets)
    weeks = build_weekly_tracker(month_dates(year, month), details)
    return StaffTracker(
        staff_id=member.id,
        name=member.name,
        year=year,
        month=month,
        total_sales=sum(r.actual_sales for r in details),
        total_target=sum(r.target_sales for r in details),
        weeks=weeks,
    )
