"""Target allocation: a day's store budget split across rostered staff by hours."""

from datetime import date
from typing import Optional
from errors import ValidationError
from records import BudgetDay
from utils import round_half_up


def resolve_total_hours(total_hours: Optional[float], roster_hours: float = 0) -> float:
    """Budgeted hours for a day, falling back to the rostered total.

    A stored value of 0 or None means "not entered", never "no labor".
    """
    if total_hours:
        return total_hours
    return roster_hours or 0


def effective_budget(day: date, budget: Optional[BudgetDay], roster_hours: float) -> BudgetDay:
    if budget is None:
        return BudgetDay(day, 0, resolve_total_hours(None, roster_hours))
    return BudgetDay(day, budget.total_budget, resolve_total_hours(budget.total_hours, roster_hours))


def allocate_target(budget: Optional[BudgetDay], shift_hours: float) -> float:
    """Target sales for one shift.

    Args:
        budget: The day's budget with total_hours already resolved, or None
        shift_hours: Hours worked by the staff member that day

    Returns:
        shift_hours * (total_budget / total_hours), rounded half-up to a
        whole currency unit, or 0 when there is no budget or no hours
    """
    if shift_hours < 0:
        raise ValidationError(f"shift_hours must not be negative (got {shift_hours})")
    if budget is None:
        return 0
    total_budget = budget.total_budget or 0
    total_hours = budget.total_hours or 0
    if total_budget < 0 or total_hours < 0:
        raise ValidationError("Budget and hours must not be negative")
    if total_budget > 0 and total_hours > 0:
        return round_half_up(shift_hours * total_budget / total_hours)
    return 0


def effective_target(persisted: Optional[float], budget: Optional[BudgetDay], shift_hours: float) -> float:
    # A saved target stays locked in even if the budget changes later.
    if persisted and persisted > 0:
        return persisted
    return allocate_target(budget, shift_hours)
