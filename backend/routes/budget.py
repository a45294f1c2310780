from dataclasses import asdict
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import List, Optional
from allocation import allocate_target
from store import KpiStore, get_store
from utils import parse_day

router = APIRouter(prefix="/api/budget", tags=["budget"])


class BudgetEntry(BaseModel):
    date: str  # YYYY-MM-DD
    total_budget: float = 0
    total_hours: Optional[float] = 0  # 0 = use rostered hours


@router.post("")
def save_budget(entry: BudgetEntry, store: KpiStore = Depends(get_store)):
    store.upsert_budget(entry.date, entry.total_budget, entry.total_hours)
    return {"success": True}


@router.post("/bulk")
def bulk_budget(entries: List[BudgetEntry], store: KpiStore = Depends(get_store)):
    """Import many budget rows at once; the whole batch succeeds or fails together."""
    count = store.bulk_upsert_budgets([e.model_dump() for e in entries])
    return {"success": True, "count": count}


@router.get("/{day}")
def get_budget(day: str, store: KpiStore = Depends(get_store)):
    """Budget for a date with hours resolved from the roster when not entered."""
    return asdict(store.effective_budget(parse_day(day)))


@router.get("/{day}/target")
def target_for_shift(
    day: str,
    shift_hours: float = Query(..., description="Hours of the shift to allocate a target for"),
    store: KpiStore = Depends(get_store),
):
    budget = store.effective_budget(parse_day(day))
    return {
        "date": budget.date,
        "shift_hours": shift_hours,
        "target_sales": allocate_target(budget, shift_hours),
    }
