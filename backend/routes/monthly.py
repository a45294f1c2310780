from dataclasses import asdict
from fastapi import APIRouter, Depends
from aggregation import compute_monthly_details, compute_monthly_summary, compute_staff_tracker
from store import KpiStore, get_store

router = APIRouter(prefix="/api/monthly", tags=["monthly"])


@router.get("/{year}/{month}/summary")
def monthly_summary(year: int, month: int, store: KpiStore = Depends(get_store)):
    """Per-staff monthly totals, store totals and the day-by-day budget series."""
    return asdict(compute_monthly_summary(store, year, month))


@router.get("/{year}/{month}/details")
def monthly_details(year: int, month: int, store: KpiStore = Depends(get_store)):
    return [asdict(r) for r in compute_monthly_details(store, year, month)]


@router.get("/{year}/{month}/tracker/{staff_id}")
def staff_tracker(year: int, month: int, staff_id: int, store: KpiStore = Depends(get_store)):
    """Individual tracker: weekly blocks with month-to-date running totals."""
    return asdict(compute_staff_tracker(store, staff_id, year, month))
