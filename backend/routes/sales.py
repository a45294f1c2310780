from dataclasses import asdict
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional
from aggregation import compute_day_records
from store import KpiStore, get_store

router = APIRouter(prefix="/api/sales", tags=["sales"])


class SalesSubmit(BaseModel):
    staff_id: int
    date: str  # YYYY-MM-DD
    shift_hours: float
    actual_sales: float
    target_sales: Optional[float] = None  # Allocated from the day's budget when missing
    ips: Optional[float] = 0
    avg_sale: Optional[float] = 0
    jcp_sales: Optional[float] = 0


@router.get("/{day}")
def sales_for_day(day: str, store: KpiStore = Depends(get_store)):
    """Every staff member's sales, roster hours and target for one date."""
    return [asdict(r) for r in compute_day_records(store, day)]


@router.post("")
def submit_sales(entry: SalesSubmit, store: KpiStore = Depends(get_store)):
    saved = store.upsert_sales(
        staff_id=entry.staff_id,
        day=entry.date,
        shift_hours=entry.shift_hours,
        actual_sales=entry.actual_sales,
        target_sales=entry.target_sales,
        ips=entry.ips,
        avg_sale=entry.avg_sale,
        jcp_sales=entry.jcp_sales,
    )
    return {"success": True, "entry": asdict(saved)}
