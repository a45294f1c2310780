from dataclasses import asdict
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List
from store import KpiStore, get_store

router = APIRouter(prefix="/api/roster", tags=["roster"])


class RosterRow(BaseModel):
    staff_name: str
    date: str  # YYYY-MM-DD
    shift_hours: float = 0


@router.post("/bulk")
def bulk_roster(rows: List[RosterRow], store: KpiStore = Depends(get_store)):
    """Upsert roster rows by staff name and refresh the budgeted hours of each date."""
    count = store.bulk_upsert_roster([r.model_dump() for r in rows])
    return {"success": True, "count": count}


@router.get("/{day}")
def roster_for_day(day: str, store: KpiStore = Depends(get_store)):
    return [asdict(r) for r in store.rosters_for(day)]
