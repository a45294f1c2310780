from dataclasses import asdict
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from store import KpiStore, get_store

router = APIRouter(prefix="/api/staff", tags=["staff"])


class StaffCreate(BaseModel):
    name: str


@router.get("")
def list_staff(store: KpiStore = Depends(get_store)):
    return [asdict(s) for s in store.list_staff()]


@router.post("", status_code=201)
def add_staff(staff: StaffCreate, store: KpiStore = Depends(get_store)):
    return asdict(store.add_staff(staff.name))


@router.delete("/{staff_id}")
def delete_staff(staff_id: int, store: KpiStore = Depends(get_store)):
    """Delete a staff member who has no roster or sales history."""
    store.delete_staff(staff_id)
    return {"success": True}
