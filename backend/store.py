"""Storage boundary for the KPI tracker.

KpiStore wraps a SQLAlchemy session. Reads convert ORM rows into the typed
records from records.py; writes validate their input and run inside a single
commit/rollback so a failed batch leaves nothing behind.
"""

import logging
from datetime import date
from typing import Iterable, List, Mapping, Optional
from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from allocation import allocate_target, effective_budget
from database import get_db
from errors import ConflictError, NotFoundError, ValidationError
from records import BudgetDay, RosterEntry, SalesEntry, StaffMember
from utils import is_spreadsheet_epoch, parse_day
import models

logger = logging.getLogger(__name__)


def _amount(value, field: str) -> float:
    """Coerce an input amount to float, rejecting negatives and non-numbers."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number (got {value!r})")
    if number < 0:
        raise ValidationError(f"{field} must not be negative (got {number})")
    return number


def _staff_record(row: models.Staff) -> StaffMember:
    return StaffMember(id=row.id, name=row.name)


def _budget_record(row: models.DailyBudget) -> BudgetDay:
    return BudgetDay(date=row.date, total_budget=row.total_budget or 0, total_hours=row.total_hours or None)


def _sales_record(row: models.SalesEntry) -> SalesEntry:
    return SalesEntry(
        staff_id=row.staff_id,
        date=row.date,
        shift_hours=row.shift_hours or 0,
        actual_sales=row.actual_sales or 0,
        target_sales=row.target_sales or 0,
        ips=row.ips or 0,
        avg_sale=row.avg_sale or 0,
        jcp_sales=row.jcp_sales or 0,
    )


class KpiStore:
    def __init__(self, db: Session):
        self.db = db

    # ----- reads -----

    def list_staff(self) -> List[StaffMember]:
        rows = self.db.query(models.Staff).all()
        return sorted((_staff_record(r) for r in rows), key=lambda s: (s.name, s.id))

    def get_staff(self, staff_id: int) -> Optional[StaffMember]:
        row = self.db.get(models.Staff, staff_id)
        return _staff_record(row) if row else None

    def rosters_between(self, first: date, last: date) -> List[RosterEntry]:
        rows = (
            self.db.query(models.Roster)
            .filter(models.Roster.date >= first, models.Roster.date <= last)
            .order_by(models.Roster.date, models.Roster.staff_id)
            .all()
        )
        return [RosterEntry(staff_id=r.staff_id, date=r.date, shift_hours=r.shift_hours) for r in rows]

    def sales_between(self, first: date, last: date) -> List[SalesEntry]:
        rows = (
            self.db.query(models.SalesEntry)
            .filter(models.SalesEntry.date >= first, models.SalesEntry.date <= last)
            .order_by(models.SalesEntry.date, models.SalesEntry.staff_id)
            .all()
        )
        return [_sales_record(r) for r in rows]

    def budgets_between(self, first: date, last: date) -> List[BudgetDay]:
        rows = (
            self.db.query(models.DailyBudget)
            .filter(models.DailyBudget.date >= first, models.DailyBudget.date <= last)
            .order_by(models.DailyBudget.date)
            .all()
        )
        return [_budget_record(r) for r in rows]

    def get_budget(self, day: date) -> Optional[BudgetDay]:
        row = self.db.get(models.DailyBudget, day)
        return _budget_record(row) if row else None

    def roster_hours(self, day: date) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(models.Roster.shift_hours), 0))
            .filter(models.Roster.date == day)
            .scalar()
        )
        return float(total or 0)

    def rosters_for(self, day) -> List[RosterEntry]:
        day = parse_day(day)
        return self.rosters_between(day, day)

    def effective_budget(self, day: date) -> BudgetDay:
        """The day's budget with hours resolved; zeros when nothing is stored."""
        return effective_budget(day, self.get_budget(day), self.roster_hours(day))

    # ----- writes -----

    def _commit(self):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def add_staff(self, name: str) -> StaffMember:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if self.db.query(models.Staff).filter(models.Staff.name == name).first():
            raise ConflictError(f"Staff member {name!r} already exists")
        row = models.Staff(name=name)
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        logger.info("Added staff member %s (id=%s)", row.name, row.id)
        return _staff_record(row)

    def delete_staff(self, staff_id: int):
        row = self.db.get(models.Staff, staff_id)
        if row is None:
            raise NotFoundError(f"Staff member {staff_id} not found")
        has_sales = self.db.query(models.SalesEntry).filter(models.SalesEntry.staff_id == staff_id).count()
        has_roster = self.db.query(models.Roster).filter(models.Roster.staff_id == staff_id).count()
        if has_sales or has_roster:
            raise ConflictError("Cannot delete staff with existing sales or roster records")
        self.db.delete(row)
        self._commit()
        logger.info("Deleted staff member %s (id=%s)", row.name, staff_id)

    def upsert_budget(self, day, total_budget, total_hours) -> BudgetDay:
        day = parse_day(day)
        total_budget = _amount(total_budget, "total_budget")
        total_hours = _amount(total_hours, "total_hours")

        existing = self.db.get(models.DailyBudget, day)
        if existing:
            existing.total_budget = total_budget
            existing.total_hours = total_hours
        else:
            self.db.add(models.DailyBudget(date=day, total_budget=total_budget, total_hours=total_hours))
        self._commit()
        return BudgetDay(day, total_budget, total_hours or None)

    def bulk_upsert_budgets(self, rows: Iterable[Mapping]) -> int:
        """Upsert many budget rows in one transaction.

        Rows dated on the spreadsheet epoch are skipped. A row without
        positive hours keeps whatever hours are already stored for that date.
        """
        applied = 0
        try:
            for item in rows:
                if is_spreadsheet_epoch(item.get("date")):
                    logger.warning("Skipping budget row dated %s", item.get("date"))
                    continue
                day = parse_day(item.get("date"))
                total_budget = _amount(item.get("total_budget"), "total_budget")
                total_hours = _amount(item.get("total_hours"), "total_hours")

                existing = self.db.get(models.DailyBudget, day)
                if existing:
                    existing.total_budget = total_budget
                    if total_hours > 0:
                        existing.total_hours = total_hours
                else:
                    self.db.add(models.DailyBudget(date=day, total_budget=total_budget, total_hours=total_hours))
                    self.db.flush()
                applied += 1
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Upserted %d budget rows", applied)
        return applied

    def _resolve_staff_name(self, name: str) -> models.Staff:
        """Exact name, then a stored name contained in the imported one, else a new member.

        Both matches ignore case.
        """
        staff = (
            self.db.query(models.Staff)
            .filter(func.lower(models.Staff.name) == name.lower())
            .order_by(models.Staff.id)
            .first()
        )
        if staff:
            return staff
        folded = name.casefold()
        candidates = [s for s in self.db.query(models.Staff).all() if s.name and s.name.casefold() in folded]
        if candidates:
            return max(candidates, key=lambda s: (len(s.name), -s.id))
        staff = models.Staff(name=name)
        self.db.add(staff)
        self.db.flush()
        logger.info("Created staff member %s from roster import", name)
        return staff

    def bulk_upsert_roster(self, rows: Iterable[Mapping]) -> int:
        """Upsert roster rows by staff name, then refresh budget hours for the touched dates.

        Everything happens in one transaction; any bad row rolls back the batch.
        """
        applied = 0
        touched = set()
        try:
            for item in rows:
                if is_spreadsheet_epoch(item.get("date")):
                    logger.warning("Skipping roster row dated %s", item.get("date"))
                    continue
                name = (item.get("staff_name") or "").strip()
                if not name:
                    raise ValidationError("Roster row is missing staff_name")
                day = parse_day(item.get("date"))
                shift_hours = _amount(item.get("shift_hours"), "shift_hours")

                staff = self._resolve_staff_name(name)
                existing = self.db.get(models.Roster, (staff.id, day))
                if existing:
                    existing.shift_hours = shift_hours
                else:
                    self.db.add(models.Roster(staff_id=staff.id, date=day, shift_hours=shift_hours))
                self.db.flush()
                touched.add(day)
                applied += 1

            for day in touched:
                hours = self.roster_hours(day)
                budget = self.db.get(models.DailyBudget, day)
                if budget:
                    budget.total_hours = hours
                else:
                    self.db.add(models.DailyBudget(date=day, total_budget=0, total_hours=hours))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Upserted %d roster rows across %d dates", applied, len(touched))
        return applied

    def upsert_sales(
        self,
        staff_id: int,
        day,
        shift_hours,
        actual_sales,
        target_sales=None,
        ips=0,
        avg_sale=0,
        jcp_sales=0,
    ) -> SalesEntry:
        """Save a staff member's sales for a day, replacing any earlier submission.

        A missing or zero target is allocated from the day's budget now and
        stored, so later budget edits do not move it.
        """
        day = parse_day(day)
        if self.db.get(models.Staff, staff_id) is None:
            raise NotFoundError(f"Staff member {staff_id} not found")
        shift_hours = _amount(shift_hours, "shift_hours")
        values = {
            "shift_hours": shift_hours,
            "actual_sales": _amount(actual_sales, "actual_sales"),
            "target_sales": _amount(target_sales, "target_sales"),
            "ips": _amount(ips, "ips"),
            "avg_sale": _amount(avg_sale, "avg_sale"),
            "jcp_sales": _amount(jcp_sales, "jcp_sales"),
        }
        if values["target_sales"] <= 0:
            values["target_sales"] = allocate_target(self.effective_budget(day), shift_hours)

        existing = (
            self.db.query(models.SalesEntry)
            .filter(models.SalesEntry.staff_id == staff_id, models.SalesEntry.date == day)
            .first()
        )
        if existing:
            for key, value in values.items():
                setattr(existing, key, value)
            row = existing
        else:
            row = models.SalesEntry(staff_id=staff_id, date=day, **values)
            self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _sales_record(row)


def get_store(db: Session = Depends(get_db)) -> KpiStore:
    return KpiStore(db)
