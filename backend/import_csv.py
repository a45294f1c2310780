"""Import a roster or budget CSV export into the KPI tracker.

Usage:
    python import_csv.py roster rosters.csv   # staff_name,date,shift_hours
    python import_csv.py budget budgets.csv   # date,total_budget,total_hours

A header row is detected from its first cell. Dates may be D/M/YYYY or
YYYY-MM-DD. Each file is imported in a single transaction.
"""
import sys
import os
import csv
import logging

sys.path.insert(0, os.path.dirname(__file__))

from database import SessionLocal, init_db
from store import KpiStore
from utils import normalize_day, is_spreadsheet_epoch

logger = logging.getLogger(__name__)

HEADER_HINTS = {
    "roster": ("name", "employee", "staff"),
    "budget": ("date",),
}


def _has_header(first_row, kind: str) -> bool:
    cell = (first_row[0] if first_row else "").strip().lower()
    return any(hint in cell for hint in HEADER_HINTS[kind])


def _number(cell) -> float:
    try:
        return float(cell)
    except (TypeError, ValueError):
        return 0.0


def read_rows(lines, kind: str):
    """Turn CSV lines into the row mappings KpiStore's bulk methods accept."""
    rows = [r for r in csv.reader(lines) if r and any(c.strip() for c in r)]
    if rows and _has_header(rows[0], kind):
        rows = rows[1:]

    parsed = []
    for row in rows:
        if kind == "roster":
            if len(row) < 2 or not row[0].strip() or not row[1].strip():
                continue
            day = normalize_day(row[1])
            if is_spreadsheet_epoch(day):
                logger.warning("Skipping roster row for %s dated %s", row[0].strip(), day)
                continue
            parsed.append({
                "staff_name": row[0].strip(),
                "date": day,
                "shift_hours": _number(row[2]) if len(row) > 2 else 0,
            })
        else:
            if not row[0].strip():
                continue
            day = normalize_day(row[0])
            if is_spreadsheet_epoch(day):
                logger.warning("Skipping budget row dated %s", day)
                continue
            parsed.append({
                "date": day,
                "total_budget": _number(row[1]) if len(row) > 1 else 0,
                "total_hours": _number(row[2]) if len(row) > 2 else 0,
            })
    return parsed


def import_file(path: str, kind: str, db=None) -> int:
    if kind not in HEADER_HINTS:
        raise ValueError(f"Unknown import kind: {kind} (expected roster or budget)")
    with open(path, "r", newline="") as f:
        rows = read_rows(f, kind)

    close_db = False
    if db is None:
        db = SessionLocal()
        close_db = True
    try:
        store = KpiStore(db)
        if kind == "roster":
            return store.bulk_upsert_roster(rows)
        return store.bulk_upsert_budgets(rows)
    finally:
        if close_db:
            db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    init_db()
    kind, path = sys.argv[1], sys.argv[2]
    count = import_file(path, kind)
    print(f"✓ Imported {count} {kind} rows from {path}")
