"""Seed the staff table with the store's current team."""
import sys
import os
import logging

sys.path.insert(0, os.path.dirname(__file__))

from database import SessionLocal, init_db
from models import Staff

logger = logging.getLogger(__name__)

DEFAULT_STAFF = ["Bharath", "Harry", "Arcadia", "Breeana", "Gurleen", "Likitha", "Isis", "Bronson"]


def seed_staff(db=None, names=DEFAULT_STAFF):
    """Insert the default staff list when the staff table is empty.

    Returns:
        Number of staff members inserted (0 if the table already had rows)
    """
    close_db = False
    if db is None:
        db = SessionLocal()
        close_db = True

    try:
        if db.query(Staff).count() > 0:
            return 0
        for name in names:
            db.add(Staff(name=name))
        db.commit()
        logger.info("Seeded %d staff members", len(names))
        return len(names)
    except Exception:
        db.rollback()
        raise
    finally:
        if close_db:
            db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    inserted = seed_staff()
    print(f"✓ Seeded {inserted} staff members" if inserted else "Staff table already populated, nothing to do")
