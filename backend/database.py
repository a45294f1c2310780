from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase
import logging
import os

logger = logging.getLogger(__name__)

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///kpi_tracker.db")

# Supabase/Heroku sometimes return postgres://; SQLAlchemy requires postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    import models  # noqa: F401  register tables on Base.metadata
    Base.metadata.create_all(bind=bind or engine)


# Columns added to sales_entries after the first release.
SALES_ENTRY_COLUMNS = ("ips", "avg_sale", "jcp_sales")


def run_migrations(bind=None):
    """Add metric columns to a sales_entries table created by an older version."""
    bind = bind or engine
    columns = [col["name"] for col in inspect(bind).get_columns("sales_entries")]
    missing = [name for name in SALES_ENTRY_COLUMNS if name not in columns]
    if not missing:
        return []

    try:
        with bind.begin() as conn:
            for name in missing:
                logger.info("Adding %s column to sales_entries", name)
                conn.execute(text(f"ALTER TABLE sales_entries ADD COLUMN {name} FLOAT DEFAULT 0"))
    except Exception:
        logger.exception("Migration of sales_entries failed")
        raise
    return missing
