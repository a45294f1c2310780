from sqlalchemy import Column, Integer, Float, String, Date, ForeignKey, UniqueConstraint
from database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)


class DailyBudget(Base):
    __tablename__ = "daily_budgets"

    date = Column(Date, primary_key=True)
    total_budget = Column(Float, nullable=False, default=0)   # Planned store sales for the day
    total_hours = Column(Float, nullable=False, default=0)    # 0 = use rostered hours


class Roster(Base):
    __tablename__ = "rosters"

    staff_id = Column(Integer, ForeignKey("staff.id"), primary_key=True)
    date = Column(Date, primary_key=True)
    shift_hours = Column(Float, nullable=False)


class SalesEntry(Base):
    __tablename__ = "sales_entries"
    __table_args__ = (
        UniqueConstraint("staff_id", "date", name="uq_sales_staff_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    date = Column(Date, nullable=False)
    shift_hours = Column(Float, nullable=False)
    actual_sales = Column(Float, nullable=False)
    target_sales = Column(Float, nullable=False)  # Allocated at submit time, not recomputed
    ips = Column(Float, default=0)                # Items per sale
    avg_sale = Column(Float, default=0)
    jcp_sales = Column(Float, default=0)
