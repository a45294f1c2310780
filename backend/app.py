import sys
import os
import logging

# Ensure backend/ is on the path for imports
sys.path.insert(0, os.path.dirname(__file__))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from database import init_db, run_migrations
from errors import KpiError, kpi_error_handler
from routes import staff, budget, roster, sales, monthly
from seed import seed_staff

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Retail KPI Tracker")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(KpiError, kpi_error_handler)

# Register route modules
app.include_router(staff.router)
app.include_router(budget.router)
app.include_router(roster.router)
app.include_router(sales.router)
app.include_router(monthly.router)


@app.on_event("startup")
def on_startup():
    init_db()
    added = run_migrations()
    if added:
        logger.info("Migrated sales_entries, added columns: %s", ", ".join(added))
    if os.environ.get("SEED_STAFF", "1") != "0":
        seed_staff()


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring services like UptimeRobot"""
    from datetime import datetime, timezone
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


if __name__ == "__main__":
    import uvicorn
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    uvicorn.run("app:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)), reload=True, reload_dirs=[backend_dir])
