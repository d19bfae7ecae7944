"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import dashboard, exchange_rates, preferences, rebalancing, snapshots
from config import settings
from database import get_session_local
from logging_config import setup_logging
from services.rebalancing_service import target_sum_warning
from services.snapshot_feed import SnapshotFeed

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the state of the snapshot store on startup."""
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        summaries = SnapshotFeed.list_snapshots(db)
        if summaries:
            logger.info(
                "Snapshot store: %d snapshots, %s .. %s (display currency %s)",
                len(summaries),
                summaries[0].date,
                summaries[-1].date,
                settings.DISPLAY_CURRENCY,
            )
        else:
            logger.info("Snapshot store is empty")

        warning = target_sum_warning(
            SnapshotFeed.list_categories(db), settings.TARGET_SUM_TOLERANCE
        )
        if warning is not None:
            logger.warning(warning.message)
    except Exception:
        logger.warning("Snapshot store check failed on startup", exc_info=True)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Snapshot Portfolio Analytics",
    description="Valuation, performance and rebalancing over portfolio snapshots",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(dashboard.router)
app.include_router(exchange_rates.router)
app.include_router(preferences.router)
app.include_router(rebalancing.router)
app.include_router(snapshots.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
