# ========================
# api_server.py
# ========================

"""
FastAPI Server for the EV Insights Dashboard

Serves key metrics, chart payloads and paginated vehicle records to the
browser dashboard.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from ev_insights import __version__
from ev_insights.pipeline import DashboardSession, InvalidArgument
from ev_insights.utils.config import Config
from ev_insights.utils.logging_setup import setup_logging

config = Config()
setup_logging(log_level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="EV Insights Dashboard API",
    description="Electric vehicle registration metrics, charts and records",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One dashboard session per server process
session = DashboardSession(config=config)


def get_session() -> DashboardSession:
    """Return the session, loading the dataset on first use."""
    session.ensure_loaded()
    return session


def _loaded_session() -> DashboardSession:
    current = get_session()
    if current.error is not None:
        raise HTTPException(status_code=503, detail=current.notification)
    return current


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "EV Insights Dashboard API",
        "version": __version__,
        "endpoints": {
            "summary": "/summary - Key metrics and aggregates",
            "charts": "/charts - Chart payloads",
            "records": "/records?page={n} - Paginated vehicle records",
            "reload": "/reload - Load the dataset again",
            "health": "/health - Health check",
            "api_docs": "/docs - API documentation"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "dataset_loaded": session.is_loaded
    }


@app.get("/summary")
def get_summary():
    current = _loaded_session()
    aggregates = current.summary()
    return {
        "metrics": {
            "total_vehicles": len(current.dataset),
            "unique_makes": aggregates.unique_makes,
            "average_range": aggregates.average_range,
        },
        "aggregates": aggregates.to_dict()
    }


@app.get("/charts")
def get_charts():
    return _loaded_session().dashboard()["charts"]


@app.get("/records")
def get_records(page: int = Query(0, description="Zero-based page index")):
    """
    Get one page of formatted vehicle records.

    Args:
        page: Page index; out-of-range pages return no rows

    Returns:
        dict: rows, page_count and current_page
    """
    current = _loaded_session()
    try:
        return current.table_page(page)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/reload")
def reload_dataset():
    result = session.reload()
    if not result.ok:
        raise HTTPException(status_code=503, detail=session.notification)
    return {
        "status": "loaded",
        "rows": len(result.dataset),
        "timestamp": datetime.now().isoformat()
    }


def start_server(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False):
    """Start the FastAPI server."""
    host = host or config.DASHBOARD_HOST
    port = port or config.DASHBOARD_PORT
    logger.info(f"Starting EV Insights Dashboard API server on {host}:{port}")
    uvicorn.run(
        "api_server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


if __name__ == "__main__":
    start_server(reload=True)
