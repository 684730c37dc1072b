# ========================
# api_server.py
# ========================

"""
FastAPI Server for the EV Population Dashboard

Loads the EV registration CSV on startup and serves the dashboard data
(KPIs, chart aggregates, option lists, table rows) as JSON.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from src.ev_pipeline import DashboardPipeline, FilterSelection, LoadStatus
from src.ev_pipeline.filtering import filter_records
from src.utils.config import Config
from src.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

DATASET_PENDING_MSG = "Dataset is still loading"


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        config (Config): Configuration object; read from the environment if omitted

    Returns:
        FastAPI: Application whose lifespan loads the dataset
    """
    config = config or Config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        result = await app.state.pipeline.load_async()
        if result.ok:
            logger.info(f"Dashboard data ready: {len(app.state.pipeline.records)} records")
        else:
            logger.error(f"Dashboard data unavailable: {result.error}")
        yield

    app = FastAPI(
        title="EV Population Dashboard API",
        description="Summary statistics and chart data for electric vehicle registrations",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.pipeline = DashboardPipeline(config=config)

    # Allow a separately hosted dashboard frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "EV Population Dashboard API",
            "version": "1.0.0",
            "endpoints": {
                "health": "/health - Health check",
                "status": "/status - Dataset load status",
                "dashboard": "/dashboard?year=All&state=All - KPIs, charts and table sample",
                "options": "/options - Year and state dropdown options",
                "records": "/records?year=All&state=All&limit=20 - Filtered records",
                "api_docs": "/docs - API documentation"
            }
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "load_status": request.app.state.pipeline.status.value
        }

    @app.get("/status")
    async def load_status(request: Request):
        """Dataset load status and data quality counters."""
        return request.app.state.pipeline.get_statistics()

    @app.get("/dashboard")
    async def dashboard(
        request: Request,
        year: str = Query("All", description='"All" or a model year'),
        state: str = Query("All", description='"All" or a state code'),
        current_year: Optional[int] = Query(None, description="Year used for the 'this year' KPI")
    ):
        """
        Everything the dashboard renders for one filter selection.

        Returns:
            dict: selection, kpis, yearly, topStates, vehicleTypes, options, table
        """
        pipeline = _ready_pipeline(request)
        view = pipeline.build_view(
            FilterSelection(year=year, state=state),
            current_year=current_year,
        )
        return view.to_dict()

    @app.get("/options")
    async def options(request: Request):
        """Dropdown options derived from the full cleaned dataset."""
        return _ready_pipeline(request).options.to_dict()

    @app.get("/records")
    async def records(
        request: Request,
        year: str = Query("All"),
        state: str = Query("All"),
        limit: int = Query(20, ge=1, le=1000, description="Maximum number of records to return")
    ):
        """Filtered cleaned records."""
        pipeline = _ready_pipeline(request)
        filtered = filter_records(pipeline.records, FilterSelection(year=year, state=state))
        return {
            "total": len(filtered),
            "records": [record.to_dict() for record in filtered[:limit]]
        }

    return app


def _ready_pipeline(request: Request) -> DashboardPipeline:
    """Return the loaded pipeline or raise the HTTP error for its load state."""
    pipeline = request.app.state.pipeline
    if pipeline.status is LoadStatus.PENDING:
        raise HTTPException(status_code=503, detail=DATASET_PENDING_MSG)
    if pipeline.status is LoadStatus.FAILURE:
        raise HTTPException(status_code=502, detail=pipeline.error)
    return pipeline


def start_server(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False):
    """Start the FastAPI server."""
    config = Config()
    host = host or config.API_HOST
    port = port or config.API_PORT
    logger.info(f"Starting EV Population Dashboard API server on {host}:{port}")
    uvicorn.run(
        "api_server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


setup_logging(log_level=Config().LOG_LEVEL)
app = create_app()

if __name__ == "__main__":
    start_server(reload=True)
