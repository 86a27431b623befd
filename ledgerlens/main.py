"""
FastAPI application entry point for the Ledger Lens API.

This module serves as the central orchestration file for the Python backend service layer.
It configures logging and CORS, registers the API routers, and starts the ASGI server.

The analytics services are pure functions with no connections to open or
close, so the lifespan hook only logs startup and shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledgerlens import __version__
from ledgerlens.api import profitability_router, receivables_router, sales_router
from ledgerlens.core.config import get_settings
from ledgerlens.core.dependencies import SettingsDep
from ledgerlens.services.receivable_aging import BUCKET_MIDPOINTS

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    On startup:
        - Log startup message with the effective benchmarks

    On shutdown:
        - Log shutdown message
    """
    # Startup
    logger.info(f"{settings.app_name} starting")
    logger.info(
        f"Benchmarks: margin {settings.profit_margin_benchmark}%, "
        f"risk {settings.risk_score_benchmark}, "
        f"CLV lifespan {settings.clv_base_lifespan_years}y"
    )

    yield

    # Shutdown
    logger.info(f"{settings.app_name} shutting down")


# Create FastAPI application
app = FastAPI(
    title="Ledger Lens API",
    version=__version__,
    description=(
        "FastAPI backend for Ledger Lens financial analytics. "
        "Provides endpoints for order-to-cash, receivables, prepayments, "
        "variance, customer lifetime value, profitability risk, "
        "sensitivity and time-series decomposition."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware
# The dashboard proxies to FastAPI from its dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Dashboard dev server
        "http://127.0.0.1:3000",  # Alternative localhost
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers (each router has its own prefix)
app.include_router(sales_router)
app.include_router(receivables_router)
app.include_router(profitability_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer health checks.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/config/analytics")
async def analytics_config(current: SettingsDep) -> Dict[str, Any]:
    """
    Effective analytics parameters.

    Returns:
        Dict of the benchmarks and defaults the endpoints apply
    """
    return {
        "clvBaseLifespanYears": current.clv_base_lifespan_years,
        "clvDefaultProfitMargin": current.clv_default_profit_margin,
        "profitMarginBenchmark": current.profit_margin_benchmark,
        "riskScoreBenchmark": current.risk_score_benchmark,
        "riskGradeMediumCutoff": current.risk_grade_medium_cutoff,
        "riskGradeHighCutoff": current.risk_grade_high_cutoff,
        "sensitivitySteps": current.sensitivity_steps,
        "decompositionPeriod": current.decomposition_period,
        "defaultCurrency": current.default_currency,
        "agingBucketMidpoints": {bucket.value: days for bucket, days in BUCKET_MIDPOINTS.items()},
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ledgerlens.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
