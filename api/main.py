"""
Building Telemetry Twin - FastAPI Application

This is the main entry point for the FastAPI backend.
It combines all route modules and provides system-wide endpoints.

Features:
- Synthetic building and energy snapshots with scenario rotation
- Hourly history for charts and baselines
- Linear-trend forecasts, anomaly detection and threshold alerts
- Rule-based narrative analysis
- Response caching and per-client rate limits
- Interactive API documentation (Swagger/OpenAPI)

Access Points:
- API Root: http://localhost:8000
- Swagger Docs: http://localhost:8000/docs
- ReDoc: http://localhost:8000/redoc
"""

import os
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from api import __version__
from api.dependencies import get_generator
from api.routes import data_router, alerts_router, analysis_router
from api.models import ErrorResponse, SystemHealth
from api.rate_limit import limiter
from api.settings import get_cors_origins, get_log_level, is_debug
from engine.generator import TelemetryGenerator

# =========================================
# Logging Configuration
# =========================================

logging.basicConfig(
    level=getattr(logging, get_log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =========================================
# Application Lifespan
# =========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Creates the shared generator on startup so the scenario rotation
    starts with the process rather than the first request.
    """
    logger.info("Starting Building Telemetry Twin API...")

    generator = get_generator()
    logger.info(f"Scenario rotation started in: {generator.state_machine.state.active.value}")
    logger.info("API Documentation: http://localhost:8000/docs")

    yield

    logger.info("Shutting down Building Telemetry Twin API...")


# =========================================
# FastAPI Application
# =========================================

app = FastAPI(
    title="Building Telemetry Twin API",
    description="""
## Synthetic Building & Energy Telemetry

A simulated sensor fleet for an office building with a lightweight
analytics pipeline on top.

### Core Concepts

#### Scenarios
The simulator rotates through operating scenarios (normal operation,
high occupancy, energy spikes, HVAC faults, extreme temperature, air
quality and humidity). Force one with `?scenario=` on `/api/v1/data/iot`.

#### Forecasts
Each channel's hourly history is fitted with a linear trend and
extrapolated hour by hour.

#### Alerts
Two-sigma anomaly bands from history plus fixed comfort, efficiency
and cost thresholds.

### Quick Start

1. **Check API health**: `GET /health`
2. **Current readings**: `GET /api/v1/data/iot`
3. **History**: `GET /api/v1/data/history?hours=24`
4. **Alerts**: `GET /api/v1/alerts`
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# =========================================
# CORS Middleware
# =========================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================
# Rate Limiting
# =========================================

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# =========================================
# Exception Handlers
# =========================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions with consistent format."""
    body = ErrorResponse(
        message=str(exc.detail),
        status_code=exc.status_code,
        timestamp=datetime.now()
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json")
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": "An unexpected error occurred",
            "detail": str(exc) if is_debug() else None,
            "timestamp": datetime.now().isoformat()
        }
    )


# =========================================
# Include Routers
# =========================================

app.include_router(data_router, prefix="/api/v1")
app.include_router(alerts_router, prefix="/api/v1")
app.include_router(analysis_router, prefix="/api/v1")


# =========================================
# Root Endpoints
# =========================================

@app.get(
    "/",
    tags=["System"],
    summary="API Root",
    description="Welcome endpoint with API information"
)
async def root():
    """API root endpoint."""
    return {
        "name": "Building Telemetry Twin API",
        "version": __version__,
        "description": "Synthetic building telemetry with forecasts and alerts",
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api/v1"
    }


@app.get(
    "/health",
    response_model=SystemHealth,
    tags=["System"],
    summary="System Health Check",
    description="Check the health status of the API and the simulator"
)
async def health_check(generator: TelemetryGenerator = Depends(get_generator)):
    """System health check endpoint."""
    return SystemHealth(
        status="ok",
        version=__version__,
        timestamp=datetime.now(),
        components={
            "api": "ok",
            "generator": "ok",
            "scenario": generator.state_machine.state.active.value,
        }
    )


# =========================================
# Run with Uvicorn (for development)
# =========================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", 8000)),
        reload=os.getenv("API_RELOAD", "true").lower() == "true",
        log_level=get_log_level().lower()
    )
