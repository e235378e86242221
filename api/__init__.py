"""
API Module - FastAPI Backend

This module provides the REST API for the Building Telemetry Twin.

Key Components:
- main.py: FastAPI application and root endpoints
- models.py: Pydantic schemas for request/response validation
- settings.py: Environment-driven configuration
- dependencies.py: Shared telemetry generator and response cache
- cache.py: TTL response cache
- rate_limit.py: Per-client request limits
- routes/: API endpoint implementations

Endpoints:
- GET /api/v1/data/iot: Current building and energy snapshot
- GET /api/v1/data/history: Hourly history
- GET /api/v1/data/scenarios: Scenario catalogue
- GET /api/v1/alerts/predictions: Forecasts
- GET /api/v1/alerts/anomalies: Anomaly detection
- GET /api/v1/alerts: Merged alert list
- POST /api/v1/analysis: Rule-based analysis
"""

__version__ = "0.1.0"
