"""
API Routes Module

This module contains all API endpoint implementations organized by function:
- data.py: Current snapshot, history and scenario endpoints
- alerts.py: Prediction, anomaly and alert endpoints
- analysis.py: Rule-based narrative analysis

All routers are combined in main.py to create the complete API.
"""

from .data import router as data_router
from .alerts import router as alerts_router
from .analysis import router as analysis_router

__all__ = [
    "data_router",
    "alerts_router",
    "analysis_router",
]
