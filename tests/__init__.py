"""
Test Suite for Building Telemetry Twin

This module contains tests for:
- Scenario rotation (test_scenarios.py)
- Metric generation and history (test_generator.py)
- Forecasting (test_forecast.py)
- Anomaly detection (test_anomaly.py)
- Threshold alerts (test_alerts.py)
- Narrative insights (test_insights.py)
- API endpoints (test_api.py)

Run tests with:
    pytest tests/ -v
    pytest tests/ --cov=core --cov=engine --cov=api
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
