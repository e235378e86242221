"""
Core Module - Telemetry Analytics

This module contains the analytics pipeline that runs on top of the
synthetic telemetry:
- Forecasting (linear trend per channel)
- Anomaly detection (two-sigma bands from history)
- Threshold alerts and the merged alert view
- Rule-based narrative insights

These components are framework-agnostic and are used by the API.
"""

from .forecast import fit_trend, predict_value, predict_series
from .anomaly import AnomalyDetector, ChannelBand, channel_band, detect_anomalies
from .alerts import (
    Alert,
    AlertGenerator,
    AlertKind,
    AlertThresholds,
    all_alerts,
    generate_alerts,
)
from .insights import Analysis, ChannelStatistics, InsightAnalyzer, analyze, summarize_history

__all__ = [
    # Forecasting
    "fit_trend",
    "predict_value",
    "predict_series",

    # Anomaly detection
    "AnomalyDetector",
    "ChannelBand",
    "channel_band",
    "detect_anomalies",

    # Alerts
    "Alert",
    "AlertGenerator",
    "AlertKind",
    "AlertThresholds",
    "all_alerts",
    "generate_alerts",

    # Insights
    "Analysis",
    "ChannelStatistics",
    "InsightAnalyzer",
    "analyze",
    "summarize_history",
]

__version__ = "0.1.0"
