"""
Prediction and Alert Endpoints

Forecasts, anomaly detection and the merged alert view. Every request
works against a fresh current snapshot and a history window (168 hours
by default, see PREDICTION_HISTORY_HOURS).
"""

import logging

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_generator
from api.models import AlertsResponse, AnomaliesResponse, PredictionsResponse
from api.rate_limit import limiter
from api.settings import get_alerts_rate_limit, get_prediction_history_hours
from core.alerts import all_alerts
from core.anomaly import detect_anomalies
from core.forecast import predict_series
from engine.generator import TelemetryGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["Predictions & Alerts"])

DEFAULT_ALERT_HORIZON_HOURS = 24


@router.get(
    "/predictions",
    response_model=PredictionsResponse,
    summary="Forecast",
    description="Linear-trend forecast of energy and building channels."
)
@limiter.limit(get_alerts_rate_limit)
def get_predictions(
    request: Request,
    hours: int = Query(24, ge=1, le=168, description="Hours to forecast"),
    generator: TelemetryGenerator = Depends(get_generator),
):
    """Get predictions for energy and building metrics."""
    history = generator.generate_history(get_prediction_history_hours())
    now = generator.clock()
    predictions = predict_series(history, hours, now=now)

    return {
        "energy": [p.energy_dict() for p in predictions],
        "building": [p.building_dict() for p in predictions],
        "generated_at": now,
    }


@router.get(
    "/anomalies",
    response_model=AnomaliesResponse,
    summary="Detect anomalies",
    description="Compare the current snapshot with two-sigma bands from history."
)
@limiter.limit(get_alerts_rate_limit)
def get_anomalies(
    request: Request,
    generator: TelemetryGenerator = Depends(get_generator),
):
    """Detect anomalies in current data."""
    current = generator.generate_current_snapshot()
    history = generator.generate_history(get_prediction_history_hours())

    anomalies = detect_anomalies(current, history)
    if anomalies:
        logger.info(f"Detected {len(anomalies)} anomalies under {current.scenario.value}")

    return AnomaliesResponse(anomalies=anomalies, detected_at=generator.clock())


@router.get(
    "",
    response_model=AlertsResponse,
    summary="All alerts",
    description="Anomalies (as warnings) followed by threshold alerts."
)
@limiter.limit(get_alerts_rate_limit)
def get_alerts(
    request: Request,
    generator: TelemetryGenerator = Depends(get_generator),
):
    """Get all alerts (anomalies + threshold-based alerts)."""
    current = generator.generate_current_snapshot()
    history = generator.generate_history(get_prediction_history_hours())
    predictions = predict_series(
        history, DEFAULT_ALERT_HORIZON_HOURS, now=generator.clock()
    )

    alerts = all_alerts(current, history, predictions, clock=generator.clock)

    return {
        "alerts": [a.to_dict() for a in alerts],
        "count": len(alerts),
        "generated_at": generator.clock(),
    }
