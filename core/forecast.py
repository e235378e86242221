"""
Forecast Engine for Building and Energy Channels

Short-horizon forecasts from an ordinary least squares trend fitted
over the hourly history of each channel.

The fit uses the point index as x, so a history with one point per
hour extrapolates one index per forecast hour.

Cost forecasts use a flat average tariff rather than the generator's
peak/off-peak tariff.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple, Union

from engine.telemetry import HistoryBundle, PredictionPoint, TimeSeriesPoint

logger = logging.getLogger(__name__)

FORECAST_COST_RATE = 0.12  # USD/kWh average tariff


def _as_values(points: Sequence[Union[TimeSeriesPoint, float]]) -> List[float]:
    return [p.value if isinstance(p, TimeSeriesPoint) else float(p) for p in points]


def fit_trend(values: Sequence[float]) -> Tuple[float, float]:
    """
    Fit value = slope * index + intercept by ordinary least squares.

    Args:
        values: Channel values ordered by time (at least two)

    Returns:
        Tuple of (slope, intercept)
    """
    n = len(values)
    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    sum_xx = (n - 1) * n * (2 * n - 1) / 6

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def predict_value(
    points: Sequence[Union[TimeSeriesPoint, float]],
    hours_ahead: int,
) -> float:
    """
    Extrapolate a channel's linear trend.

    With fewer than two points there is no trend to fit; the last value
    (or 0 for an empty series) is returned unchanged.

    Args:
        points: Historical points (or plain values) ordered by time
        hours_ahead: Hours past the last point to predict

    Returns:
        Predicted value, non-negative, rounded to 2 decimals
    """
    values = _as_values(points)
    if len(values) < 2:
        return values[-1] if values else 0

    slope, intercept = fit_trend(values)
    predicted = slope * (len(values) - 1 + hours_ahead) + intercept
    return max(0.0, round(predicted, 2))


def predict_series(
    history: HistoryBundle,
    hours_ahead: int = 24,
    now: Optional[datetime] = None,
) -> List[PredictionPoint]:
    """
    Forecast every monitored channel for the next hours.

    Args:
        history: Hourly history bundle
        hours_ahead: Number of hours to forecast
        now: Reference time for prediction timestamps

    Returns:
        One PredictionPoint per hour, ordered by timestamp. Empty when
        hours_ahead is not positive.
    """
    if hours_ahead <= 0:
        return []

    now = now or datetime.now()
    power = history.energy["power_consumption"]
    efficiency = history.energy["efficiency"]
    temperature = history.building["temperature"]
    occupancy = history.building["occupancy"]
    air_quality = history.building["air_quality"]

    predictions: List[PredictionPoint] = []
    for i in range(1, hours_ahead + 1):
        predicted_power = predict_value(power, i)
        predicted_efficiency = predict_value(efficiency, i)
        predicted_aq = predict_value(air_quality, i)

        predictions.append(PredictionPoint(
            timestamp=now + timedelta(hours=i),
            power_consumption=predicted_power,
            cost=round(predicted_power * FORECAST_COST_RATE, 2),
            efficiency=max(0.0, min(100.0, round(predicted_efficiency, 1))),
            temperature=round(predict_value(temperature, i), 1),
            occupancy=max(0, int(round(predict_value(occupancy, i)))),
            air_quality=max(0, min(500, int(round(predicted_aq)))),
        ))

    logger.debug(f"Forecast {len(predictions)} hours from {len(history)} history points")
    return predictions
