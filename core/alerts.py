"""
Threshold Alert Generation

Applies fixed comfort, efficiency and cost thresholds to the current
snapshot and its forecast. Rules are independent: several may fire
for the same snapshot and nothing is deduplicated.

Thresholds:
- Temperature above 26°C or below 18°C: warning
- Efficiency below 80%: critical
- Mean forecast power above 120% of current power: warning
- Air quality above 150 AQI: critical
- Forecast daily cost above 115% of current hourly cost x 24: info
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from engine.telemetry import HistoryBundle, PredictionPoint, TelemetrySnapshot

from .anomaly import AnomalyDetector

logger = logging.getLogger(__name__)


class AlertKind(Enum):
    """Severity of an alert."""
    WARNING = "warning"
    CRITICAL = "critical"
    INFO = "info"


@dataclass
class Alert:
    """
    A single alert raised for the building.

    Attributes:
        kind: Severity of the alert
        message: Human-readable description with the offending values
        timestamp: When the alert was raised
    """
    kind: AlertKind
    message: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.kind.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class AlertThresholds:
    """Fixed thresholds used by the alert rules."""
    high_temperature: float = 26.0          # °C
    low_temperature: float = 18.0           # °C
    critical_efficiency: float = 80.0       # %
    power_increase_ratio: float = 1.2       # forecast mean / current
    critical_air_quality: float = 150.0     # AQI
    cost_increase_ratio: float = 1.15       # forecast day / current day
    hours_per_day: int = 24


@dataclass
class AlertGenerator:
    """
    Rule-based alert generator.

    Example:
        generator = AlertGenerator()
        alerts = generator.generate(snapshot, predictions)
        for alert in alerts:
            print(alert.kind.value, alert.message)
    """
    thresholds: AlertThresholds = field(default_factory=AlertThresholds)
    clock: Callable[[], datetime] = datetime.now

    def generate(
        self,
        current: TelemetrySnapshot,
        predictions: Sequence[PredictionPoint],
    ) -> List[Alert]:
        """
        Evaluate every threshold rule.

        Args:
            current: Current readings
            predictions: Forecast for the coming hours

        Returns:
            Alerts in rule order
        """
        now = self.clock()
        alerts: List[Alert] = []
        alerts.extend(self._check_temperature(current, now))
        alerts.extend(self._check_efficiency(current, now))
        alerts.extend(self._check_power_forecast(current, predictions, now))
        alerts.extend(self._check_air_quality(current, now))
        alerts.extend(self._check_cost_forecast(current, predictions, now))
        return alerts

    def _check_temperature(self, current: TelemetrySnapshot, now: datetime) -> List[Alert]:
        t = self.thresholds
        temperature = current.building.temperature

        if temperature > t.high_temperature:
            return [Alert(
                AlertKind.WARNING,
                f"High temperature detected: {temperature}°C. Consider adjusting HVAC.",
                now,
            )]
        if temperature < t.low_temperature:
            return [Alert(
                AlertKind.WARNING,
                f"Low temperature detected: {temperature}°C. Consider increasing heating.",
                now,
            )]
        return []

    def _check_efficiency(self, current: TelemetrySnapshot, now: datetime) -> List[Alert]:
        efficiency = current.energy.efficiency
        if efficiency < self.thresholds.critical_efficiency:
            return [Alert(
                AlertKind.CRITICAL,
                f"Energy efficiency is critically low: {efficiency}%. Review equipment performance.",
                now,
            )]
        return []

    def _check_power_forecast(
        self,
        current: TelemetrySnapshot,
        predictions: Sequence[PredictionPoint],
        now: datetime,
    ) -> List[Alert]:
        if not predictions:
            return []

        power = current.energy.power_consumption
        avg_predicted = sum(p.power_consumption for p in predictions) / len(predictions)
        if avg_predicted > power * self.thresholds.power_increase_ratio:
            return [Alert(
                AlertKind.WARNING,
                f"Predicted power consumption increase: {avg_predicted:.1f} kW "
                f"(current: {power} kW)",
                now,
            )]
        return []

    def _check_air_quality(self, current: TelemetrySnapshot, now: datetime) -> List[Alert]:
        air_quality = current.building.air_quality
        if air_quality > self.thresholds.critical_air_quality:
            return [Alert(
                AlertKind.CRITICAL,
                f"Poor air quality detected: {air_quality} AQI. Increase ventilation.",
                now,
            )]
        return []

    def _check_cost_forecast(
        self,
        current: TelemetrySnapshot,
        predictions: Sequence[PredictionPoint],
        now: datetime,
    ) -> List[Alert]:
        t = self.thresholds
        predicted_daily = sum(p.cost for p in predictions)
        current_daily = current.energy.cost * t.hours_per_day

        if predicted_daily > current_daily * t.cost_increase_ratio:
            return [Alert(
                AlertKind.INFO,
                f"Predicted daily energy cost: ${predicted_daily:.2f} "
                f"(current: ${current_daily:.2f})",
                now,
            )]
        return []


def generate_alerts(
    current: TelemetrySnapshot,
    predictions: Sequence[PredictionPoint],
    thresholds: Optional[AlertThresholds] = None,
) -> List[Alert]:
    """
    Convenience function to evaluate the threshold rules.

    Args:
        current: Current readings
        predictions: Forecast for the coming hours
        thresholds: Optional custom thresholds

    Returns:
        List of alerts
    """
    generator = AlertGenerator(thresholds=thresholds or AlertThresholds())
    return generator.generate(current, predictions)


def all_alerts(
    current: TelemetrySnapshot,
    history: HistoryBundle,
    predictions: Sequence[PredictionPoint],
    clock: Callable[[], datetime] = datetime.now,
) -> List[Alert]:
    """
    Merge anomaly detector output with threshold alerts.

    Anomalies come first and are reported as warnings.

    Args:
        current: Current readings
        history: Hourly history for the anomaly bands
        predictions: Forecast for the coming hours
        clock: Callable returning the alert timestamp

    Returns:
        Combined alert list
    """
    now = clock()
    anomalies = AnomalyDetector().detect(current, history)
    merged = [Alert(AlertKind.WARNING, message, now) for message in anomalies]
    merged.extend(AlertGenerator(clock=clock).generate(current, predictions))

    logger.debug(f"Raised {len(anomalies)} anomaly and {len(merged) - len(anomalies)} threshold alerts")
    return merged
