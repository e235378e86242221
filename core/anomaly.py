"""
Anomaly Detection Against Historical Bands

Flags current readings that fall outside two standard deviations of
the channel's history. The direction of the check depends on what
counts as bad for the channel:

- Temperature, power: either direction
- Efficiency: only below the band
- Air quality: only above the band
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from engine.telemetry import HistoryBundle, TelemetrySnapshot, TimeSeriesPoint

SIGMA_MULTIPLIER = 2.0


@dataclass
class ChannelBand:
    """Population mean and standard deviation of a channel."""
    mean: float
    std_dev: float

    @property
    def lower(self) -> float:
        return self.mean - SIGMA_MULTIPLIER * self.std_dev

    @property
    def upper(self) -> float:
        return self.mean + SIGMA_MULTIPLIER * self.std_dev

    def deviates(self, value: float) -> bool:
        return abs(value - self.mean) > SIGMA_MULTIPLIER * self.std_dev


def channel_band(points: Sequence[TimeSeriesPoint]) -> ChannelBand:
    """Compute mean and population standard deviation (0/0 when empty)."""
    if not points:
        return ChannelBand(mean=0.0, std_dev=0.0)

    values = [p.value for p in points]
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return ChannelBand(mean=mean, std_dev=math.sqrt(variance))


class AnomalyDetector:
    """
    Compares a snapshot to history-derived two-sigma bands.

    Example:
        detector = AnomalyDetector()
        messages = detector.detect(snapshot, history)
    """

    def detect(self, current: TelemetrySnapshot, history: HistoryBundle) -> List[str]:
        """
        Detect anomalies in the current snapshot.

        Args:
            current: Current readings
            history: Hourly history to derive bands from

        Returns:
            One message per flagged channel, each naming the current
            value and the historical average
        """
        anomalies: List[str] = []
        building = current.building
        energy = current.energy

        temp = channel_band(history.building["temperature"])
        if temp.deviates(building.temperature):
            anomalies.append(
                f"Temperature anomaly: {building.temperature}°C "
                f"(avg: {temp.mean:.1f}°C)"
            )

        power = channel_band(history.energy["power_consumption"])
        if power.deviates(energy.power_consumption):
            anomalies.append(
                f"Power consumption anomaly: {energy.power_consumption} kW "
                f"(avg: {power.mean:.1f} kW)"
            )

        efficiency = channel_band(history.energy["efficiency"])
        if energy.efficiency < efficiency.lower:
            anomalies.append(
                f"Energy efficiency below normal: {energy.efficiency}% "
                f"(avg: {efficiency.mean:.1f}%)"
            )

        air_quality = channel_band(history.building["air_quality"])
        if building.air_quality > air_quality.upper:
            anomalies.append(
                f"Air quality concern: {building.air_quality} AQI "
                f"(avg: {air_quality.mean:.1f} AQI)"
            )

        return anomalies


def detect_anomalies(current: TelemetrySnapshot, history: HistoryBundle) -> List[str]:
    """
    Convenience function to detect anomalies.

    Args:
        current: Current readings
        history: Hourly history bundle

    Returns:
        List of anomaly messages
    """
    return AnomalyDetector().detect(current, history)
