"""
Telemetry Data Structures

Dataclasses for the snapshots and time series produced by the
generator and consumed by the forecasting and alerting layers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from .scenarios import Scenario


class HVACStatus(Enum):
    """Operating state reported by the HVAC plant."""
    ACTIVE = "active"
    IDLE = "idle"
    MAINTENANCE = "maintenance"


@dataclass
class BuildingSnapshot:
    """
    Point-in-time building reading.

    Temperature in °C, occupancy in people, air quality as AQI (0-500)
    and relative humidity in %.
    """
    temperature: float
    occupancy: int
    hvac_status: HVACStatus
    air_quality: int
    humidity: float
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "temperature": self.temperature,
            "occupancy": self.occupancy,
            "hvac_status": self.hvac_status.value,
            "air_quality": self.air_quality,
            "humidity": self.humidity,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class EnergySnapshot:
    """
    Point-in-time energy reading.

    Power and peak usage in kW, cost in USD per hour, carbon
    footprint in kg CO2, efficiency and renewable share in %.
    """
    power_consumption: float
    efficiency: float
    cost: float
    peak_usage: float
    renewable_percentage: float
    carbon_footprint: float
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "power_consumption": self.power_consumption,
            "efficiency": self.efficiency,
            "cost": self.cost,
            "peak_usage": self.peak_usage,
            "renewable_percentage": self.renewable_percentage,
            "carbon_footprint": self.carbon_footprint,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class TelemetrySnapshot:
    """Building and energy readings taken under the same scenario."""
    building: BuildingSnapshot
    energy: EnergySnapshot
    scenario: Scenario = Scenario.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "building": self.building.to_dict(),
            "energy": self.energy.to_dict(),
            "scenario": self.scenario.value,
        }


@dataclass
class TimeSeriesPoint:
    """A single timestamped channel value."""
    timestamp: datetime
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp.isoformat(), "value": self.value}


BUILDING_CHANNELS = ["temperature", "occupancy", "air_quality", "humidity"]
ENERGY_CHANNELS = [
    "power_consumption",
    "efficiency",
    "cost",
    "peak_usage",
    "renewable_percentage",
]


def _empty_channels(names: List[str]) -> Dict[str, List[TimeSeriesPoint]]:
    return {name: [] for name in names}


@dataclass
class HistoryBundle:
    """
    Hourly time series for every building and energy channel.

    Each channel list is in chronological order; the generator appends
    samples oldest first.
    """
    building: Dict[str, List[TimeSeriesPoint]] = field(
        default_factory=lambda: _empty_channels(BUILDING_CHANNELS)
    )
    energy: Dict[str, List[TimeSeriesPoint]] = field(
        default_factory=lambda: _empty_channels(ENERGY_CHANNELS)
    )

    def append(self, building: BuildingSnapshot, energy: EnergySnapshot) -> None:
        """Append one sample of every channel."""
        for name in BUILDING_CHANNELS:
            self.building[name].append(
                TimeSeriesPoint(building.timestamp, getattr(building, name))
            )
        for name in ENERGY_CHANNELS:
            self.energy[name].append(
                TimeSeriesPoint(energy.timestamp, getattr(energy, name))
            )

    def channel(self, name: str) -> List[TimeSeriesPoint]:
        """Look up a channel by name in either subsystem."""
        if name in self.building:
            return self.building[name]
        if name in self.energy:
            return self.energy[name]
        raise KeyError(f"Unknown channel: {name}")

    def values(self, name: str) -> List[float]:
        return [p.value for p in self.channel(name)]

    def __len__(self) -> int:
        return len(self.building["temperature"])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "building": {
                name: [p.to_dict() for p in points]
                for name, points in self.building.items()
            },
            "energy": {
                name: [p.to_dict() for p in points]
                for name, points in self.energy.items()
            },
        }


@dataclass
class PredictionPoint:
    """Forecast of the monitored channels for one future hour."""
    timestamp: datetime
    power_consumption: float
    cost: float
    efficiency: float
    temperature: float
    occupancy: int
    air_quality: int

    def energy_dict(self) -> Dict[str, Any]:
        return {
            "power_consumption": self.power_consumption,
            "cost": self.cost,
            "efficiency": self.efficiency,
            "timestamp": self.timestamp.isoformat(),
        }

    def building_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "occupancy": self.occupancy,
            "air_quality": self.air_quality,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = self.energy_dict()
        data.update(self.building_dict())
        return data

