"""
Pydantic Models for API Request/Response Validation

This module defines the data models used by the API for:
- Request body validation
- Response serialization
- Documentation generation (OpenAPI/Swagger)

All models use Pydantic v2 syntax for validation and serialization.
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from core.alerts import AlertKind
from engine.scenarios import Scenario
from engine.telemetry import BuildingSnapshot, EnergySnapshot, HVACStatus, TelemetrySnapshot


# =========================================
# Telemetry Models
# =========================================

class BuildingKPIs(BaseModel):
    """Building metrics for one point in time."""
    temperature: float = Field(..., description="Indoor temperature (°C)", ge=-20, le=60)
    occupancy: int = Field(..., description="People in the building", ge=0)
    hvac_status: HVACStatus = Field(..., description="active, idle, or maintenance")
    air_quality: int = Field(..., description="Air Quality Index (0-500)", ge=0, le=500)
    humidity: float = Field(..., description="Relative humidity (%)", ge=0, le=100)
    timestamp: datetime = Field(..., description="Time of the reading")


class EnergyKPIs(BaseModel):
    """Energy metrics for one point in time."""
    power_consumption: float = Field(..., description="Power draw (kW)", ge=0)
    efficiency: float = Field(..., description="Plant efficiency (%)", ge=0, le=100)
    cost: float = Field(..., description="Energy cost (USD/hour)", ge=0)
    peak_usage: float = Field(..., description="Peak power (kW)", ge=0)
    renewable_percentage: float = Field(..., description="Renewable share (%)", ge=0, le=100)
    carbon_footprint: float = Field(..., description="Emissions (kg CO2)", ge=0)
    timestamp: datetime = Field(..., description="Time of the reading")


class IoTData(BaseModel):
    """Building and energy snapshot."""
    building: BuildingKPIs
    energy: EnergyKPIs
    scenario: Optional[Scenario] = Field(
        default=None,
        description="Scenario that was applied when generating the snapshot"
    )

    def to_snapshot(self) -> TelemetrySnapshot:
        """Convert to the engine's snapshot dataclass."""
        b = self.building
        e = self.energy
        return TelemetrySnapshot(
            building=BuildingSnapshot(
                temperature=b.temperature,
                occupancy=b.occupancy,
                hvac_status=b.hvac_status,
                air_quality=b.air_quality,
                humidity=b.humidity,
                timestamp=b.timestamp,
            ),
            energy=EnergySnapshot(
                power_consumption=e.power_consumption,
                efficiency=e.efficiency,
                cost=e.cost,
                peak_usage=e.peak_usage,
                renewable_percentage=e.renewable_percentage,
                carbon_footprint=e.carbon_footprint,
                timestamp=e.timestamp,
            ),
            scenario=self.scenario or Scenario.NORMAL,
        )


class TimeSeriesPoint(BaseModel):
    """A single channel value."""
    timestamp: datetime
    value: float


class HistoryResponse(BaseModel):
    """Hourly history for every channel."""
    building: Dict[str, List[TimeSeriesPoint]]
    energy: Dict[str, List[TimeSeriesPoint]]


class ScenarioInfo(BaseModel):
    """Information about a scenario."""
    type: Scenario
    name: str
    category: str = Field(..., description="normal, regular, or extreme")
    description: str
    affected_metrics: List[str]


class ScenarioListResponse(BaseModel):
    """List of available scenarios."""
    scenarios: List[ScenarioInfo]
    active: Scenario = Field(..., description="Scenario currently in rotation")


# =========================================
# Prediction and Alert Models
# =========================================

class EnergyPrediction(BaseModel):
    """Energy forecast for one hour."""
    power_consumption: float
    cost: float
    efficiency: float
    timestamp: datetime


class BuildingPrediction(BaseModel):
    """Building forecast for one hour."""
    temperature: float
    occupancy: int
    air_quality: int
    timestamp: datetime


class PredictionsResponse(BaseModel):
    """Forecasts for the coming hours."""
    energy: List[EnergyPrediction]
    building: List[BuildingPrediction]
    generated_at: datetime


class AnomaliesResponse(BaseModel):
    """Anomalies in the current snapshot."""
    anomalies: List[str]
    detected_at: datetime


class AlertItem(BaseModel):
    """A single alert."""
    type: AlertKind
    message: str
    timestamp: datetime


class AlertsResponse(BaseModel):
    """Merged anomaly and threshold alerts."""
    alerts: List[AlertItem]
    count: int
    generated_at: datetime


# =========================================
# Analysis Models
# =========================================

class AnalysisRequest(BaseModel):
    """Request a rule-based analysis."""
    current_data: Optional[IoTData] = Field(
        default=None,
        description="Snapshot to analyze (a fresh one is generated if omitted)"
    )
    include_history: bool = Field(
        default=False,
        description="Compare against generated history"
    )
    history_hours: int = Field(
        default=24,
        description="Hours of history to compare against",
        ge=1, le=168
    )


class ChannelStatistics(BaseModel):
    """History statistics for a channel."""
    avg: float
    min: float
    max: float
    trend: str

    @field_validator("trend")
    @classmethod
    def validate_trend(cls, v: str) -> str:
        if v not in ("increasing", "decreasing", "stable"):
            raise ValueError(f"Unknown trend: {v}")
        return v


class AnalysisResponse(BaseModel):
    """Narrative analysis."""
    insights: List[str]
    trends: str
    anomalies: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    statistics: Dict[str, ChannelStatistics] = Field(default_factory=dict)


# =========================================
# System Models
# =========================================

class SystemHealth(BaseModel):
    """System health check response."""
    status: str = Field(..., description="ok or degraded")
    version: str
    timestamp: datetime
    components: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: bool = True
    message: str
    status_code: int
    timestamp: datetime
