"""
Rule-Based Insight Analyzer

Turns a snapshot (and optionally its history) into a short narrative:
insights, a one-line trend summary, detected anomalies, and actionable
recommendations.

Bands used:
- Temperature: optimal 20-25°C, critical above 28°C or below 16°C
- Air quality: moderate above 100, unhealthy above 150, hazardous above 250
- Humidity: optimal 40-65%, extreme above 80% or below 30%
- Efficiency: target 85%, critically low below 75%
- Occupancy: high above 80 people
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from engine.telemetry import HistoryBundle, TelemetrySnapshot

TREND_TOLERANCE = 0.05

ANOMALY_TRENDS = "Anomalies detected - system requires immediate attention"
STABLE_TRENDS = "Stable performance with normal variations"


@dataclass
class ChannelStatistics:
    """Summary statistics for one history channel."""
    avg: float
    min: float
    max: float
    trend: str  # increasing / decreasing / stable

    def to_dict(self) -> Dict[str, Any]:
        return {"avg": self.avg, "min": self.min, "max": self.max, "trend": self.trend}


@dataclass
class Analysis:
    """Narrative analysis of a snapshot."""
    insights: List[str] = field(default_factory=list)
    trends: str = STABLE_TRENDS
    anomalies: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    statistics: Dict[str, ChannelStatistics] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "insights": self.insights,
            "trends": self.trends,
            "anomalies": self.anomalies,
            "recommendations": self.recommendations,
            "statistics": {k: v.to_dict() for k, v in self.statistics.items()},
        }


def channel_statistics(values: List[float]) -> ChannelStatistics:
    """
    Summarize a channel.

    The trend compares the mean of the second half of the series with
    the mean of the first half; a change beyond 5% counts as a trend.
    """
    if not values:
        return ChannelStatistics(avg=0.0, min=0.0, max=0.0, trend="stable")

    avg = sum(values) / len(values)
    trend = "stable"
    mid = len(values) // 2
    if mid > 0:
        first = sum(values[:mid]) / mid
        second = sum(values[mid:]) / (len(values) - mid)
        if second > first * (1 + TREND_TOLERANCE):
            trend = "increasing"
        elif second < first * (1 - TREND_TOLERANCE):
            trend = "decreasing"

    return ChannelStatistics(
        avg=round(avg, 2),
        min=min(values),
        max=max(values),
        trend=trend,
    )


SUMMARY_CHANNELS = [
    "temperature",
    "occupancy",
    "air_quality",
    "power_consumption",
    "efficiency",
    "cost",
]


def summarize_history(history: HistoryBundle) -> Dict[str, ChannelStatistics]:
    """Compute statistics for the channels the analysis reports on."""
    return {name: channel_statistics(history.values(name)) for name in SUMMARY_CHANNELS}


class InsightAnalyzer:
    """
    Rule-based narrative analysis of building telemetry.

    Example:
        analyzer = InsightAnalyzer()
        analysis = analyzer.analyze(snapshot, history)
        print(analysis.trends)
        for rec in analysis.recommendations:
            print("-", rec)
    """

    def analyze(
        self,
        current: TelemetrySnapshot,
        history: Optional[HistoryBundle] = None,
    ) -> Analysis:
        """
        Analyze a snapshot.

        Args:
            current: Current readings
            history: Optional history for comparison with averages

        Returns:
            Analysis with insights, anomalies and recommendations
        """
        analysis = Analysis()

        self._analyze_temperature(current, analysis)
        self._analyze_air_quality(current, analysis)
        self._analyze_humidity(current, analysis)
        self._analyze_efficiency(current, analysis)
        self._analyze_occupancy(current, analysis)

        if history is not None and len(history) > 0:
            analysis.statistics = summarize_history(history)
            self._compare_with_history(current, analysis)

        analysis.trends = ANOMALY_TRENDS if analysis.anomalies else STABLE_TRENDS
        return analysis

    def _analyze_temperature(self, current: TelemetrySnapshot, analysis: Analysis) -> None:
        temperature = current.building.temperature

        if temperature > 28:
            analysis.anomalies.append(
                f"CRITICAL: Extreme high temperature detected ({temperature}°C)"
            )
            analysis.insights.append("Temperature is critically high - immediate action required")
            analysis.recommendations.extend([
                "URGENT: Activate emergency cooling systems",
                "Check HVAC system for malfunctions",
            ])
        elif temperature > 25:
            analysis.insights.append("Temperature is above optimal range")
            analysis.recommendations.append("Consider adjusting HVAC settings to reduce temperature")
        elif temperature < 16:
            analysis.anomalies.append(
                f"CRITICAL: Extreme low temperature detected ({temperature}°C)"
            )
            analysis.insights.append("Temperature is critically low - immediate action required")
            analysis.recommendations.extend([
                "URGENT: Activate emergency heating systems",
                "Check HVAC system for malfunctions",
            ])
        elif temperature < 20:
            analysis.insights.append("Temperature is below optimal range")
            analysis.recommendations.append("Consider increasing heating to improve comfort")
        else:
            analysis.insights.append("Temperature is within optimal range")

    def _analyze_air_quality(self, current: TelemetrySnapshot, analysis: Analysis) -> None:
        air_quality = current.building.air_quality

        if air_quality > 250:
            analysis.anomalies.append(
                f"CRITICAL: Hazardous air quality detected ({air_quality} AQI)"
            )
            analysis.insights.append(
                "Air quality is in hazardous range - immediate ventilation required"
            )
            analysis.recommendations.extend([
                "URGENT: Increase ventilation and consider evacuation if necessary",
                "Check air filtration systems",
            ])
        elif air_quality > 150:
            analysis.insights.append("Air quality is in unhealthy range")
            analysis.recommendations.append("Increase ventilation and monitor air quality closely")
        elif air_quality < 30:
            analysis.insights.append("Air quality is excellent")
        elif air_quality > 100:
            analysis.insights.append("Air quality is moderate - monitor closely")
            analysis.recommendations.append("Consider increasing ventilation")

    def _analyze_humidity(self, current: TelemetrySnapshot, analysis: Analysis) -> None:
        humidity = current.building.humidity

        if humidity > 80:
            analysis.anomalies.append(f"WARNING: Extreme high humidity detected ({humidity}%)")
            analysis.insights.append("Humidity is extremely high - risk of mold and condensation")
            analysis.recommendations.extend([
                "Activate dehumidification systems immediately",
                "Check for water leaks or ventilation issues",
            ])
        elif humidity < 30:
            analysis.anomalies.append(f"WARNING: Extreme low humidity detected ({humidity}%)")
            analysis.insights.append("Humidity is extremely low - dry air conditions")
            analysis.recommendations.append(
                "Consider humidification to improve comfort and reduce static"
            )
        elif humidity > 65 or humidity < 40:
            analysis.insights.append("Humidity is outside optimal range (40-65%)")
            analysis.recommendations.append("Adjust HVAC settings to maintain optimal humidity")

    def _analyze_efficiency(self, current: TelemetrySnapshot, analysis: Analysis) -> None:
        efficiency = current.energy.efficiency

        if efficiency < 75:
            analysis.insights.append("Energy efficiency is critically low")
            analysis.recommendations.append(
                "URGENT: Review equipment performance and maintenance schedules"
            )
        elif efficiency < 85:
            analysis.insights.append("Energy efficiency is below target")
            analysis.recommendations.append("Review equipment performance and maintenance schedules")
        else:
            analysis.insights.append("Energy efficiency is good")

    def _analyze_occupancy(self, current: TelemetrySnapshot, analysis: Analysis) -> None:
        if current.building.occupancy > 80:
            analysis.insights.append("High occupancy detected")
            analysis.recommendations.append("Monitor air quality and ventilation closely")

    def _compare_with_history(self, current: TelemetrySnapshot, analysis: Analysis) -> None:
        """Add insights comparing current values with historical averages."""
        stats = analysis.statistics
        comparisons = [
            ("Temperature", current.building.temperature, stats["temperature"], "°C"),
            ("Air quality", current.building.air_quality, stats["air_quality"], " AQI"),
            ("Power consumption", current.energy.power_consumption, stats["power_consumption"], " kW"),
        ]
        for label, value, channel, unit in comparisons:
            analysis.insights.append(
                f"{label} is {value}{unit} vs historical average "
                f"{channel.avg}{unit} (trend: {channel.trend})"
            )


def analyze(
    current: TelemetrySnapshot,
    history: Optional[HistoryBundle] = None,
) -> Analysis:
    """
    Convenience function for a rule-based analysis.

    Args:
        current: Current readings
        history: Optional hourly history

    Returns:
        Analysis
    """
    return InsightAnalyzer().analyze(current, history)
