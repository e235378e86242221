"""
Synthetic Telemetry Generator for Building and Energy Metrics

Generates realistic building and energy readings for the dashboard
and analytics pipeline, with scenario-driven variation on top of a
daily occupancy and load pattern.

Features:
- Sine-shaped time-of-day factor (low at night, peak mid-afternoon)
- Baseline formulas for temperature, occupancy, air quality, humidity
- Energy metrics derived from load: power, cost, peak, carbon
- Scenario modifiers from ScenarioLibrary applied after the baseline
- Hourly history generated under normal operation only
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from random import Random
from typing import Any, Callable, Dict, Optional, Union

from .scenarios import Scenario, ScenarioLibrary, ScenarioStateMachine
from .telemetry import (
    BuildingSnapshot,
    EnergySnapshot,
    HistoryBundle,
    HVACStatus,
    TelemetrySnapshot,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_HOURS = 168


@dataclass
class BuildingBaseline:
    """
    Baseline operating parameters for a mid-size office building.

    All values can be customized for different buildings.
    """
    # Comfort
    temperature: float = 22.0          # °C setpoint
    comfort_band: float = 2.0          # °C deviation before HVAC runs
    occupancy: float = 50.0            # people at factor 1.0
    min_occupancy: int = 10            # security, cleaning staff

    # Energy
    power_kw: float = 150.0            # kW at factor 1.0
    peak_rate: float = 0.15            # USD/kWh when factor > 0.8
    off_peak_rate: float = 0.10        # USD/kWh otherwise
    peak_factor_threshold: float = 0.8
    grid_carbon_intensity: float = 0.5  # kg CO2 per kWh from the grid

    # Probabilities
    maintenance_probability: float = 0.05
    hvac_issue_maintenance_probability: float = 0.30


def time_of_day_factor(hour: int) -> float:
    """
    Calculate the load factor for an hour of the day.

    A sine wave offset so the trough falls around midnight and the
    peak mid-afternoon.

    Args:
        hour: Hour of day (0-23)

    Returns:
        Factor in roughly [0.4, 1.0]
    """
    return math.sin((hour - 6) * math.pi / 12) * 0.3 + 0.7


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class TelemetryGenerator:
    """
    Generator for synthetic building and energy telemetry.

    A single random source flows through every formula, so seeding the
    generator (or injecting a Random) makes output reproducible.

    Example:
        gen = TelemetryGenerator(random_seed=7)

        # Current reading under the live scenario rotation
        snapshot = gen.generate_current_snapshot()

        # Force a scenario for one call
        hot = gen.generate_current_snapshot(force_scenario="extreme_temp_high")

        # A week of hourly history
        history = gen.generate_history(hours=168)
    """

    def __init__(
        self,
        baseline: Optional[BuildingBaseline] = None,
        random_seed: Optional[int] = None,
        rng: Optional[Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        state_machine: Optional[ScenarioStateMachine] = None,
    ):
        """
        Initialize the generator.

        Args:
            baseline: Building parameters (uses defaults if None)
            random_seed: Seed for reproducible generation
            rng: Random source; takes precedence over random_seed
            clock: Callable returning the current time
            state_machine: Scenario rotation (created if None)
        """
        self.baseline = baseline or BuildingBaseline()
        self.rng = rng or Random(random_seed)
        self.clock = clock or datetime.now
        self.state_machine = state_machine or ScenarioStateMachine(
            rng=self.rng, clock=self.clock
        )

    # =========================================
    # Public Operations
    # =========================================

    def generate_current_snapshot(
        self,
        force_scenario: Union[Scenario, str, None] = None,
    ) -> TelemetrySnapshot:
        """
        Generate the current building and energy readings.

        Args:
            force_scenario: Optional scenario overriding the rotation for
                this call. Unknown values are ignored.

        Returns:
            TelemetrySnapshot tagged with the scenario that was applied
        """
        now = self.clock()
        factor = time_of_day_factor(now.hour)
        scenario = self.state_machine.current(force=force_scenario)

        return TelemetrySnapshot(
            building=self.generate_building_snapshot(factor, now, scenario),
            energy=self.generate_energy_snapshot(factor, now, scenario),
            scenario=scenario,
        )

    def generate_history(self, hours: int = 24) -> HistoryBundle:
        """
        Generate hourly history ending at the current time.

        Every sample uses the normal scenario, so the series describes
        the expected trajectory rather than live scenario noise.

        Args:
            hours: Hours of history, bounded to [0, 168]

        Returns:
            HistoryBundle with hours + 1 points per channel
        """
        bounded = int(_clamp(hours, 0, MAX_HISTORY_HOURS))
        if bounded != hours:
            logger.debug(f"History hours {hours} bounded to {bounded}")

        now = self.clock()
        history = HistoryBundle()

        for i in range(bounded, -1, -1):
            timestamp = now - timedelta(hours=i)
            factor = time_of_day_factor(timestamp.hour)
            history.append(
                self.generate_building_snapshot(factor, timestamp, Scenario.NORMAL),
                self.generate_energy_snapshot(factor, timestamp, Scenario.NORMAL),
            )

        return history

    # =========================================
    # Building Metrics
    # =========================================

    def generate_building_snapshot(
        self,
        factor: float,
        timestamp: datetime,
        scenario: Scenario = Scenario.NORMAL,
    ) -> BuildingSnapshot:
        """
        Generate building metrics for a time factor and scenario.

        Args:
            factor: Time-of-day factor
            timestamp: Timestamp for the reading
            scenario: Scenario whose building modifier is applied

        Returns:
            BuildingSnapshot with values clamped to their ranges
        """
        values = self._generate_base_building(factor)
        values = ScenarioLibrary.get_profile(scenario).apply_building(values, self.rng)

        if scenario == Scenario.EXTREME_HUMIDITY:
            humidity = _clamp(values["humidity"], 25.0, 90.0)
        else:
            humidity = _clamp(values["humidity"], 30.0, 70.0)

        return BuildingSnapshot(
            temperature=round(values["temperature"], 1),
            occupancy=int(values["occupancy"]),
            hvac_status=self._determine_hvac_status(values["temperature"], scenario),
            air_quality=int(round(_clamp(values["air_quality"], 0.0, 500.0))),
            humidity=round(humidity, 1),
            timestamp=timestamp,
        )

    def _generate_base_building(self, factor: float) -> Dict[str, Any]:
        """Draw baseline building values before any scenario."""
        b = self.baseline
        rng = self.rng

        temperature = b.temperature + (factor - 0.7) * 8 + rng.uniform(-1.5, 1.5)
        occupancy = max(
            b.min_occupancy,
            math.floor(b.occupancy * factor + rng.uniform(-10, 10)),
        )
        # Air gets staler as occupancy rises
        air_quality = _clamp(50 + occupancy / 10 + rng.uniform(-15, 15), 0.0, 500.0)
        humidity = 40 + rng.uniform(0, 20)

        return {
            "temperature": temperature,
            "occupancy": occupancy,
            "air_quality": air_quality,
            "humidity": humidity,
        }

    def _determine_hvac_status(self, temperature: float, scenario: Scenario) -> HVACStatus:
        """
        Determine HVAC status from temperature deviation and scenario.

        Extreme temperatures always keep the plant running. An HVAC fault
        raises the chance of a maintenance state.
        """
        b = self.baseline

        if scenario in (Scenario.EXTREME_TEMP_HIGH, Scenario.EXTREME_TEMP_LOW):
            return HVACStatus.ACTIVE

        if (
            scenario == Scenario.HVAC_ISSUE
            and self.rng.random() < b.hvac_issue_maintenance_probability
        ):
            return HVACStatus.MAINTENANCE

        if self.rng.random() < b.maintenance_probability:
            return HVACStatus.MAINTENANCE
        if abs(temperature - b.temperature) > b.comfort_band:
            return HVACStatus.ACTIVE
        return HVACStatus.IDLE

    # =========================================
    # Energy Metrics
    # =========================================

    def generate_energy_snapshot(
        self,
        factor: float,
        timestamp: datetime,
        scenario: Scenario = Scenario.NORMAL,
    ) -> EnergySnapshot:
        """
        Generate energy metrics for a time factor and scenario.

        Args:
            factor: Time-of-day factor
            timestamp: Timestamp for the reading
            scenario: Scenario whose energy modifier is applied

        Returns:
            EnergySnapshot with derived cost, peak and carbon values
        """
        b = self.baseline
        values = {
            "power_consumption": b.power_kw * factor + self.rng.uniform(-15, 15),
            "efficiency": self.rng.uniform(80, 95),
            "renewable_percentage": self.rng.uniform(30, 50),
        }
        values = ScenarioLibrary.get_profile(scenario).apply_energy(values, self.rng)

        power = max(0.0, values["power_consumption"])
        renewable = values["renewable_percentage"]

        rate = b.peak_rate if factor > b.peak_factor_threshold else b.off_peak_rate
        cost = power * rate
        peak_usage = power * (1 + self.rng.uniform(0, 0.2))
        carbon = power * b.grid_carbon_intensity * (1 - renewable / 100)

        return EnergySnapshot(
            power_consumption=round(power, 2),
            efficiency=_clamp(round(values["efficiency"], 1), 70.0, 100.0),
            cost=round(cost, 2),
            peak_usage=round(peak_usage, 2),
            renewable_percentage=round(renewable, 1),
            carbon_footprint=round(carbon, 2),
            timestamp=timestamp,
        )


# =========================================
# Convenience Functions
# =========================================

def generate_current_snapshot(
    force_scenario: Union[Scenario, str, None] = None,
    random_seed: Optional[int] = None,
) -> TelemetrySnapshot:
    """
    Generate one snapshot with a throwaway generator.

    Args:
        force_scenario: Optional scenario to apply
        random_seed: Seed for reproducible generation

    Returns:
        TelemetrySnapshot
    """
    generator = TelemetryGenerator(random_seed=random_seed)
    return generator.generate_current_snapshot(force_scenario)


def generate_history(hours: int = 24, random_seed: Optional[int] = None) -> HistoryBundle:
    """
    Generate hourly history with a throwaway generator.

    Args:
        hours: Hours of history, bounded to [0, 168]
        random_seed: Seed for reproducible generation

    Returns:
        HistoryBundle with hours + 1 points per channel
    """
    generator = TelemetryGenerator(random_seed=random_seed)
    return generator.generate_history(hours)
