"""
Operating Scenario Definitions and Rotation

Each scenario describes a named operating condition (a crowded floor,
a failing air handler, a heat wave) that biases the baseline building
and energy formulas. The generator looks up the active scenario in
ScenarioLibrary and applies its building and energy modifiers after
the baseline values have been drawn.

The ScenarioStateMachine owns the single "current scenario" of a running
simulator and decides when to roll to a new one. It is the only piece
of mutable state shared between requests, so every read-decide-write
cycle happens under one lock.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from random import Random
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class Scenario(Enum):
    """Operating scenarios that can be simulated."""
    NORMAL = "normal"
    HIGH_OCCUPANCY = "high_occupancy"
    ENERGY_SPIKE = "energy_spike"
    HVAC_ISSUE = "hvac_issue"
    AIR_QUALITY_ALERT = "air_quality_alert"
    EFFICIENCY_DROP = "efficiency_drop"
    EXTREME_TEMP_HIGH = "extreme_temp_high"
    EXTREME_TEMP_LOW = "extreme_temp_low"
    EXTREME_AIR_QUALITY = "extreme_air_quality"
    EXTREME_HUMIDITY = "extreme_humidity"

    @classmethod
    def parse(cls, value: Union["Scenario", str, None]) -> Optional["Scenario"]:
        """Return the matching scenario, or None for unknown values."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class ScenarioCategory(Enum):
    """Rotation groups used when drawing the next scenario."""
    NORMAL = "normal"
    REGULAR = "regular"
    EXTREME = "extreme"


REGULAR_ANOMALIES = [
    Scenario.HIGH_OCCUPANCY,
    Scenario.ENERGY_SPIKE,
    Scenario.HVAC_ISSUE,
    Scenario.AIR_QUALITY_ALERT,
    Scenario.EFFICIENCY_DROP,
]

EXTREME_SCENARIOS = [
    Scenario.EXTREME_TEMP_HIGH,
    Scenario.EXTREME_TEMP_LOW,
    Scenario.EXTREME_AIR_QUALITY,
    Scenario.EXTREME_HUMIDITY,
]

# Cumulative thresholds for the rotation draw
NORMAL_PROBABILITY = 0.35
REGULAR_PROBABILITY_CUTOFF = 0.55

EARLY_REROLL_PROBABILITY = 0.20
MIN_SCENARIO_SECONDS = 30.0
MAX_SCENARIO_SECONDS = 90.0


# Modifiers receive the mutable reading dict plus the random source
Modifier = Callable[[Dict[str, Any], Random], None]


def _unchanged(values: Dict[str, Any], rng: Random) -> None:
    return None


@dataclass
class ScenarioProfile:
    """
    Definition of an operating scenario for simulation.

    Attributes:
        scenario: The scenario this profile describes
        name: Human-readable scenario name
        category: Rotation group (normal, regular anomaly, extreme)
        description: What the scenario represents in the building
        building_modifier: Transform applied to baseline building values
        energy_modifier: Transform applied to baseline energy values
        affected_metrics: Channels the modifiers touch

    Modifiers:
        Each modifier has the signature (values, rng) -> None and
        updates the values dict in place. Building values carry the
        keys temperature, occupancy, air_quality, humidity; energy
        values carry power_consumption, efficiency, renewable_percentage.
    """
    scenario: Scenario
    name: str
    category: ScenarioCategory
    description: str
    building_modifier: Modifier = _unchanged
    energy_modifier: Modifier = _unchanged
    affected_metrics: List[str] = field(default_factory=list)

    def apply_building(self, values: Dict[str, Any], rng: Random) -> Dict[str, Any]:
        """Apply the building modifier to a copy of the values."""
        modified = dict(values)
        self.building_modifier(modified, rng)
        return modified

    def apply_energy(self, values: Dict[str, Any], rng: Random) -> Dict[str, Any]:
        """Apply the energy modifier to a copy of the values."""
        modified = dict(values)
        self.energy_modifier(modified, rng)
        return modified

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.scenario.value,
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
            "affected_metrics": list(self.affected_metrics),
        }


# =========================================
# Building Modifiers
# =========================================

def _high_occupancy_building(values: Dict[str, Any], rng: Random) -> None:
    values["occupancy"] = min(100, int(values["occupancy"] * 1.8 + rng.uniform(0, 20)))
    values["air_quality"] = min(500.0, values["air_quality"] + rng.uniform(40, 70))
    values["temperature"] += rng.uniform(1.5, 3.0)


def _hvac_issue_building(values: Dict[str, Any], rng: Random) -> None:
    swing = 4.0 if rng.random() > 0.5 else -4.0
    values["temperature"] += swing + rng.uniform(-1.0, 1.0)
    values["humidity"] += rng.uniform(-7.5, 7.5)


def _air_quality_alert_building(values: Dict[str, Any], rng: Random) -> None:
    # Unhealthy band: 120-200 AQI
    values["air_quality"] = min(500.0, rng.uniform(120, 200))
    values["occupancy"] = min(100, int(values["occupancy"] + rng.uniform(0, 15)))


def _extreme_temp_high_building(values: Dict[str, Any], rng: Random) -> None:
    values["temperature"] = rng.uniform(28, 32)
    values["humidity"] = max(30.0, values["humidity"] - rng.uniform(5, 10))
    values["air_quality"] = min(500.0, values["air_quality"] + rng.uniform(20, 40))


def _extreme_temp_low_building(values: Dict[str, Any], rng: Random) -> None:
    values["temperature"] = rng.uniform(14, 18)
    values["humidity"] = min(70.0, values["humidity"] + rng.uniform(5, 10))


def _extreme_air_quality_building(values: Dict[str, Any], rng: Random) -> None:
    if rng.random() > 0.5:
        # Hazardous band, crowding contributes
        values["air_quality"] = rng.uniform(250, 400)
        values["occupancy"] = min(100, int(values["occupancy"] + rng.uniform(10, 20)))
    else:
        values["air_quality"] = rng.uniform(20, 40)


def _extreme_humidity_building(values: Dict[str, Any], rng: Random) -> None:
    if rng.random() > 0.5:
        values["humidity"] = rng.uniform(75, 90)
        values["temperature"] -= rng.uniform(1, 2)
    else:
        values["humidity"] = rng.uniform(25, 35)
        values["temperature"] += rng.uniform(1, 2)


# =========================================
# Energy Modifiers
# =========================================

def _scale_power(low: float, high: float) -> Modifier:
    """Build a modifier that multiplies power by U(low, high)."""
    def modifier(values: Dict[str, Any], rng: Random) -> None:
        values["power_consumption"] *= rng.uniform(low, high)
    return modifier


def _energy_spike_energy(values: Dict[str, Any], rng: Random) -> None:
    values["power_consumption"] *= rng.uniform(1.4, 1.7)
    values["efficiency"] -= rng.uniform(5, 10)


def _efficiency_drop_energy(values: Dict[str, Any], rng: Random) -> None:
    values["efficiency"] = max(70.0, values["efficiency"] - rng.uniform(15, 25))
    values["power_consumption"] *= rng.uniform(1.1, 1.2)


def _hvac_issue_energy(values: Dict[str, Any], rng: Random) -> None:
    values["power_consumption"] *= rng.uniform(1.15, 1.35)
    values["efficiency"] -= rng.uniform(3, 7)


def _extreme_temp_energy(values: Dict[str, Any], rng: Random) -> None:
    # HVAC works hardest against extreme temperatures
    values["power_consumption"] *= rng.uniform(1.5, 1.8)
    values["efficiency"] -= rng.uniform(8, 15)


class ScenarioLibrary:
    """
    Library of scenario profiles keyed by Scenario.

    Usage:
        profile = ScenarioLibrary.get_profile(Scenario.HVAC_ISSUE)
        building = profile.apply_building(baseline, rng)

        all_profiles = ScenarioLibrary.get_all_profiles()
    """

    _PROFILES: Dict[Scenario, ScenarioProfile] = {
        Scenario.NORMAL: ScenarioProfile(
            scenario=Scenario.NORMAL,
            name="Normal Operation",
            category=ScenarioCategory.NORMAL,
            description="Baseline daily pattern with natural sensor noise",
        ),
        Scenario.HIGH_OCCUPANCY: ScenarioProfile(
            scenario=Scenario.HIGH_OCCUPANCY,
            name="High Occupancy",
            category=ScenarioCategory.REGULAR,
            description="Crowded building: more people, stale air, warmer rooms, higher load",
            building_modifier=_high_occupancy_building,
            energy_modifier=_scale_power(1.2, 1.35),
            affected_metrics=["occupancy", "air_quality", "temperature", "power_consumption"],
        ),
        Scenario.ENERGY_SPIKE: ScenarioProfile(
            scenario=Scenario.ENERGY_SPIKE,
            name="Energy Spike",
            category=ScenarioCategory.REGULAR,
            description="Sudden 40-70% jump in power draw with reduced efficiency",
            energy_modifier=_energy_spike_energy,
            affected_metrics=["power_consumption", "efficiency"],
        ),
        Scenario.HVAC_ISSUE: ScenarioProfile(
            scenario=Scenario.HVAC_ISSUE,
            name="HVAC Issue",
            category=ScenarioCategory.REGULAR,
            description="Air handler fault: temperature swings of about 4°C and unstable humidity",
            building_modifier=_hvac_issue_building,
            energy_modifier=_hvac_issue_energy,
            affected_metrics=["temperature", "humidity", "power_consumption", "efficiency"],
        ),
        Scenario.AIR_QUALITY_ALERT: ScenarioProfile(
            scenario=Scenario.AIR_QUALITY_ALERT,
            name="Air Quality Alert",
            category=ScenarioCategory.REGULAR,
            description="Indoor AQI in the unhealthy 120-200 band, extra ventilation load",
            building_modifier=_air_quality_alert_building,
            energy_modifier=_scale_power(1.1, 1.2),
            affected_metrics=["air_quality", "occupancy", "power_consumption"],
        ),
        Scenario.EFFICIENCY_DROP: ScenarioProfile(
            scenario=Scenario.EFFICIENCY_DROP,
            name="Efficiency Drop",
            category=ScenarioCategory.REGULAR,
            description="Equipment efficiency falls 15-25 points toward the 70% floor",
            energy_modifier=_efficiency_drop_energy,
            affected_metrics=["efficiency", "power_consumption"],
        ),
        Scenario.EXTREME_TEMP_HIGH: ScenarioProfile(
            scenario=Scenario.EXTREME_TEMP_HIGH,
            name="Extreme Heat",
            category=ScenarioCategory.EXTREME,
            description="Critical overheating at 28-32°C with drier air",
            building_modifier=_extreme_temp_high_building,
            energy_modifier=_extreme_temp_energy,
            affected_metrics=["temperature", "humidity", "air_quality", "power_consumption", "efficiency"],
        ),
        Scenario.EXTREME_TEMP_LOW: ScenarioProfile(
            scenario=Scenario.EXTREME_TEMP_LOW,
            name="Extreme Cold",
            category=ScenarioCategory.EXTREME,
            description="Critical cold at 14-18°C with damper air",
            building_modifier=_extreme_temp_low_building,
            energy_modifier=_extreme_temp_energy,
            affected_metrics=["temperature", "humidity", "power_consumption", "efficiency"],
        ),
        Scenario.EXTREME_AIR_QUALITY: ScenarioProfile(
            scenario=Scenario.EXTREME_AIR_QUALITY,
            name="Extreme Air Quality",
            category=ScenarioCategory.EXTREME,
            description="Either hazardous 250-400 AQI or unusually clean 20-40 AQI air",
            building_modifier=_extreme_air_quality_building,
            energy_modifier=_scale_power(1.3, 1.5),
            affected_metrics=["air_quality", "occupancy", "power_consumption"],
        ),
        Scenario.EXTREME_HUMIDITY: ScenarioProfile(
            scenario=Scenario.EXTREME_HUMIDITY,
            name="Extreme Humidity",
            category=ScenarioCategory.EXTREME,
            description="Either mould-risk 75-90% or very dry 25-35% relative humidity",
            building_modifier=_extreme_humidity_building,
            energy_modifier=_scale_power(1.2, 1.35),
            affected_metrics=["humidity", "temperature", "power_consumption"],
        ),
    }

    @classmethod
    def get_profile(cls, scenario: Scenario) -> ScenarioProfile:
        """Return the profile for a scenario."""
        return cls._PROFILES[scenario]

    @classmethod
    def get_all_profiles(cls) -> List[ScenarioProfile]:
        """Return all profiles in declaration order of Scenario."""
        return [cls._PROFILES[s] for s in Scenario]

    @classmethod
    def get_scenario_names(cls) -> List[str]:
        """Return the wire names of every scenario."""
        return [s.value for s in Scenario]


def pick_scenario(rng: Random) -> Scenario:
    """
    Draw the next scenario from the rotation distribution.

    35% normal, 20% split evenly across the regular anomalies and
    45% split evenly across the extreme scenarios.
    """
    r = rng.random()
    if r < NORMAL_PROBABILITY:
        return Scenario.NORMAL
    if r < REGULAR_PROBABILITY_CUTOFF:
        return rng.choice(REGULAR_ANOMALIES)
    return rng.choice(EXTREME_SCENARIOS)


@dataclass
class ScenarioState:
    """Snapshot of the machine's state."""
    active: Scenario
    started_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "active": self.active.value,
            "started_at": self.started_at.isoformat(),
        }


class ScenarioStateMachine:
    """
    Owner of the simulator's current operating scenario.

    Every call to current() evaluates whether the scenario should roll:
    a fresh duration is drawn uniformly from [30s, 90s) and the scenario
    changes once it has been active longer than that. Independently a
    20% early reroll keeps consecutive requests varied.

    Example:
        machine = ScenarioStateMachine(rng=Random(42))
        scenario = machine.current()
        forced = machine.current(force="extreme_temp_high")
    """

    def __init__(
        self,
        rng: Optional[Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        initial: Scenario = Scenario.NORMAL,
    ):
        """
        Initialize the state machine.

        Args:
            rng: Random source for duration, reroll and selection draws
            clock: Callable returning the current time
            initial: Scenario active at construction
        """
        self.rng = rng or Random()
        self.clock = clock or datetime.now
        self._lock = threading.Lock()
        self._state = ScenarioState(active=initial, started_at=self.clock())

    @property
    def state(self) -> ScenarioState:
        """Consistent copy of the current state."""
        with self._lock:
            return ScenarioState(self._state.active, self._state.started_at)

    def current(self, force: Union[Scenario, str, None] = None) -> Scenario:
        """
        Return the scenario to use for this call.

        Args:
            force: Optional scenario that overrides the rotation for this
                call only. Unknown values are ignored.

        Returns:
            The scenario to apply
        """
        if force is not None:
            forced = Scenario.parse(force)
            if forced is not None:
                logger.debug(f"Using forced scenario: {forced.value}")
                return forced
            logger.warning(f"Ignoring unknown forced scenario: {force!r}")

        with self._lock:
            now = self.clock()
            elapsed = (now - self._state.started_at).total_seconds()
            duration = self.rng.uniform(MIN_SCENARIO_SECONDS, MAX_SCENARIO_SECONDS)

            if elapsed > duration or self.rng.random() < EARLY_REROLL_PROBABILITY:
                previous = self._state.active
                self._state = ScenarioState(active=pick_scenario(self.rng), started_at=now)
                if self._state.active != previous:
                    logger.info(
                        f"Scenario changed: {previous.value} -> {self._state.active.value}"
                    )

            return self._state.active
