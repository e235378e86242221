"""
Shared test doubles and factories.

ScriptedRandom and ConstantRandom stand in for random.Random so tests
can assert exact values; FakeClock makes elapsed time explicit.
"""

from datetime import datetime, timedelta
from random import Random
from typing import Dict, List, Optional, Sequence

from engine.scenarios import Scenario
from engine.telemetry import (
    BUILDING_CHANNELS,
    ENERGY_CHANNELS,
    BuildingSnapshot,
    EnergySnapshot,
    HistoryBundle,
    HVACStatus,
    PredictionPoint,
    TelemetrySnapshot,
    TimeSeriesPoint,
)

BASE_TIME = datetime(2024, 6, 3, 12, 0, 0)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedRandom:
    """Random source that replays a fixed list of draws."""

    def __init__(self, values: Sequence[float]):
        self.values = list(values)

    def random(self) -> float:
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        return self.values.pop(0)

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def choice(self, seq):
        return seq[int(self.random() * len(seq))]


class ConstantRandom(Random):
    """Random whose every draw returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


DEFAULTS = {
    "temperature": 22.0,
    "occupancy": 40,
    "air_quality": 60,
    "humidity": 50.0,
    "power_consumption": 100.0,
    "efficiency": 88.0,
    "cost": 10.0,
    "peak_usage": 110.0,
    "renewable_percentage": 40.0,
}


def make_snapshot(
    scenario: Scenario = Scenario.NORMAL,
    hvac_status: HVACStatus = HVACStatus.IDLE,
    timestamp: datetime = BASE_TIME,
    **overrides,
) -> TelemetrySnapshot:
    """Build a snapshot from nominal values, overriding any channel."""
    values = dict(DEFAULTS)
    values.update(overrides)
    power = values["power_consumption"]

    return TelemetrySnapshot(
        building=BuildingSnapshot(
            temperature=values["temperature"],
            occupancy=values["occupancy"],
            hvac_status=hvac_status,
            air_quality=values["air_quality"],
            humidity=values["humidity"],
            timestamp=timestamp,
        ),
        energy=EnergySnapshot(
            power_consumption=power,
            efficiency=values["efficiency"],
            cost=values["cost"],
            peak_usage=values["peak_usage"],
            renewable_percentage=values["renewable_percentage"],
            carbon_footprint=round(power * 0.5 * (1 - values["renewable_percentage"] / 100), 2),
            timestamp=timestamp,
        ),
        scenario=scenario,
    )


def make_history(
    end: datetime = BASE_TIME,
    **channels: List[float],
) -> HistoryBundle:
    """
    Build a history bundle from per-channel value lists.

    Channels not given default to [0.5 v, 1.5 v] around the nominal
    value v, a band wide enough that a nominal snapshot is not flagged.
    Every channel must have the same length.
    """
    series: Dict[str, List[float]] = {}
    for name in BUILDING_CHANNELS + ENERGY_CHANNELS:
        if name in channels:
            series[name] = list(channels[name])
        else:
            v = DEFAULTS[name]
            series[name] = [v * 0.5, v * 1.5]

    lengths = {len(v) for v in series.values()}
    if len(lengths) > 1:
        # Stretch short default channels to the requested length
        n = max(lengths)
        for name, values in series.items():
            if name not in channels:
                series[name] = (values * n)[:n]

    n = len(series["temperature"])
    timestamps = [end - timedelta(hours=n - 1 - i) for i in range(n)]

    history = HistoryBundle()
    for name in BUILDING_CHANNELS:
        history.building[name] = [
            TimeSeriesPoint(ts, v) for ts, v in zip(timestamps, series[name])
        ]
    for name in ENERGY_CHANNELS:
        history.energy[name] = [
            TimeSeriesPoint(ts, v) for ts, v in zip(timestamps, series[name])
        ]
    return history


def make_predictions(
    power: Sequence[float],
    cost: Optional[Sequence[float]] = None,
    start: datetime = BASE_TIME,
) -> List[PredictionPoint]:
    """Build a prediction list with the given power and cost per hour."""
    cost = cost if cost is not None else [round(p * 0.12, 2) for p in power]
    return [
        PredictionPoint(
            timestamp=start + timedelta(hours=i + 1),
            power_consumption=p,
            cost=c,
            efficiency=88.0,
            temperature=22.0,
            occupancy=40,
            air_quality=60,
        )
        for i, (p, c) in enumerate(zip(power, cost))
    ]
