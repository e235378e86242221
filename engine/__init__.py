"""
Engine Module - Synthetic Telemetry Generation

This module simulates a building's sensor fleet: the operating
scenario rotation, the metric formulas, and the hourly history builder.

Key Components:
- TelemetryGenerator: Generates building and energy snapshots
- ScenarioStateMachine: Owns and rotates the live operating scenario
- ScenarioLibrary: Building and energy modifiers per scenario

Usage:
    from engine import TelemetryGenerator

    generator = TelemetryGenerator(random_seed=42)
    snapshot = generator.generate_current_snapshot()
    history = generator.generate_history(hours=168)

    # Force an extreme scenario for one reading
    hot = generator.generate_current_snapshot(force_scenario="extreme_temp_high")
"""

from .scenarios import (
    Scenario,
    ScenarioCategory,
    ScenarioLibrary,
    ScenarioProfile,
    ScenarioState,
    ScenarioStateMachine,
    pick_scenario,
)
from .telemetry import (
    BuildingSnapshot,
    EnergySnapshot,
    HistoryBundle,
    HVACStatus,
    PredictionPoint,
    TelemetrySnapshot,
    TimeSeriesPoint,
)
from .generator import (
    BuildingBaseline,
    TelemetryGenerator,
    generate_current_snapshot,
    generate_history,
    time_of_day_factor,
)

__all__ = [
    # Scenarios
    "Scenario",
    "ScenarioCategory",
    "ScenarioLibrary",
    "ScenarioProfile",
    "ScenarioState",
    "ScenarioStateMachine",
    "pick_scenario",

    # Telemetry structures
    "BuildingSnapshot",
    "EnergySnapshot",
    "HistoryBundle",
    "HVACStatus",
    "PredictionPoint",
    "TelemetrySnapshot",
    "TimeSeriesPoint",

    # Data generator
    "BuildingBaseline",
    "TelemetryGenerator",
    "generate_current_snapshot",
    "generate_history",
    "time_of_day_factor",
]

__version__ = "0.1.0"
