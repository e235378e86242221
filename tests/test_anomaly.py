"""
Tests for Anomaly Detection

These tests verify the two-sigma bands, the direction of each channel's
check, and the messages produced.

Run with: pytest tests/test_anomaly.py -v
"""

import pytest
from core.anomaly import AnomalyDetector, channel_band, detect_anomalies
from engine.telemetry import HistoryBundle
from tests.helpers import make_history, make_snapshot


class TestChannelBand:
    """Test mean and population standard deviation."""

    def test_population_std(self):
        history = make_history(power_consumption=[90, 110])
        band = channel_band(history.energy["power_consumption"])

        assert band.mean == pytest.approx(100.0)
        assert band.std_dev == pytest.approx(10.0)
        assert band.lower == pytest.approx(80.0)
        assert band.upper == pytest.approx(120.0)

    def test_empty_channel(self):
        band = channel_band([])

        assert band.mean == 0.0
        assert band.std_dev == 0.0


class TestAnomalyDetector:
    """Test per-channel anomaly rules."""

    def setup_method(self):
        """Set up test fixtures."""
        self.detector = AnomalyDetector()

    def test_nominal_snapshot_is_clean(self):
        assert self.detector.detect(make_snapshot(), make_history()) == []

    def test_boundary_is_not_flagged(self):
        """Exactly two sigma away is not an anomaly; just beyond is."""
        history = make_history(power_consumption=[90, 110])

        at_boundary = make_snapshot(power_consumption=120.0)
        beyond = make_snapshot(power_consumption=120.01)

        assert self.detector.detect(at_boundary, history) == []
        assert len(self.detector.detect(beyond, history)) == 1

    def test_power_two_sided(self):
        history = make_history(power_consumption=[90, 110])

        high = self.detector.detect(make_snapshot(power_consumption=125.0), history)
        low = self.detector.detect(make_snapshot(power_consumption=75.0), history)

        assert high == ["Power consumption anomaly: 125.0 kW (avg: 100.0 kW)"]
        assert low == ["Power consumption anomaly: 75.0 kW (avg: 100.0 kW)"]

    def test_temperature_two_sided(self):
        history = make_history(temperature=[20.0, 24.0])

        hot = self.detector.detect(make_snapshot(temperature=26.5), history)
        cold = self.detector.detect(make_snapshot(temperature=17.5), history)

        assert hot == ["Temperature anomaly: 26.5°C (avg: 22.0°C)"]
        assert cold == ["Temperature anomaly: 17.5°C (avg: 22.0°C)"]

    def test_efficiency_only_below(self):
        history = make_history(efficiency=[80.0, 90.0])

        low = self.detector.detect(make_snapshot(efficiency=74.0), history)
        high = self.detector.detect(make_snapshot(efficiency=96.0), history)

        assert low == ["Energy efficiency below normal: 74.0% (avg: 85.0%)"]
        assert high == []

    def test_air_quality_only_above(self):
        history = make_history(air_quality=[50, 70])

        high = self.detector.detect(make_snapshot(air_quality=81), history)
        low = self.detector.detect(make_snapshot(air_quality=30), history)

        assert high == ["Air quality concern: 81 AQI (avg: 60.0 AQI)"]
        assert low == []

    def test_several_channels_in_order(self):
        history = make_history(
            temperature=[20.0, 24.0],
            power_consumption=[90, 110],
            efficiency=[80.0, 90.0],
            air_quality=[50, 70],
        )
        snapshot = make_snapshot(
            temperature=30.0, power_consumption=150.0, efficiency=70.0, air_quality=200
        )

        anomalies = detect_anomalies(snapshot, history)

        assert len(anomalies) == 4
        assert anomalies[0].startswith("Temperature anomaly")
        assert anomalies[1].startswith("Power consumption anomaly")
        assert anomalies[2].startswith("Energy efficiency below normal")
        assert anomalies[3].startswith("Air quality concern")

    def test_empty_history_uses_zero_bands(self):
        """Without history every non-zero two-sided reading deviates."""
        anomalies = detect_anomalies(make_snapshot(), HistoryBundle())

        assert any(a.startswith("Temperature anomaly") for a in anomalies)
        assert any(a.startswith("Air quality concern") for a in anomalies)
        assert not any(a.startswith("Energy efficiency") for a in anomalies)
