"""
Tests for the REST API

These tests drive the FastAPI app through TestClient with a seeded
generator whose scenario rotation never rolls on its own.

Run with: pytest tests/test_api.py -v
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api.cache import ResponseCache
from api.dependencies import get_generator, get_response_cache
from api.main import app
from api.models import AlertItem, IoTData, ScenarioInfo
from api.rate_limit import limiter
from core.alerts import AlertKind
from core.insights import ANOMALY_TRENDS
from engine.generator import TelemetryGenerator
from engine.scenarios import Scenario, ScenarioLibrary, ScenarioStateMachine
from engine.telemetry import BUILDING_CHANNELS, ENERGY_CHANNELS, HVACStatus
from tests.helpers import BASE_TIME, ConstantRandom, FakeClock, make_snapshot


class ApiTestCase:
    """Base class wiring a deterministic generator into the app."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        machine = ScenarioStateMachine(rng=ConstantRandom(0.9), clock=self.clock)
        self.generator = TelemetryGenerator(
            random_seed=42, clock=self.clock, state_machine=machine
        )
        self.cache = ResponseCache(clock=self.clock)
        app.dependency_overrides[get_generator] = lambda: self.generator
        app.dependency_overrides[get_response_cache] = lambda: self.cache
        limiter.reset()
        self.client = TestClient(app)

    def teardown_method(self):
        app.dependency_overrides.clear()


class TestSystemEndpoints(ApiTestCase):
    """Test root and health endpoints."""

    def test_root(self):
        response = self.client.get("/")

        assert response.status_code == 200
        assert response.json()["api_base"] == "/api/v1"

    def test_health(self):
        response = self.client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "ok"
        assert data["components"]["scenario"] == "normal"

    def test_unknown_route_uses_error_format(self):
        response = self.client.get("/api/v1/nope")
        data = response.json()

        assert response.status_code == 404
        assert data["error"] is True
        assert data["status_code"] == 404


class TestDataEndpoints(ApiTestCase):
    """Test snapshot, history and scenario endpoints."""

    def test_current_snapshot(self):
        response = self.client.get("/api/v1/data/iot")
        data = response.json()

        assert response.status_code == 200
        assert data["scenario"] == "normal"
        assert data["building"]["occupancy"] >= 10
        assert 70 <= data["energy"]["efficiency"] <= 100

    def test_forced_scenario(self):
        response = self.client.get("/api/v1/data/iot", params={"scenario": "extreme_temp_high"})
        data = response.json()

        assert response.status_code == 200
        assert data["scenario"] == "extreme_temp_high"
        assert 28 <= data["building"]["temperature"] <= 32
        assert data["building"]["hvac_status"] == "active"

    def test_unknown_scenario_is_ignored(self):
        response = self.client.get("/api/v1/data/iot", params={"scenario": "volcano"})

        assert response.status_code == 200
        assert response.json()["scenario"] == "normal"

    def test_history(self):
        response = self.client.get("/api/v1/data/history", params={"hours": 6})
        data = response.json()

        assert response.status_code == 200
        for name in BUILDING_CHANNELS:
            assert len(data["building"][name]) == 7
        for name in ENERGY_CHANNELS:
            assert len(data["energy"][name]) == 7

    def test_history_bounds(self):
        assert self.client.get("/api/v1/data/history", params={"hours": 169}).status_code == 422
        assert self.client.get("/api/v1/data/history", params={"hours": -1}).status_code == 422
        assert self.client.get("/api/v1/data/history", params={"hours": 0}).status_code == 200

    def test_scenarios(self):
        response = self.client.get("/api/v1/data/scenarios")
        data = response.json()

        assert response.status_code == 200
        assert len(data["scenarios"]) == 10
        assert data["active"] == "normal"
        assert {s["category"] for s in data["scenarios"]} == {"normal", "regular", "extreme"}


class TestAlertEndpoints(ApiTestCase):
    """Test prediction, anomaly and alert endpoints."""

    def test_predictions(self):
        response = self.client.get("/api/v1/alerts/predictions", params={"hours": 12})
        data = response.json()

        assert response.status_code == 200
        assert len(data["energy"]) == 12
        assert len(data["building"]) == 12
        assert data["energy"][0]["timestamp"] == (BASE_TIME + timedelta(hours=1)).isoformat()
        assert data["building"][-1]["timestamp"] == (BASE_TIME + timedelta(hours=12)).isoformat()

    def test_predictions_bounds(self):
        assert self.client.get("/api/v1/alerts/predictions", params={"hours": 0}).status_code == 422

    def test_anomalies(self):
        response = self.client.get("/api/v1/alerts/anomalies")
        data = response.json()

        assert response.status_code == 200
        assert isinstance(data["anomalies"], list)
        assert data["detected_at"] == BASE_TIME.isoformat()

    def test_alerts(self):
        response = self.client.get("/api/v1/alerts")
        data = response.json()

        assert response.status_code == 200
        assert data["count"] == len(data["alerts"])
        assert all(a["type"] in ("warning", "critical", "info") for a in data["alerts"])


class TestAnalysisEndpoint(ApiTestCase):
    """Test the rule-based analysis endpoint."""

    def test_supplied_snapshot(self):
        payload = {"current_data": make_snapshot(temperature=29.0).to_dict()}

        response = self.client.post("/api/v1/analysis", json=payload)
        data = response.json()

        assert response.status_code == 200
        assert data["anomalies"] == ["CRITICAL: Extreme high temperature detected (29.0°C)"]
        assert data["trends"] == ANOMALY_TRENDS

    def test_generated_snapshot(self):
        response = self.client.post("/api/v1/analysis", json={})

        assert response.status_code == 200
        assert response.json()["insights"]

    def test_with_history(self):
        response = self.client.post(
            "/api/v1/analysis",
            json={"include_history": True, "history_hours": 12},
        )
        data = response.json()

        assert response.status_code == 200
        assert "power_consumption" in data["statistics"]
        assert data["statistics"]["temperature"]["trend"] in ("increasing", "decreasing", "stable")

    def test_history_hours_validated(self):
        response = self.client.post(
            "/api/v1/analysis",
            json={"include_history": True, "history_hours": 0},
        )

        assert response.status_code == 422


class TestResponseCache(ApiTestCase):
    """Test caching of snapshot and history responses."""

    def test_iot_hit_within_ttl(self):
        first = self.client.get("/api/v1/data/iot")
        self.clock.advance(29)
        second = self.client.get("/api/v1/data/iot")

        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"
        assert second.json() == first.json()

    def test_iot_miss_after_ttl(self):
        self.client.get("/api/v1/data/iot")
        self.clock.advance(30)

        response = self.client.get("/api/v1/data/iot")

        assert response.status_code == 200
        assert response.headers["X-Cache"] == "MISS"

    def test_history_ttl(self):
        first = self.client.get("/api/v1/data/history", params={"hours": 6})
        self.clock.advance(299)
        second = self.client.get("/api/v1/data/history", params={"hours": 6})
        self.clock.advance(1)
        third = self.client.get("/api/v1/data/history", params={"hours": 6})

        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"
        assert second.json() == first.json()
        assert third.headers["X-Cache"] == "MISS"

    def test_keyed_on_query(self):
        six = self.client.get("/api/v1/data/history", params={"hours": 6})
        twelve = self.client.get("/api/v1/data/history", params={"hours": 12})
        forced = self.client.get("/api/v1/data/iot", params={"scenario": "hvac_issue"})
        plain = self.client.get("/api/v1/data/iot")

        assert [r.headers["X-Cache"] for r in (six, twelve, forced, plain)] == ["MISS"] * 4
        assert len(twelve.json()["energy"]["cost"]) == 13
        assert forced.json()["scenario"] == "hvac_issue"
        assert plain.json()["scenario"] == "normal"

    def test_bypass(self):
        cached = self.client.get("/api/v1/data/iot")
        bypass = self.client.get("/api/v1/data/iot", params={"no_cache": "true"})

        assert cached.headers["X-Cache"] == "MISS"
        assert bypass.headers["X-Cache"] == "BYPASS"
        assert bypass.json() != cached.json()
        assert self.client.get("/api/v1/data/iot").headers["X-Cache"] == "HIT"

    def test_bypass_does_not_store(self):
        self.client.get("/api/v1/data/history", params={"hours": 3, "no_cache": "true"})

        response = self.client.get("/api/v1/data/history", params={"hours": 3})

        assert response.headers["X-Cache"] == "MISS"

    def test_other_endpoints_are_not_cached(self):
        response = self.client.get("/api/v1/alerts")

        assert "X-Cache" not in response.headers


class TestRateLimits(ApiTestCase):
    """Test per-endpoint request ceilings."""

    def test_analysis_ceiling(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_ANALYSIS", "2/minute")

        codes = [self.client.post("/api/v1/analysis", json={}).status_code for _ in range(3)]

        assert codes == [200, 200, 429]

    def test_data_ceiling_counts_cached_hits(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_DATA", "1/minute")

        first = self.client.get("/api/v1/data/iot")
        second = self.client.get("/api/v1/data/iot")

        assert first.status_code == 200
        assert second.status_code == 429
        assert "Rate limit exceeded" in second.json()["error"]

    def test_alerts_ceiling(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_ALERTS", "1/minute")

        assert self.client.get("/api/v1/alerts/anomalies").status_code == 200
        assert self.client.get("/api/v1/alerts/anomalies").status_code == 429

    def test_health_is_not_limited(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_DATA", "1/minute")
        monkeypatch.setenv("RATE_LIMIT_ALERTS", "1/minute")

        codes = [self.client.get("/health").status_code for _ in range(5)]

        assert codes == [200] * 5

    def test_default_ceiling_allows_normal_use(self):
        codes = [self.client.post("/api/v1/analysis", json={}).status_code for _ in range(5)]

        assert codes == [200] * 5


class TestEngineEnumsOnTheWire(ApiTestCase):
    """API models carry the engine's enums rather than copies of them."""

    @pytest.mark.parametrize("scenario", list(Scenario))
    def test_every_forced_scenario_serializes(self, scenario):
        response = self.client.get("/api/v1/data/iot", params={"scenario": scenario.value})

        assert response.status_code == 200
        assert response.json()["scenario"] == scenario.value

    def test_scenario_info_uses_engine_enum(self):
        for profile in ScenarioLibrary.get_all_profiles():
            assert ScenarioInfo(**profile.to_dict()).type is profile.scenario

    def test_alert_item_uses_engine_enum(self):
        for kind in AlertKind:
            item = AlertItem(type=kind.value, message="m", timestamp=BASE_TIME)
            assert item.type is kind

    def test_iot_data_converts_to_engine_snapshot(self):
        snapshot = make_snapshot(
            scenario=Scenario.HVAC_ISSUE, hvac_status=HVACStatus.MAINTENANCE
        )

        converted = IoTData(**snapshot.to_dict()).to_snapshot()

        assert converted == snapshot
        assert converted.building.hvac_status is HVACStatus.MAINTENANCE
        assert converted.scenario is Scenario.HVAC_ISSUE
