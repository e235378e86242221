"""
Telemetry Data Endpoints

Serves the current building and energy snapshot, hourly history, and
the catalogue of scenarios the simulator rotates through.

Key Features:
- Current snapshot with optional scenario override (?scenario=...)
- History bounded to 7 days
- Snapshot and history responses cached (30 s and 5 min by default)
- Scenario catalogue with the scenario currently in rotation
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from api.cache import ResponseCache
from api.dependencies import get_generator, get_response_cache
from api.models import HistoryResponse, IoTData, ScenarioInfo, ScenarioListResponse
from api.rate_limit import limiter
from api.settings import (
    get_cache_history_ttl_seconds,
    get_cache_iot_ttl_seconds,
    get_data_rate_limit,
)
from engine.generator import MAX_HISTORY_HOURS, TelemetryGenerator
from engine.scenarios import ScenarioLibrary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["Telemetry Data"])


@router.get(
    "/iot",
    response_model=IoTData,
    summary="Current snapshot",
    description="""
    Generate the current building and energy readings.

    Pass `scenario` to force one of the simulator's scenarios for this
    request only (for example `?scenario=extreme_temp_high`). Unknown
    values are ignored and the live rotation is used.

    Responses are cached per URL for `CACHE_IOT_TTL_SECONDS` (30 s by
    default). Pass `no_cache=true` to skip the cache.
    """
)
@limiter.limit(get_data_rate_limit)
def get_current_data(
    request: Request,
    response: Response,
    scenario: Optional[str] = Query(None, description="Scenario override"),
    no_cache: bool = Query(False, description="Skip the response cache"),
    generator: TelemetryGenerator = Depends(get_generator),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Get the current snapshot."""
    return cache.serve(
        request,
        response,
        get_cache_iot_ttl_seconds(),
        lambda: generator.generate_current_snapshot(force_scenario=scenario).to_dict(),
    )


@router.get(
    "/history",
    response_model=HistoryResponse,
    summary="Hourly history",
    description="""
    Hourly history of every channel, generated under normal operation.

    Cached per URL for `CACHE_HISTORY_TTL_SECONDS` (5 min by default).
    Pass `no_cache=true` to skip the cache.
    """
)
@limiter.limit(get_data_rate_limit)
def get_history(
    request: Request,
    response: Response,
    hours: int = Query(24, ge=0, le=MAX_HISTORY_HOURS, description="Hours of history"),
    no_cache: bool = Query(False, description="Skip the response cache"),
    generator: TelemetryGenerator = Depends(get_generator),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Get historical data."""
    def build():
        history = generator.generate_history(hours)
        logger.debug(f"Generated {len(history)} history points")
        return history.to_dict()

    return cache.serve(request, response, get_cache_history_ttl_seconds(), build)


@router.get(
    "/scenarios",
    response_model=ScenarioListResponse,
    summary="List scenarios",
    description="List every scenario and the one currently in rotation."
)
@limiter.limit(get_data_rate_limit)
def list_scenarios(
    request: Request,
    generator: TelemetryGenerator = Depends(get_generator),
):
    """List all available scenarios."""
    return ScenarioListResponse(
        scenarios=[
            ScenarioInfo(**profile.to_dict())
            for profile in ScenarioLibrary.get_all_profiles()
        ],
        active=generator.state_machine.state.active,
    )
