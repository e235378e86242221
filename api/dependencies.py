"""
Shared Dependencies for the API

The generator owns the live scenario rotation, so the whole process
must share one instance. Routes receive it through FastAPI's dependency
injection, which lets tests swap in a seeded generator. The response cache is
shared the same way.
"""

import logging
from functools import lru_cache

from engine.generator import TelemetryGenerator

from api.cache import ResponseCache
from api.settings import get_simulation_seed

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_generator() -> TelemetryGenerator:
    """
    Dependency that provides the process-wide telemetry generator.

    Usage in FastAPI:
        @router.get("/iot")
        def current(generator: TelemetryGenerator = Depends(get_generator)):
            return generator.generate_current_snapshot()
    """
    seed = get_simulation_seed()
    logger.info(f"Creating telemetry generator (seed={seed})")
    return TelemetryGenerator(random_seed=seed)


@lru_cache(maxsize=1)
def get_response_cache() -> ResponseCache:
    """Dependency that provides the process-wide response cache."""
    return ResponseCache()
