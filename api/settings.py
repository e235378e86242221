"""
API Configuration

All settings come from environment variables so the same image can run
in development and production.
"""

import os
from typing import Optional


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def is_debug() -> bool:
    return os.getenv("DEBUG", "false").lower() == "true"


def get_cors_origins() -> list:
    """Comma-separated list of allowed origins."""
    origins = os.getenv("CORS_ORIGIN", "http://localhost:3000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def get_simulation_seed() -> Optional[int]:
    """Seed for the shared generator, or None for nondeterministic output."""
    seed = os.getenv("SIMULATION_SEED")
    return int(seed) if seed else None


def get_prediction_history_hours() -> int:
    """Hours of history feeding predictions and anomaly bands."""
    return int(os.getenv("PREDICTION_HISTORY_HOURS", 168))


def get_cache_iot_ttl_seconds() -> int:
    return int(os.getenv("CACHE_IOT_TTL_SECONDS", 30))


def get_cache_history_ttl_seconds() -> int:
    return int(os.getenv("CACHE_HISTORY_TTL_SECONDS", 300))


def is_rate_limit_enabled() -> bool:
    return os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_data_rate_limit() -> str:
    """Ceiling for the telemetry endpoints, in slowapi notation."""
    return os.getenv("RATE_LIMIT_DATA", "300/minute")


def get_alerts_rate_limit() -> str:
    return os.getenv("RATE_LIMIT_ALERTS", "100/minute")


def get_analysis_rate_limit() -> str:
    return os.getenv("RATE_LIMIT_ANALYSIS", "20/minute")
