"""
Request Rate Limiting

Per-client ceilings keyed on the remote address. Routes pass one of the
settings getters as the limit, so it is read from the environment on
every request:

- RATE_LIMIT_DATA: telemetry endpoints (default 300/minute)
- RATE_LIMIT_ALERTS: predictions, anomalies and alerts (default 100/minute)
- RATE_LIMIT_ANALYSIS: narrative analysis (default 20/minute)

System endpoints (`/` and `/health`) are not limited.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from api.settings import is_rate_limit_enabled

limiter = Limiter(key_func=get_remote_address, enabled=is_rate_limit_enabled())
