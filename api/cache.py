"""
Response Cache

A small in-process TTL store for GET responses. Entries are keyed on
the request path and query string, so `/data/history?hours=6` and
`/data/history?hours=12` are cached separately. Callers can skip the
cache for one request with `?no_cache=true`; such requests neither read
nor write an entry.

The outcome is reported in the `X-Cache` response header: HIT, MISS or
BYPASS.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from fastapi import Request, Response

logger = logging.getLogger(__name__)

BYPASS_PARAM = "no_cache"
CACHE_HEADER = "X-Cache"


@dataclass
class CacheEntry:
    """A cached response body and the moment it stops being served."""
    body: Any
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class ResponseCache:
    """Thread-safe TTL cache for response bodies."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached body, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self.clock()):
                del self._entries[key]
                return None
            return entry.body

    def set(self, key: str, body: Any, ttl_seconds: float) -> None:
        expires_at = self.clock() + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._entries[key] = CacheEntry(body=body, expires_at=expires_at)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def serve(
        self,
        request: Request,
        response: Response,
        ttl_seconds: float,
        build: Callable[[], Any],
    ) -> Any:
        """
        Return a cached body for this request, or build and store one.

        Args:
            request: Incoming request, used for the key and bypass flag
            response: Outgoing response that receives the X-Cache header
            ttl_seconds: Lifetime of a newly stored body
            build: Produces the body on a miss or bypass

        Returns:
            The response body
        """
        if is_bypass(request):
            response.headers[CACHE_HEADER] = "BYPASS"
            return build()

        key = cache_key(request)
        body = self.get(key)
        if body is not None:
            response.headers[CACHE_HEADER] = "HIT"
            return body

        body = build()
        self.set(key, body, ttl_seconds)
        response.headers[CACHE_HEADER] = "MISS"
        logger.debug(f"Cached {key} for {ttl_seconds}s")
        return body


def is_bypass(request: Request) -> bool:
    value = request.query_params.get(BYPASS_PARAM, "")
    return value.lower() in ("1", "true", "yes")


def cache_key(request: Request) -> str:
    """Path plus sorted query parameters, without the bypass flag."""
    params = sorted(
        (k, v) for k, v in request.query_params.multi_items() if k != BYPASS_PARAM
    )
    query = "&".join(f"{k}={v}" for k, v in params)
    return f"{request.url.path}?{query}" if query else request.url.path
