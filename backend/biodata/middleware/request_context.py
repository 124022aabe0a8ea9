"""Request context middleware: request ids, timing, access log and rate limiting.

All four concerns run in one pass. The limiter itself is the pure function
``check_rate_limit`` so it can be tested without an app.
"""

import logging
import threading
import time
import uuid
from typing import Dict, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..core.logging_config import request_id_var
from ..exceptions import ErrorCode

logger = logging.getLogger(__name__)

# {client_key: (available_tokens, last_seen)}
Buckets = Dict[str, Tuple[float, float]]

_rate_buckets: Buckets = {}
_rate_lock = threading.Lock()

# Buckets idle longer than this are dropped on the next sweep.
_IDLE_SECONDS = 120.0
_SWEEP_INTERVAL = 60.0
_last_sweep = 0.0

# Probes and docs are never throttled.
_EXEMPT_PATHS = frozenset({"/", "/health", "/api", "/openapi.json"})


def check_rate_limit(
    buckets: Buckets,
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> Tuple[bool, float]:
    """Spend one token from *key*'s bucket.

    The bucket holds up to *max_per_minute* tokens and refills continuously
    at ``max_per_minute / 60`` tokens per second. *buckets* is updated in
    place.

    Returns:
        ``(allowed, retry_after)``; *retry_after* is the seconds until a
        token is available, 0.0 when allowed. A non-positive limit always
        allows.
    """
    global _last_sweep

    if max_per_minute <= 0:
        return True, 0.0
    if now is None:
        now = time.monotonic()

    if now - _last_sweep >= _SWEEP_INTERVAL:
        _last_sweep = now
        for stale in [k for k, (_, seen) in buckets.items() if now - seen > _IDLE_SECONDS]:
            del buckets[stale]

    per_second = max_per_minute / 60.0
    tokens, seen = buckets.get(key, (float(max_per_minute), now))
    tokens = min(float(max_per_minute), tokens + (now - seen) * per_second)

    if tokens < 1.0:
        buckets[key] = (tokens, now)
        return False, (1.0 - tokens) / per_second

    buckets[key] = (tokens - 1.0, now)
    return True, 0.0


def _client_key(request: Request) -> str:
    """First ``X-Forwarded-For`` hop when proxied, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        request_id_var.set(rid)
        path = request.url.path

        if path not in _EXEMPT_PATHS:
            key = _client_key(request)
            with _rate_lock:
                allowed, retry_after = check_rate_limit(
                    _rate_buckets, key, settings.rate_limit_per_minute
                )
            if not allowed:
                retry_after = round(retry_after, 1)
                logger.warning(
                    "Rate limit exceeded",
                    extra={"client": key, "path": path, "retry_after": retry_after},
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": ErrorCode.RATE_LIMITED.value,
                        "message": "Too many requests",
                        "details": {"retry_after": retry_after},
                    },
                    headers={
                        "Retry-After": str(int(retry_after) + 1),
                        "X-Request-ID": rid,
                    },
                )

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers["X-Request-ID"] = rid
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        logger.info(
            "%s %s %s",
            request.method,
            path,
            response.status_code,
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
