# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Request ID tracking, access logging, and provider-quota rate limiting."""

from __future__ import annotations

import logging
import time
import uuid
from collections import deque

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from repwatch.core.config import get_settings

logger = logging.getLogger("repwatch.api.middleware")

_WINDOW = 60.0
_CLEANUP_INTERVAL = 60.0  # seconds between full sweeps
_last_cleanup: float = 0.0

# Request timestamps per caller identity, oldest first
_request_log: dict[str, deque[float]] = {}

# Only routes that call third-party providers are throttled; blacklist
# reads and health probes are cheap local lookups.
_LIMITED_PREFIXES: tuple[str, ...] = ("/api/v1/check",)


def _identity(request: Request) -> tuple[str, int]:
    """Return the rate-limit bucket for *request* and its per-minute budget."""
    settings = get_settings()
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"key:{api_key}", settings.rate_limit_per_key
    client_ip = request.client.host if request.client else "unknown"
    return f"ip:{client_ip}", settings.rate_limit_per_ip


def _prune(identity: str, now: float) -> deque[float]:
    """Drop expired timestamps for *identity*; forget it once none remain."""
    window = _request_log.get(identity)
    if window is None:
        return deque()
    while window and now - window[0] >= _WINDOW:
        window.popleft()
    if not window:
        del _request_log[identity]
    return window


def _cleanup_old_entries(now: float) -> None:
    """Prune every tracked identity and drop the idle ones."""
    global _last_cleanup
    for identity in list(_request_log):
        _prune(identity, now)
    _last_cleanup = now


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute window per API key or client IP.

    Provider quotas (IPQS, VirusTotal) are small, so a single caller must
    not be able to drain them.  Over-budget requests get **429** with a
    ``Retry-After`` header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(_LIMITED_PREFIXES):
            return await call_next(request)

        identity, limit = _identity(request)
        now = time.monotonic()
        if now - _last_cleanup > _CLEANUP_INTERVAL:
            _cleanup_old_entries(now)
        window = _prune(identity, now)

        if len(window) >= limit:
            retry_after = int(_WINDOW - (now - window[0])) + 1
            logger.warning("Rate limit hit for %s on %s", identity.split(":")[0], request.url.path)
            return JSONResponse(
                status_code=429,
                content={"success": False, "message": "Rate limit exceeded"},
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        window.append(now)
        _request_log[identity] = window
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, limit - len(window)))
        return response


class RequestMiddleware(BaseHTTPMiddleware):
    """Propagate or assign ``X-Request-ID`` and log one line per request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.monotonic()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.monotonic() - start) * 1000,
            extra={"request_id": request_id},
        )
        return response
