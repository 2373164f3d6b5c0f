"""
Rentadora API - Rate Limiting Middleware
=========================================

What:  Per-client-IP sliding window limit on request count.
How:   SlidingWindowRateLimiter keeps a deque of request timestamps per key;
       RateLimitMiddleware asks it for a decision on every request and answers
       429 with Retry-After when the window is full.

Algorithm: Sliding Window Log
    1. Drop timestamps older than `window` seconds from the key's deque
    2. If `limit` timestamps remain, reject and report when the oldest expires
    3. Otherwise record now and allow

State is process-local; with several uvicorn workers each one counts
separately.
"""

import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from rentadora.config import settings
from rentadora.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """
    Counts hits per key inside a moving time window.

    Args:
        limit:  Maximum hits allowed inside the window
        window: Window length in seconds
        clock:  Time source, injectable for tests
    """

    def __init__(
        self,
        limit: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}

    def hit(self, key: str) -> Optional[int]:
        """
        Record a hit for `key`.

        Returns:
            None if the hit is allowed, otherwise the number of seconds
            until the oldest hit leaves the window (at least 1).
        """
        now = self._clock()
        window_start = now - self.window
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.limit:
            return max(1, int(hits[0] + self.window - now) + 1)

        hits.append(now)
        return None

    def prune(self) -> int:
        """Forget keys with no hits inside the window. Returns how many."""
        window_start = self._clock() - self.window
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._hits)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Applies SlidingWindowRateLimiter to every request except the exempt
    paths (health check and API documentation).
    """

    EXEMPT_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})

    # Prune idle clients once this many are tracked
    PRUNE_THRESHOLD = 10_000

    def __init__(self, app: ASGIApp, limiter: Optional[SlidingWindowRateLimiter] = None) -> None:
        super().__init__(app)
        self.limiter = limiter or SlidingWindowRateLimiter(
            limit=settings.rate_limit_requests,
            window=settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        retry_after = self.limiter.hit(client_ip)

        if retry_after is not None:
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ss window",
                client_ip,
                self.limiter.limit,
                self.limiter.window,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": f"Demasiadas solicitudes. Intente de nuevo en {retry_after} segundos.",
                    "details": {"retry_after": retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        if len(self.limiter) > self.PRUNE_THRESHOLD:
            pruned = self.limiter.prune()
            logger.debug("Pruned %d idle rate limit entries", pruned)

        return await call_next(request)
