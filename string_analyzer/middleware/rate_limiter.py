import math
import time
import logging
from threading import Lock
from typing import Callable, Dict, Iterable, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class FixedWindowCounter:
    """Counts hits per key inside fixed time windows."""

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def hit(self, key: str) -> Tuple[bool, int, float]:
        """
        Record one request for key.
        Returns (allowed, remaining, seconds until the window resets).
        """
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)

        reset_in = self.window_seconds - (now - started)
        return count <= self.limit, max(self.limit - count, 0), reset_in

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        """Drop windows that have expired. Caller holds the lock."""
        expired = [
            key for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limit: int, window_seconds: int, exempt_paths: Iterable[str] = ("/health",)):
        super().__init__(app)
        self.counter = FixedWindowCounter(limit, window_seconds)
        self.exempt_paths = set(exempt_paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        allowed, remaining, reset_in = self.counter.hit(client)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client} on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": "Too many requests, please try again later."},
                headers={"Retry-After": str(math.ceil(reset_in))},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.counter.limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
