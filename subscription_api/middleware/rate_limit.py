"""
Per-IP request rate limiting (in-memory, process-local)
"""
import time
import logging
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS_MESSAGE = "Too many requests, please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding window limit: ``max_requests`` per ``window_seconds`` per client IP."""

    def __init__(self, app, max_requests: int = 100, window_seconds: int = 900, enabled: bool = True):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.enabled = enabled
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._cleanup_interval = window_seconds
        self._last_cleanup = 0.0

    def _get_client_id(self, request: Request) -> str:
        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"

    def _cleanup_old_entries(self, now: float) -> None:
        """Drop clients whose whole window has expired"""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - self.window_seconds
        expired = [client_id for client_id, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for client_id in expired:
            del self._hits[client_id]
        self._last_cleanup = now

    def _allow(self, client_id: str, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        self._cleanup_old_entries(now)
        hits = self._hits[client_id]
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    async def dispatch(self, request: Request, call_next):
        if not self.enabled:
            return await call_next(request)

        client_id = self._get_client_id(request)
        if not self._allow(client_id):
            logger.warning(f"Rate limit exceeded for {client_id} on {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"status": 429, "message": TOO_MANY_REQUESTS_MESSAGE},
                headers={"Retry-After": str(self.window_seconds)},
            )
        return await call_next(request)
