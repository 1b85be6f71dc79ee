# middleware/rate_limit.py
import math
import time
import logging
import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


@dataclass
class RateLimitRule:
    """Requests allowed per client IP within a window, for paths under a prefix"""
    path_prefix: str
    max_requests: int
    window_seconds: float
    message: str


class SlidingWindowRateLimiter:
    """Per-key request log; a request is allowed while fewer than max_requests fall inside the window"""

    def __init__(self, max_requests: int, window_seconds: float):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int, float]:
        """
        Record a request for ``key``.
        Returns: (allowed, remaining, seconds until the window frees a slot)
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            timestamps = self._requests[key]
            cutoff = now - self.window_seconds
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()

            if len(timestamps) >= self.max_requests:
                reset = timestamps[0] + self.window_seconds - now
                return False, 0, max(0.0, reset)

            timestamps.append(now)
            remaining = self.max_requests - len(timestamps)
            reset = timestamps[0] + self.window_seconds - now
            return True, remaining, max(0.0, reset)

    def reset(self):
        with self._lock:
            self._requests.clear()


class RateLimitMiddleware:
    """HTTP middleware applying every matching rule to a request"""

    def __init__(self, rules: List[RateLimitRule], enabled: bool = True):
        self.enabled = enabled
        self.rules = [
            (rule, SlidingWindowRateLimiter(rule.max_requests, rule.window_seconds))
            for rule in rules
        ]

    def reset(self):
        for _, limiter in self.rules:
            limiter.reset()

    async def __call__(self, request: Request, call_next):
        if not self.enabled:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path
        headers = {}

        # Most specific rule last so its counters end up in the response headers
        for rule, limiter in sorted(self.rules, key=lambda r: len(r[0].path_prefix)):
            if not path.startswith(rule.path_prefix):
                continue

            allowed, remaining, reset = limiter.hit(client_ip)
            headers = {
                "RateLimit-Limit": str(rule.max_requests),
                "RateLimit-Remaining": str(remaining),
                "RateLimit-Reset": str(math.ceil(reset)),
            }
            if not allowed:
                logger.warning(f"Rate limit exceeded: {client_ip} {request.method} {path}")
                headers["Retry-After"] = str(math.ceil(reset))
                return JSONResponse(status_code=429, content={"detail": rule.message}, headers=headers)

        response = await call_next(request)
        for header, value in headers.items():
            response.headers[header] = value
        return response
