from .rate_limit import RateLimitMiddleware, RateLimitRule, SlidingWindowRateLimiter
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "RateLimitMiddleware",
    "RateLimitRule",
    "SlidingWindowRateLimiter",
    "SecurityHeadersMiddleware",
]
