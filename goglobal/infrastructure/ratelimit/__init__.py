# Rate Limiting
# =============
# Fixed-window limiter in front of the analysis endpoint, backed by a
# swappable store.

from .rate_limiter import RateLimiter, RateLimitRecord, RateLimitStore, InMemoryRateLimitStore

__all__ = ["RateLimiter", "RateLimitRecord", "RateLimitStore", "InMemoryRateLimitStore"]
