"""Per-client fixed-window rate limiting.

Built on the `limits` library (the engine behind slowapi). The limiter is an
explicit object stored on `app.state.rate_limiter` and enforced through the
`enforce_rate_limit` dependency, so tests can install their own instance.
Counters live in process memory and every hit is counted under a lock, so
concurrent bursts from one client are never undercounted.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, Response
from limits import RateLimitItemPerMinute
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter
from slowapi.util import get_remote_address

from recipe_relay.core.settings import Settings
from recipe_relay.domain.exceptions import RateLimitedError

RATE_LIMITED_MESSAGE = "Too many requests, please try again later."


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    @property
    def retry_after_seconds(self) -> int:
        return max(int(math.ceil(self.reset_at - time.time())), 0)


class ClientRateLimiter:
    """Allow at most `max_requests` per client key in each `window_minutes` window."""

    def __init__(
        self,
        *,
        max_requests: int,
        window_minutes: int,
        key_func: Callable[[Request], str] = get_remote_address,
        scope: str = "recipe",
        storage: Storage | None = None,
    ):
        self._item = RateLimitItemPerMinute(max_requests, window_minutes)
        self._limiter = FixedWindowRateLimiter(storage or MemoryStorage())
        self._key_func = key_func
        self._scope = scope
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientRateLimiter:
        return cls(
            max_requests=settings.rate_limit_max_requests,
            window_minutes=settings.rate_limit_window_minutes,
        )

    @property
    def max_requests(self) -> int:
        return self._item.amount

    def hit_key(self, key: str) -> RateLimitResult:
        # Dependencies run in the threadpool; keep the count and its stats consistent.
        with self._lock:
            allowed = self._limiter.hit(self._item, self._scope, key)
            stats = self._limiter.get_window_stats(self._item, self._scope, key)
        return RateLimitResult(
            allowed=allowed,
            limit=self._item.amount,
            remaining=stats.remaining,
            reset_at=stats.reset_time,
        )

    def hit(self, request: Request) -> RateLimitResult:
        return self.hit_key(self._key_func(request))


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(int(result.reset_at)),
    }


def enforce_rate_limit(request: Request, response: Response) -> None:
    """FastAPI dependency: count the request and reject it once the client is over the limit."""

    limiter: ClientRateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return

    result = limiter.hit(request)
    # Error responses are built by the exception handlers, which read it from here.
    request.state.rate_limit = result
    response.headers.update(rate_limit_headers(result))

    if not result.allowed:
        raise RateLimitedError(RATE_LIMITED_MESSAGE, retry_after=result.retry_after_seconds)
