"""
Request throttling for the public submission endpoint and admin writes.

The limiter is a plain object stored on `app.state.rate_limiter`, so tests
(or a deployment backed by a shared store) can swap it out. Routes declare
the bucket they belong to through the `rate_limit` dependency.
"""

import logging
import math
import os
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from dotenv import load_dotenv
from fastapi import Request

from quiz_app.errors import RateLimited

load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    bucket: str
    limit: int
    window_seconds: int


QUIZ_SUBMIT_RULE = RateLimitRule(
    "quiz-submit",
    int(os.getenv("QUIZ_SUBMIT_RATE_LIMIT", 10)),
    int(os.getenv("QUIZ_SUBMIT_RATE_WINDOW_SECONDS", 60)),
)
ADMIN_RULE = RateLimitRule(
    "admin",
    int(os.getenv("ADMIN_RATE_LIMIT", 30)),
    int(os.getenv("ADMIN_RATE_WINDOW_SECONDS", 60)),
)
AUTH_RULE = RateLimitRule(
    "auth",
    int(os.getenv("AUTH_RATE_LIMIT", 5)),
    int(os.getenv("AUTH_RATE_WINDOW_SECONDS", 60)),
)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def retry_after(self, now: float) -> int:
        return max(0, math.ceil(self.reset_at - now))


class FixedWindowRateLimiter:
    """
    Counts hits per key in fixed windows. The first hit opens a window of
    `window_seconds`; hits beyond `limit` inside it are rejected.
    """

    def __init__(self, clock: Callable[[], float] = time.time, cleanup_interval: float = 300):
        self._clock = clock
        self._windows: Dict[str, list] = {}
        self._lock = threading.Lock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = clock()

    def now(self) -> float:
        return self._clock()

    def _cleanup_expired(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        expired = [key for key, (_, reset_at) in self._windows.items() if reset_at <= now]
        for key in expired:
            del self._windows[key]
        self._last_cleanup = now

    def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            self._cleanup_expired(now)

            window = self._windows.get(key)
            if window is None or window[1] <= now:
                window = [0, now + window_seconds]
                self._windows[key] = window

            window[0] += 1
            count, reset_at = window

        if count > limit:
            return RateLimitDecision(False, limit, 0, reset_at)
        return RateLimitDecision(True, limit, limit - count, reset_at)

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(rule: RateLimitRule):
    """FastAPI dependency rejecting the request with 429 once `rule` is exhausted."""

    async def dependency(request: Request) -> None:
        limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
        key = f"{rule.bucket}:{client_address(request)}"
        decision = limiter.hit(key, rule.limit, rule.window_seconds)

        if decision.allowed:
            return

        logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
        raise RateLimited(
            "Too many requests, please slow down",
            headers={
                "Retry-After": str(decision.retry_after(limiter.now())),
                "X-RateLimit-Limit": str(decision.limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(int(decision.reset_at)),
            },
        )

    return dependency
