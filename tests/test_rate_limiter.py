"""Tests for the fixed-window rate limiter."""

import pytest

from quiz_app.helpers.rate_limiter import FixedWindowRateLimiter, QUIZ_SUBMIT_RULE

from conftest import create_quiz


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_allows_up_to_limit_then_rejects():
    limiter = FixedWindowRateLimiter(clock=FakeClock())

    decisions = [limiter.hit("ip:1", limit=3, window_seconds=60) for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]


def test_window_resets_after_expiry():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(clock=clock)
    for _ in range(2):
        limiter.hit("ip:1", limit=2, window_seconds=60)
    assert limiter.hit("ip:1", limit=2, window_seconds=60).allowed is False

    clock.now += 61

    assert limiter.hit("ip:1", limit=2, window_seconds=60).allowed is True


def test_keys_are_counted_separately():
    limiter = FixedWindowRateLimiter(clock=FakeClock())
    limiter.hit("ip:1", limit=1, window_seconds=60)

    assert limiter.hit("ip:1", limit=1, window_seconds=60).allowed is False
    assert limiter.hit("ip:2", limit=1, window_seconds=60).allowed is True


def test_retry_after_counts_down_to_window_end():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(clock=clock)
    limiter.hit("ip:1", limit=1, window_seconds=60)
    clock.now += 20

    decision = limiter.hit("ip:1", limit=1, window_seconds=60)

    assert decision.retry_after(clock.now) == 40


def test_reset_clears_a_key():
    limiter = FixedWindowRateLimiter(clock=FakeClock())
    limiter.hit("ip:1", limit=1, window_seconds=60)
    limiter.reset("ip:1")

    assert limiter.hit("ip:1", limit=1, window_seconds=60).allowed is True


@pytest.mark.asyncio
async def test_submission_endpoint_is_throttled_per_client(client, owner_headers):
    quiz = await create_quiz(client, owner_headers)
    body = {"participant_name": "Spammer", "answers": {}}

    for _ in range(QUIZ_SUBMIT_RULE.limit):
        response = await client.post(f"/api/quizzes/{quiz['id']}/submit", json=body)
        assert response.status_code == 200

    response = await client.post(f"/api/quizzes/{quiz['id']}/submit", json=body)

    assert response.status_code == 429
    assert response.json()["code"] == "TOO_MANY_REQUESTS"
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert "Retry-After" in response.headers

    other_client = await client.post(
        f"/api/quizzes/{quiz['id']}/submit",
        json=body,
        headers={"X-Forwarded-For": "203.0.113.9"},
    )
    assert other_client.status_code == 200
