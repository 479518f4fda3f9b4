from __future__ import annotations

import pytest

from mehendi_overlay.application.rate_limiter import RateLimiter, RateLimitPolicy


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(default_max=3, default_window_s=10.0, clock=clock)


def test_window_allows_up_to_limit(limiter: RateLimiter) -> None:
    decisions = [limiter.check_limit("overlay") for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]
    assert decisions[-1].retry_after == 10


def test_window_resets_after_expiry(limiter: RateLimiter, clock: FakeClock) -> None:
    for _ in range(3):
        limiter.check_limit("overlay")
    clock.advance(4.2)
    assert limiter.check_limit("overlay").retry_after == 6

    clock.advance(6.0)

    assert limiter.check_limit("overlay").allowed
    assert limiter.remaining("overlay") == 2


def test_keys_are_independent(limiter: RateLimiter) -> None:
    for _ in range(3):
        limiter.check_limit("a")

    assert not limiter.check_limit("a").allowed
    assert limiter.check_limit("b").allowed


def test_explicit_limit_overrides_default(limiter: RateLimiter) -> None:
    assert limiter.check_limit("k", max_requests=1).allowed
    assert not limiter.check_limit("k", max_requests=1).allowed


def test_cooldown_blocks_rapid_repeats(limiter: RateLimiter, clock: FakeClock) -> None:
    assert limiter.check_cooldown("upload", 2.0).allowed

    clock.advance(0.5)
    blocked = limiter.check_cooldown("upload", 2.0)
    assert not blocked.allowed
    assert blocked.retry_after == 2

    clock.advance(1.5)
    assert limiter.check_cooldown("upload", 2.0).allowed


def test_policy_checks_cooldown_before_window(limiter: RateLimiter, clock: FakeClock) -> None:
    policy = RateLimitPolicy(max_requests=5, window_s=60.0, cooldown_s=1.0)

    assert limiter.check_policy("client", policy).allowed
    assert not limiter.check_policy("client", policy).allowed
    # the rejected request did not consume the window
    assert limiter.remaining("client", 5) == 4

    clock.advance(1.0)
    assert limiter.check_policy("client", policy).allowed


def test_reset_clears_key(limiter: RateLimiter) -> None:
    for _ in range(3):
        limiter.check_limit("x")
    limiter.check_cooldown("x", 30.0)

    limiter.reset("x")

    assert limiter.check_limit("x").allowed
    assert limiter.check_cooldown("x", 30.0).allowed


def test_reset_all(limiter: RateLimiter) -> None:
    limiter.check_limit("a")
    limiter.check_limit("b")

    limiter.reset_all()

    assert limiter.remaining("a") == 3
    assert limiter.remaining("b") == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_requests": 0, "window_s": 1.0},
        {"max_requests": 1, "window_s": 0.0},
        {"max_requests": 1, "window_s": 1.0, "cooldown_s": -1.0},
    ],
)
def test_policy_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        RateLimitPolicy(**kwargs)


def test_expired_entries_are_swept(limiter: RateLimiter, clock: FakeClock) -> None:
    policy = RateLimitPolicy(max_requests=3, window_s=10.0, cooldown_s=1.0)
    for i in range(10_000):
        limiter.check_policy(f"client-{i}", policy)
    assert limiter.tracked_keys == 10_000

    clock.advance(10.0)
    limiter.check_limit("late-client")

    assert limiter.tracked_keys == 1


def test_live_entries_survive_a_sweep(limiter: RateLimiter, clock: FakeClock) -> None:
    limiter.check_limit("old")
    clock.advance(5.0)
    for _ in range(3):
        limiter.check_limit("recent")

    clock.advance(6.0)
    decision = limiter.check_limit("recent")

    assert not decision.allowed
    assert decision.retry_after == 4
    assert limiter.tracked_keys == 1


def test_window_denial_does_not_restart_cooldown(clock: FakeClock) -> None:
    limiter = RateLimiter(clock=clock)
    policy = RateLimitPolicy(max_requests=1, window_s=10.0, cooldown_s=5.0)

    assert limiter.check_policy("client", policy).allowed
    clock.advance(8.0)
    denied = limiter.check_policy("client", policy)
    assert not denied.allowed
    assert denied.retry_after == 2

    clock.advance(2.0)
    assert limiter.check_policy("client", policy).allowed
