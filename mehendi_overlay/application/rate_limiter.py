"""Per-key request limiting, held as an injectable instance."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitPolicy:
    max_requests: int
    window_s: float
    cooldown_s: float = 0.0

    def __post_init__(self) -> None:
        if self.max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if self.window_s <= 0:
            raise ValueError("window_s must be positive")
        if self.cooldown_s < 0:
            raise ValueError("cooldown_s must not be negative")


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int | None = None
    retry_after: int | None = None


@dataclass
class _Entry:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window counters and cooldowns keyed by operation name.

    Window counters and cooldown timestamps live in separate tables so a key
    can be subject to both without one resetting the other. Expired entries
    are swept at most once per default window, so tables keyed by client
    address stay bounded by the clients seen recently.
    """

    def __init__(
        self,
        default_max: int = 10,
        default_window_s: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_max = default_max
        self._default_window_s = default_window_s
        self._clock = clock
        self._windows: dict[str, _Entry] = {}
        self._cooldowns: dict[str, float] = {}
        self._longest_cooldown = 0.0
        self._next_sweep = float("-inf")
        self._lock = threading.Lock()

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows.keys() | self._cooldowns.keys())

    def check_limit(
        self,
        key: str,
        max_requests: int | None = None,
        window_s: float | None = None,
    ) -> RateLimitDecision:
        with self._lock:
            now = self._now()
            return self._count(key, max_requests or self._default_max, window_s or self._default_window_s, now)

    def check_cooldown(self, key: str, cooldown_s: float) -> RateLimitDecision:
        with self._lock:
            now = self._now()
            decision = self._cooldown_decision(key, cooldown_s, now)
            if decision.allowed:
                self._stamp_cooldown(key, cooldown_s, now)
            return decision

    def check_policy(self, key: str, policy: RateLimitPolicy) -> RateLimitDecision:
        """Apply the cooldown, then the window; only an admitted request restarts the cooldown."""

        with self._lock:
            now = self._now()
            if policy.cooldown_s > 0:
                cooldown = self._cooldown_decision(key, policy.cooldown_s, now)
                if not cooldown.allowed:
                    return cooldown
            decision = self._count(key, policy.max_requests, policy.window_s, now)
            if decision.allowed and policy.cooldown_s > 0:
                self._stamp_cooldown(key, policy.cooldown_s, now)
            return decision

    def remaining(self, key: str, max_requests: int | None = None) -> int:
        limit = max_requests or self._default_max
        with self._lock:
            entry = self._windows.get(key)
            if entry is None or self._clock() >= entry.reset_at:
                return limit
            return max(0, limit - entry.count)

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)
            self._cooldowns.pop(key, None)

    def reset_all(self) -> None:
        with self._lock:
            self._windows.clear()
            self._cooldowns.clear()

    # The helpers below expect the lock to be held.

    def _now(self) -> float:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
            self._next_sweep = now + self._default_window_s
        return now

    def _sweep(self, now: float) -> None:
        expired = [key for key, entry in self._windows.items() if now >= entry.reset_at]
        for key in expired:
            del self._windows[key]
        cooled = [key for key, last in self._cooldowns.items() if now - last >= self._longest_cooldown]
        for key in cooled:
            del self._cooldowns[key]

    def _count(self, key: str, limit: int, window: float, now: float) -> RateLimitDecision:
        entry = self._windows.get(key)
        if entry is None or now >= entry.reset_at:
            self._windows[key] = _Entry(count=1, reset_at=now + window)
            return RateLimitDecision(allowed=True, remaining=limit - 1)

        if entry.count < limit:
            entry.count += 1
            return RateLimitDecision(allowed=True, remaining=limit - entry.count)

        return RateLimitDecision(allowed=False, remaining=0, retry_after=math.ceil(entry.reset_at - now))

    def _cooldown_decision(self, key: str, cooldown_s: float, now: float) -> RateLimitDecision:
        last = self._cooldowns.get(key)
        if last is None or now - last >= cooldown_s:
            return RateLimitDecision(allowed=True)
        return RateLimitDecision(allowed=False, retry_after=math.ceil(cooldown_s - (now - last)))

    def _stamp_cooldown(self, key: str, cooldown_s: float, now: float) -> None:
        self._cooldowns[key] = now
        self._longest_cooldown = max(self._longest_cooldown, cooldown_s)


__all__ = ["RateLimitDecision", "RateLimitPolicy", "RateLimiter"]
