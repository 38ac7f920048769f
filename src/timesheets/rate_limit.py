from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from time import monotonic


@dataclass(frozen=True)
class RateLimitRule:
    bucket: str
    max_attempts: int
    window_seconds: int

    @property
    def enabled(self) -> bool:
        return self.max_attempts >= 1 and self.window_seconds >= 1


@dataclass
class _AttemptLog:
    window_seconds: int
    last_seen: float
    attempts: deque[float] = field(default_factory=deque)

    def prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self.attempts and self.attempts[0] <= cutoff:
            self.attempts.popleft()


_logs: dict[str, _AttemptLog] = {}
_lock = Lock()
_ops_since_sweep = 0

_STALE_MULTIPLIER = 3
_MIN_STALE_SECONDS = 60
_SWEEP_EVERY_OPS = 256


def _touch(rule: RateLimitRule, key: str, now: float) -> _AttemptLog:
    full_key = f"{rule.bucket}:{key}"
    log = _logs.get(full_key)
    if log is None:
        log = _AttemptLog(window_seconds=rule.window_seconds, last_seen=now)
        _logs[full_key] = log
    log.window_seconds = rule.window_seconds
    log.last_seen = now
    log.prune(now)
    return log


def _sweep(now: float) -> None:
    global _ops_since_sweep
    _ops_since_sweep += 1
    if _ops_since_sweep < _SWEEP_EVERY_OPS:
        return
    _ops_since_sweep = 0

    for full_key in list(_logs):
        log = _logs[full_key]
        log.prune(now)
        stale_after = max(log.window_seconds * _STALE_MULTIPLIER, _MIN_STALE_SECONDS)
        if not log.attempts and log.last_seen <= now - stale_after:
            del _logs[full_key]


def is_rate_limited(rule: RateLimitRule, key: str) -> bool:
    """Check a key against its budget without spending an attempt."""
    if not rule.enabled:
        return False

    now = monotonic()
    with _lock:
        log = _touch(rule, key, now)
        _sweep(now)
        return len(log.attempts) >= rule.max_attempts


def consume_rate_limit(rule: RateLimitRule, key: str) -> bool:
    """Record an attempt; returns True when the key was already over budget."""
    if not rule.enabled:
        return False

    now = monotonic()
    with _lock:
        log = _touch(rule, key, now)
        limited = len(log.attempts) >= rule.max_attempts
        if not limited:
            log.attempts.append(now)
        _sweep(now)
        return limited


def reset_rate_limit_state() -> None:
    global _ops_since_sweep
    with _lock:
        _logs.clear()
        _ops_since_sweep = 0
