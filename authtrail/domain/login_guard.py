"""
Login Guard

Lockout policy for repeated failed logins. A user is either Open or
Locked(until); the lock lapses on its own once `until` has passed, while the
failure counter is only reset by a successful login.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class LockoutPolicy:
    max_failed_attempts: int = 5
    lock_duration: timedelta = timedelta(minutes=15)

    @classmethod
    def from_config(cls, config) -> "LockoutPolicy":
        return cls(
            max_failed_attempts=config.MAX_FAILED_LOGIN_ATTEMPTS,
            lock_duration=timedelta(minutes=config.ACCOUNT_LOCK_MINUTES),
        )

    @property
    def lock_minutes(self) -> int:
        return math.ceil(self.lock_duration.total_seconds() / 60)

    def should_lock(self, failed_attempts: int) -> bool:
        return failed_attempts >= self.max_failed_attempts

    def lock_until(self, now: datetime) -> datetime:
        return now + self.lock_duration


def is_locked(locked_until: Optional[datetime], now: datetime) -> bool:
    return locked_until is not None and locked_until > now


def remaining_lock_minutes(locked_until: Optional[datetime], now: datetime) -> int:
    """Whole minutes left on the lock, rounded up; 0 when the account is open."""
    if not is_locked(locked_until, now):
        return 0
    return max(1, math.ceil((locked_until - now).total_seconds() / 60))
