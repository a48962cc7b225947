from datetime import datetime, timedelta

from authtrail.domain.login_guard import LockoutPolicy, is_locked, remaining_lock_minutes

NOW = datetime(2026, 1, 15, 12, 0, 0)


class FakeConfig:
    MAX_FAILED_LOGIN_ATTEMPTS = 3
    ACCOUNT_LOCK_MINUTES = 30


def test_policy_from_config():
    policy = LockoutPolicy.from_config(FakeConfig)

    assert policy.max_failed_attempts == 3
    assert policy.lock_minutes == 30
    assert policy.lock_until(NOW) == NOW + timedelta(minutes=30)


def test_should_lock_at_threshold():
    policy = LockoutPolicy()

    assert not policy.should_lock(4)
    assert policy.should_lock(5)
    assert policy.should_lock(6)


def test_lock_lapses_on_its_own():
    assert is_locked(NOW + timedelta(seconds=1), NOW)
    assert not is_locked(NOW, NOW)
    assert not is_locked(NOW - timedelta(minutes=1), NOW)
    assert not is_locked(None, NOW)


def test_remaining_minutes_round_up():
    assert remaining_lock_minutes(NOW + timedelta(minutes=14, seconds=1), NOW) == 15
    assert remaining_lock_minutes(NOW + timedelta(seconds=5), NOW) == 1
    assert remaining_lock_minutes(NOW - timedelta(seconds=5), NOW) == 0
