"""Tests for the expiration arithmetic and settings record"""
import pytest

from passguard.policy import (
    SECONDS_PER_DAY, PolicySettings, countdown_days, expiration_instant, is_expired, is_reused
)


@pytest.mark.parametrize('last_change,limit_days', [
    (0, 1),
    (1, 30),
    (1700000000, 30),
    (1700000123, 365),
])
def test_expiration_instant_is_exact(last_change, limit_days):
    expires_at = expiration_instant(last_change, limit_days)
    assert expires_at == last_change + limit_days * SECONDS_PER_DAY
    assert isinstance(expires_at, int)


def test_expired_strictly_after_instant():
    expires_at = expiration_instant(1700000000, 30)
    assert is_expired(expires_at, expires_at) is False
    assert is_expired(expires_at - 1, expires_at) is False
    assert is_expired(expires_at + 1, expires_at) is True


def test_countdown_decreases_and_goes_negative():
    expires_at = expiration_instant(0, 3)
    samples = [countdown_days(now, expires_at) for now in range(0, 6 * SECONDS_PER_DAY, 3600)]
    assert samples == sorted(samples, reverse=True)
    assert samples[0] == 3
    assert samples[-1] < 0


def test_countdown_not_clamped():
    expires_at = expiration_instant(0, 30)
    assert countdown_days(expires_at + 1, expires_at) == -1
    assert countdown_days(expires_at + 10 * SECONDS_PER_DAY, expires_at) == -10
    assert countdown_days(expires_at, expires_at) == 0


def test_is_reused_exact_match():
    history = ['h1', 'h2']
    assert is_reused('h1', history) is True
    assert is_reused('h3', history) is False
    assert is_reused('h1', []) is False


def test_is_reused_with_matcher():
    history = ['ABC', 'DEF']
    assert is_reused('abc', history, matcher=lambda c, s: c.upper() == s) is True
    assert is_reused('xyz', history, matcher=lambda c, s: c.upper() == s) is False


def test_settings_defaults():
    settings = PolicySettings()
    assert settings.to_dict() == {
        'limit_days': 30,
        'save_old_passwords': True,
        'log_setting_changes': True,
        'history_limit': None,
    }


def test_settings_from_stored_blob_fills_defaults():
    settings = PolicySettings.from_dict({'limit_days': '45', 'save_old_passwords': 'false'})
    assert settings.limit_days == 45
    assert settings.save_old_passwords is False
    assert settings.log_setting_changes is True

    assert PolicySettings.from_dict({'limit_days': -3}).limit_days == 30
    assert PolicySettings.from_dict({'limit_days': 'soon'}).limit_days == 30
    assert PolicySettings.from_dict(None) == PolicySettings()
    assert PolicySettings.from_dict({'history_limit': 0}).history_limit is None
