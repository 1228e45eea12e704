# passguard/policy.py
"""Password expiration arithmetic and policy settings

All instants are integer epoch seconds. Nothing in this module touches the
database, so the calculations can be checked in isolation.
"""
from dataclasses import dataclass, asdict
from typing import Callable, Iterable, Optional

SECONDS_PER_DAY = 86400
DEFAULT_LIMIT_DAYS = 30

# Value written to an account's last change by the bulk reset
RESET_MARKER = 1


@dataclass
class PolicySettings:
    """Process-wide password policy record"""
    limit_days: int = DEFAULT_LIMIT_DAYS
    save_old_passwords: bool = True
    log_setting_changes: bool = True
    history_limit: Optional[int] = None

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        """Build settings from a stored blob, filling defaults for missing or malformed fields"""
        if not isinstance(data, dict):
            return cls()

        defaults = cls()
        limit = _positive_int(data.get('limit_days'))
        history_limit = _positive_int(data.get('history_limit'))

        return cls(
            limit_days=limit if limit is not None else defaults.limit_days,
            save_old_passwords=_as_bool(data.get('save_old_passwords'), defaults.save_old_passwords),
            log_setting_changes=_as_bool(data.get('log_setting_changes'), defaults.log_setting_changes),
            history_limit=history_limit,
        )


def _positive_int(value):
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _as_bool(value, default):
    if value is None:
        return default
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def expiration_instant(last_change: int, limit_days: int) -> int:
    """Instant after which a password set at last_change is expired"""
    return int(last_change) + int(limit_days) * SECONDS_PER_DAY


def is_expired(now: int, expires_at: int) -> bool:
    """Expired strictly after the expiration instant, never at it"""
    return now > expires_at


def countdown_days(now: int, expires_at: int) -> int:
    """
    Whole days left until expiration, floored

    Negative once the password has expired. Callers must treat a negative
    countdown as expired rather than clamping it to zero.
    """
    return (int(expires_at) - int(now)) // SECONDS_PER_DAY


def is_reused(candidate_hash: str, history: Iterable[str],
              matcher: Optional[Callable[[str, str], bool]] = None) -> bool:
    """
    Check a candidate against previously used password hashes

    Args:
        candidate_hash: Hash (or, with a matcher, password) to look for
        history: Previously stored hashes for the account
        matcher: Optional callable(candidate, stored) replacing exact equality

    Returns:
        True if any history entry matches
    """
    if matcher is None:
        return any(candidate_hash == entry for entry in history)
    return any(matcher(candidate_hash, entry) for entry in history)
