# passguard/services/policy_service.py
"""Password policy engine for Passguard
Tracks password change timestamps, computes expiration and guards against reuse
"""
import logging
import time
from typing import Callable, List, Optional

from passguard import policy
from passguard.errors import AccountNotFound, InvalidSettings
from passguard.policy import PolicySettings
from passguard.services.stores import (
    AccountDirectory, AuditTrail, HistoryStore, MetaStore, OptionStore, SessionRegistry
)

logger = logging.getLogger(__name__)

META_KEY = 'password_reset'
SETTINGS_OPTION = 'passguard_settings'


class PasswordPolicy:
    """
    Explicitly constructed policy context

    One instance is created per application and stored in
    ``app.extensions['passguard']``. Every per-account operation takes a
    resolved integer account id; resolving the current user is the caller's job.
    """

    def __init__(self, accounts=None, meta=None, options=None, history=None,
                 sessions=None, audit=None, clock: Optional[Callable[[], int]] = None,
                 defaults: Optional[PolicySettings] = None):
        self.accounts = accounts or AccountDirectory()
        self.meta = meta or MetaStore()
        self.options = options or OptionStore()
        self.history = history or HistoryStore()
        self.sessions = sessions or SessionRegistry()
        self.audit = audit or AuditTrail()
        self.clock = clock or (lambda: int(time.time()))
        self.defaults = defaults or PolicySettings()

    def now(self) -> int:
        return int(self.clock())

    # Settings

    def get_settings(self) -> PolicySettings:
        """Current settings, falling back to defaults when the record is missing"""
        stored = self.options.get(SETTINGS_OPTION)
        if stored is None:
            logger.warning("Password policy settings missing, using defaults")
            return PolicySettings(**self.defaults.to_dict())
        return PolicySettings.from_dict(stored)

    def set_settings(self, settings: PolicySettings, actor_id: Optional[int] = None) -> PolicySettings:
        """
        Validate and persist settings

        Args:
            settings: New settings record
            actor_id: Account making the change, recorded in the audit trail

        Returns:
            The stored settings
        """
        self._validate(settings)
        previous = self.get_settings()
        self.options.set(SETTINGS_OPTION, settings.to_dict())

        # Switching logging off is itself recorded
        if settings.log_setting_changes or previous.log_setting_changes:
            self.audit.record('settings_updated', actor_id=actor_id, details={
                'old': previous.to_dict(),
                'new': settings.to_dict(),
            })
            logger.info("Password policy settings changed by %s: %s -> %s",
                        actor_id, previous.to_dict(), settings.to_dict())

        self.options.commit()
        return settings

    @staticmethod
    def _validate(settings: PolicySettings):
        limit = settings.limit_days
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidSettings('limit_days must be a positive integer.')

        history_limit = settings.history_limit
        if history_limit is not None and (
                isinstance(history_limit, bool) or not isinstance(history_limit, int) or history_limit <= 0):
            raise InvalidSettings('history_limit must be a positive integer or null.')

        if not isinstance(settings.save_old_passwords, bool) or \
                not isinstance(settings.log_setting_changes, bool):
            raise InvalidSettings('save_old_passwords and log_setting_changes must be booleans.')

    def get_limit(self) -> int:
        return self.get_settings().limit_days

    def should_save_old_passwords(self) -> bool:
        return self.get_settings().save_old_passwords

    # Last change timestamps

    def _require_account(self, account_id: int):
        if not self.accounts.exists(account_id):
            raise AccountNotFound(account_id)

    def get_last_change(self, account_id: int) -> int:
        """Last password change instant; back-filled to now if never recorded"""
        self._require_account(account_id)
        value = self.meta.get(account_id, META_KEY)
        if value is None:
            logger.warning("Account %s had no password change timestamp, back-filling", account_id)
            return self.ensure_last_change(account_id)
        return int(value)

    def ensure_last_change(self, account_id: int) -> int:
        """Record now as the last change unless a value already exists"""
        self._require_account(account_id)
        if self.meta.add(account_id, META_KEY, self.now()):
            self.meta.commit()
        return int(self.meta.get(account_id, META_KEY))

    def mark_password_changed(self, account_id: int) -> int:
        """Reset the expiration clock after a successful password change; the caller commits"""
        now = self.now()
        self.meta.set(account_id, META_KEY, now)
        return now

    def requires_reset(self, account_id: int) -> bool:
        """True when the account was flagged by a bulk reset and has not changed its password since"""
        return self.get_last_change(account_id) == policy.RESET_MARKER

    def on_account_created(self, account_id: int) -> int:
        return self.ensure_last_change(account_id)

    def install(self) -> int:
        """
        Write default settings if absent and back-fill every existing account

        Returns:
            Number of accounts that received a timestamp
        """
        if self.options.add(SETTINGS_OPTION, self.defaults.to_dict()):
            logger.info("Installed default password policy settings: %s", self.defaults.to_dict())

        now = self.now()
        backfilled = 0
        for account_id in self.accounts.all_ids():
            if self.meta.add(account_id, META_KEY, now):
                backfilled += 1

        self.meta.commit()
        logger.info("Password policy installed, %d account(s) back-filled", backfilled)
        return backfilled

    # Expiration

    def get_expiration_date(self, account_id: int) -> int:
        last_change = self.get_last_change(account_id)
        return policy.expiration_instant(last_change, self.get_limit())

    def is_password_expired(self, account_id: int) -> bool:
        return policy.is_expired(self.now(), self.get_expiration_date(account_id))

    def get_countdown(self, account_id: int) -> int:
        """Whole days until expiration; negative once expired"""
        return policy.countdown_days(self.now(), self.get_expiration_date(account_id))

    def status(self, account_id: int) -> dict:
        """Expiration summary for an account"""
        expires_at = self.get_expiration_date(account_id)
        now = self.now()
        return {
            'account_id': account_id,
            'last_change': self.get_last_change(account_id),
            'limit_days': self.get_limit(),
            'expires_at': expires_at,
            'expired': policy.is_expired(now, expires_at),
            'countdown_days': policy.countdown_days(now, expires_at),
            'requires_reset': self.requires_reset(account_id),
        }

    # Reuse guard

    def get_old_passwords(self, account_id: int) -> List[str]:
        self._require_account(account_id)
        return self.history.list(account_id)

    def is_reused(self, account_id: int, candidate: str,
                  matcher: Optional[Callable[[str, str], bool]] = None) -> bool:
        return policy.is_reused(candidate, self.get_old_passwords(account_id), matcher)

    def record_change(self, account_id: int, old_hash: str) -> bool:
        """
        Append the previous hash to the account history

        Must run before the account's password hash is overwritten. No-op when
        old passwords are not being saved. The caller commits.

        Returns:
            True if the hash was recorded
        """
        settings = self.get_settings()
        if not settings.save_old_passwords or not old_hash:
            return False

        self.history.append(account_id, old_hash)
        if settings.history_limit is not None:
            trimmed = self.history.trim(account_id, settings.history_limit)
            if trimmed:
                logger.debug("Trimmed %d old password(s) for account %s", trimmed, account_id)
        return True

    # Bulk reset

    def trigger_global_reset(self, actor_id: Optional[int] = None) -> int:
        """
        Flag every account for a password reset and destroy all sessions

        The two passes are independent; an interruption between them leaves
        flagged accounts whose sessions are still alive.

        Returns:
            Number of accounts flagged
        """
        account_ids = self.accounts.all_ids()
        for account_id in account_ids:
            self.meta.set(account_id, META_KEY, policy.RESET_MARKER)
        self.meta.commit()
        logger.warning("Global password reset by %s flagged %d account(s)", actor_id, len(account_ids))

        destroyed = self.sessions.destroy_all()
        logger.warning("Global password reset destroyed %d session(s)", destroyed)
        return len(account_ids)
