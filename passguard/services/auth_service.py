# passguard/services/auth_service.py
"""Authentication service for Passguard
Registration, login and password changes routed through the password policy
"""
import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from passguard.errors import InvalidCredentials, PasswordReused, PolicyError
from passguard.extensions import db
from passguard.models.account import Account
from passguard.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


class AuthService:
    """Handles account credential operations"""

    def __init__(self, policy):
        self.policy = policy

    @staticmethod
    def validate_password(password):
        """Raise PolicyError when a password fails the length rules"""
        if not isinstance(password, str):
            raise PolicyError('Password must be a string.')
        min_length = current_app.config.get('PASSWORD_MIN_LENGTH', 8)
        if not password or len(password) < min_length:
            raise PolicyError(f'Password must be at least {min_length} characters.')
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise PolicyError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes.')

    def register_account(self, username, password, is_admin=False):
        """
        Create an account and initialise its password change timestamp

        Args:
            username: Unique username
            password: Plain text password
            is_admin: Grant administrative privilege

        Returns:
            The new Account
        """
        if not isinstance(username, str) or len(username.strip()) < 3:
            raise PolicyError('Username must be at least 3 characters.')
        username = username.strip()
        self.validate_password(password)

        if Account.query.filter_by(username=username).first():
            raise PolicyError('Username already exists.')

        account = Account(username=username, password_hash=hash_password(password), is_admin=is_admin)
        try:
            db.session.add(account)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to register account %s", username)
            raise

        self.policy.on_account_created(account.id)
        logger.info("Registered account %s (id=%s)", account.username, account.id)
        return account

    def authenticate(self, username, password):
        """Return the active account matching the credentials or raise InvalidCredentials"""
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidCredentials()
        account = Account.query.filter_by(username=username.strip(), is_active=True).first()
        if account is None or not verify_password(password, account.password_hash):
            raise InvalidCredentials()
        return account

    def is_password_reused(self, account, new_password):
        """Check the new password against the current hash and the stored history"""
        if verify_password(new_password, account.password_hash):
            return True
        return self.policy.is_reused(account.id, new_password, matcher=verify_password)

    def change_password(self, account, current_password, new_password):
        """
        Rotate an account password

        The previous hash is captured into the history before the account
        record is overwritten, and the expiration clock restarts.

        Args:
            account: Account changing its password
            current_password: Current plain text password
            new_password: Replacement plain text password
        """
        if not verify_password(current_password, account.password_hash):
            raise InvalidCredentials('Current password is incorrect.')
        self.validate_password(new_password)

        if self.is_password_reused(account, new_password):
            raise PasswordReused()

        try:
            self.policy.record_change(account.id, account.password_hash)
            account.password_hash = hash_password(new_password)
            self.policy.mark_password_changed(account.id)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to change password for account %s", account.id)
            raise

        logger.info("Password changed for account %s", account.id)
        return account
