# passguard/utils/security.py
"""Security utilities for Passguard
Password hashing with bcrypt; the salt is embedded in each hash
"""
import bcrypt
from flask import current_app, has_app_context

DEFAULT_ROUNDS = 12


def _rounds() -> int:
    if has_app_context():
        return current_app.config.get('BCRYPT_ROUNDS', DEFAULT_ROUNDS)
    return DEFAULT_ROUNDS


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt

    Args:
        password: Plain text password

    Returns:
        bcrypt hash string including its salt
    """
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=_rounds()))
    return hashed.decode('utf-8')


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Verify password against a stored bcrypt hash

    Args:
        password: Plain text password to verify
        stored_hash: Stored bcrypt hash

    Returns:
        True if password matches, False otherwise
    """
    if not isinstance(password, str) or not password or not stored_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), stored_hash.encode('utf-8'))
    except ValueError:
        # Not a bcrypt hash
        return False
