# passguard/utils/decorators.py
"""Authentication and authorization decorators"""
from functools import wraps

from flask import g, jsonify, session, url_for

from passguard.errors import AccountNotFound, PermissionDenied
from passguard.extensions import db
from passguard.models.account import Account
from passguard.services import get_policy


def _current_account():
    account_id = session.get('account_id')
    if account_id is None:
        return None

    account = db.session.get(Account, account_id)
    if not account or not account.is_active:
        return None

    # Sessions destroyed server-side (logout elsewhere, bulk reset) stop here
    if not account.validate_session_token(session.get('session_token')):
        return None
    return account


def login_required(f=None, allow_expired=False):
    """
    Decorator to ensure the request comes from a live session
    Expired passwords are sent to the change-password endpoint unless allow_expired
    """
    def decorator(fn):
        @wraps(fn)
        def decorated_function(*args, **kwargs):
            account = _current_account()
            if account is None:
                session.clear()
                return jsonify({
                    'error': 'Authentication required',
                    'code': 'SESSION_INVALID',
                    'redirect': url_for('auth.login')
                }), 401

            if not allow_expired:
                try:
                    expired = get_policy().is_password_expired(account.id)
                except AccountNotFound:
                    expired = False
                if expired:
                    return jsonify({
                        'error': 'Your password has expired. Please update it.',
                        'code': 'PASSWORD_EXPIRED',
                        'redirect': url_for('auth.change_password')
                    }), 403

            g.current_account = account
            return fn(*args, **kwargs)
        return decorated_function

    if f is not None:
        return decorator(f)
    return decorator


def admin_required(f):
    """Decorator requiring a logged in administrator"""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not g.current_account.is_admin:
            raise PermissionDenied()
        return f(*args, **kwargs)
    return decorated_function
