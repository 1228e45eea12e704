# passguard/errors.py
"""Exceptions raised by the password policy engine

Every error carries an HTTP status code and a machine readable code so the
application error handler can render it as JSON.
"""


class PolicyError(Exception):
    """Base exception for all password policy errors."""
    status_code = 400
    code = 'policy_error'
    default_message = 'A password policy error occurred.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class AccountNotFound(PolicyError):
    """Raised when an account id does not resolve to an account."""
    status_code = 404
    code = 'account_not_found'
    default_message = 'Account does not exist.'

    def __init__(self, account_id=None):
        message = None
        if account_id is not None:
            message = f'Account {account_id} does not exist.'
        super().__init__(message)
        self.account_id = account_id


class InvalidToken(PolicyError):
    """Raised when an anti-forgery token is missing or does not verify."""
    status_code = 403
    code = 'invalid_token'
    default_message = 'Invalid or missing anti-forgery token.'


class PermissionDenied(PolicyError):
    """Raised when the caller lacks administrative privilege."""
    status_code = 403
    code = 'permission_denied'
    default_message = 'Administrator privileges required.'


class InvalidSettings(PolicyError):
    """Raised when policy settings fail validation."""
    status_code = 400
    code = 'invalid_settings'
    default_message = 'Invalid password policy settings.'


class InvalidCredentials(PolicyError):
    """Raised when a supplied password does not match the account."""
    status_code = 401
    code = 'invalid_credentials'
    default_message = 'Invalid credentials provided.'


class PasswordReused(PolicyError):
    """Raised when a new password matches the current or a previous one."""
    status_code = 400
    code = 'password_reused'
    default_message = 'Password was used previously. Please choose a different password.'
