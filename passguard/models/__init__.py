# passguard/models/__init__.py
"""Models package initialization for Passguard"""
from .account import Account
from .account_meta import AccountMeta
from .option import Option
from .password_history import PasswordHistory
from .audit_log import PolicyAuditLog

__all__ = ['Account', 'AccountMeta', 'Option', 'PasswordHistory', 'PolicyAuditLog']
