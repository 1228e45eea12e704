# passguard/services/__init__.py
"""Service layer for business logic"""
from flask import current_app

from .policy_service import PasswordPolicy


def get_policy() -> PasswordPolicy:
    """Password policy context of the current application"""
    return current_app.extensions['passguard']


__all__ = ['PasswordPolicy', 'get_policy']
