# passguard/controllers/__init__.py
"""HTTP controllers for account credentials and policy administration"""
from .auth_controller import auth_bp
from .admin_controller import admin_bp

__all__ = ['auth_bp', 'admin_bp']
