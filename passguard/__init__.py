# passguard/__init__.py
"""Passguard - password expiration and reuse policy for Flask applications"""
__version__ = "1.0.0"
