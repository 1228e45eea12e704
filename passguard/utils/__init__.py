# passguard/utils/__init__.py
"""Utility functions and decorators"""
