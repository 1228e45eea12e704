# passguard/extensions.py
"""Flask extensions initialization"""
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

# Initialize SQLAlchemy
db = SQLAlchemy()

# Anti-forgery protection for state changing requests
csrf = CSRFProtect()
