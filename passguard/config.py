# passguard/config.py
"""Configuration for Passguard
Secure defaults for the password expiration policy and its host application
"""
import os
from datetime import timedelta


class Config:
    """Base configuration with secure defaults"""
    # Security settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(32).hex()

    # Session configuration
    SESSION_COOKIE_SECURE = True  # HTTPS only
    SESSION_COOKIE_HTTPONLY = True  # No JS access
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = timedelta(minutes=30)

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///passguard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Password policy defaults, written to the settings record on install
    PASSWORD_EXPIRY_DAYS = int(os.environ.get('PASSWORD_EXPIRY_DAYS', 30))
    SAVE_OLD_PASSWORDS = os.environ.get('SAVE_OLD_PASSWORDS', 'true').lower() == 'true'
    LOG_SETTING_CHANGES = os.environ.get('LOG_SETTING_CHANGES', 'true').lower() == 'true'
    PASSWORD_HISTORY_LIMIT = None  # None keeps every previous hash
    PASSWORD_MIN_LENGTH = 8
    BCRYPT_ROUNDS = 12

    # Anti-forgery tokens
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE', 'logs/passguard.log')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    # Less secure settings for development only
    SESSION_COOKIE_SECURE = False  # Allow HTTP in dev


class ProductionConfig(Config):
    """Production configuration with enhanced security"""
    DEBUG = False
    TESTING = False

    @classmethod
    def validate(cls):
        """Require secure environment variables in production"""
        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY must be set in production")
        if not os.environ.get('DATABASE_URL'):
            raise ValueError("DATABASE_URL must be set in production")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = False
    SECRET_KEY = 'testing-secret-key'
    SESSION_COOKIE_SECURE = False

    # Use in-memory database for tests
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    # Disable global CSRF checks for tests; the reset endpoint still verifies its token
    WTF_CSRF_ENABLED = False

    # Faster hashing for tests
    BCRYPT_ROUNDS = 4

    PASSWORD_EXPIRY_DAYS = 30
    SAVE_OLD_PASSWORDS = True
    LOG_SETTING_CHANGES = True


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
