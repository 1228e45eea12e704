# passguard/app.py
"""Application factory for Passguard"""
import logging
import os
from logging.handlers import RotatingFileHandler

import click
from flask import Flask, jsonify, request
from flask_wtf.csrf import CSRFError

from passguard.config import config
from passguard.errors import InvalidToken, PolicyError
from passguard.extensions import csrf, db
from passguard.policy import PolicySettings
from passguard.services.policy_service import PasswordPolicy


def create_app(config_name='default'):
    """Create and configure Flask application"""
    app = Flask(__name__)

    # Load configuration
    config_obj = config[config_name]
    app.config.from_object(config_obj)
    if config_name == 'production':
        config_obj.validate()

    # Initialize extensions
    db.init_app(app)
    csrf.init_app(app)

    # One policy context per application
    app.extensions['passguard'] = PasswordPolicy(defaults=default_settings(app))

    # Register blueprints
    from passguard.controllers.auth_controller import auth_bp
    from passguard.controllers.admin_controller import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(admin_bp, url_prefix='/admin')

    register_error_handlers(app)
    register_commands(app)
    configure_logging(app)

    return app


def default_settings(app):
    """Policy settings seeded from configuration"""
    return PolicySettings(
        limit_days=app.config['PASSWORD_EXPIRY_DAYS'],
        save_old_passwords=app.config['SAVE_OLD_PASSWORDS'],
        log_setting_changes=app.config['LOG_SETTING_CHANGES'],
        history_limit=app.config['PASSWORD_HISTORY_LIMIT'],
    )


def register_error_handlers(app):
    """Register error handlers"""
    @app.errorhandler(PolicyError)
    def policy_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return policy_error(InvalidToken(error.description))

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found', 'path': request.path}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error('Internal server error: %s', error)
        return jsonify({'error': 'Internal server error'}), 500


def register_commands(app):
    """CLI commands for installing and maintaining the policy"""
    @app.cli.command('install')
    def install():
        """Create tables, default settings and back-fill password timestamps"""
        db.create_all()
        backfilled = app.extensions['passguard'].install()
        click.echo(f"Password policy installed, {backfilled} account(s) back-filled")

    @app.cli.command('prune-audit-log')
    @click.option('--days', default=365, show_default=True, help='Days of audit history to keep')
    def prune_audit_log(days):
        """Remove old policy audit entries"""
        from passguard.models.audit_log import PolicyAuditLog
        deleted = PolicyAuditLog.cleanup_old_logs(days_to_keep=days)
        click.echo(f"Removed {deleted} audit entries older than {days} days")


def configure_logging(app):
    """Configure application logging"""
    if app.debug or app.testing:
        return

    log_file = app.config.get('LOG_FILE', 'logs/passguard.log')
    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    file_handler = RotatingFileHandler(log_file, maxBytes=10240000, backupCount=10)
    file_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    ))

    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'))
    file_handler.setLevel(log_level)

    # Service modules log through the package logger
    package_logger = logging.getLogger('passguard')
    package_logger.addHandler(file_handler)
    package_logger.setLevel(log_level)

    app.logger.addHandler(file_handler)
    app.logger.setLevel(log_level)
    app.logger.info('Passguard startup')
