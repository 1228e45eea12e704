# passguard/controllers/admin_controller.py
"""Administration Controller for Passguard
Policy settings and the global "reset all passwords now" action
"""
import logging

from flask import Blueprint, g, jsonify, request, session, url_for
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms import ValidationError

from passguard.errors import InvalidSettings, InvalidToken
from passguard.models.audit_log import PolicyAuditLog
from passguard.policy import PolicySettings
from passguard.services import get_policy
from passguard.utils.decorators import admin_required

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)

SETTINGS_FIELDS = ('limit_days', 'save_old_passwords', 'log_setting_changes', 'history_limit')


@admin_bp.route('/settings', methods=['GET'])
@admin_required
def get_settings():
    """Current password policy settings"""
    return jsonify(get_policy().get_settings().to_dict())


@admin_bp.route('/settings', methods=['PUT', 'POST'])
@admin_required
def update_settings():
    """Replace selected settings fields; omitted fields keep their value"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidSettings('Expected a JSON object.')

    unknown = set(data) - set(SETTINGS_FIELDS)
    if unknown:
        raise InvalidSettings(f"Unknown settings: {', '.join(sorted(unknown))}")

    policy = get_policy()
    merged = policy.get_settings().to_dict()
    merged.update(data)
    settings = policy.set_settings(PolicySettings(**merged), actor_id=g.current_account.id)
    return jsonify(settings.to_dict())


@admin_bp.route('/audit-log')
@admin_required
def audit_log():
    """Most recent policy audit entries"""
    limit = request.args.get('limit', 50, type=int)
    return jsonify({'entries': [entry.to_dict() for entry in PolicyAuditLog.recent(limit)]})


@admin_bp.route('/accounts/<int:account_id>/password-status')
@admin_required
def account_password_status(account_id):
    """Expiration summary and stored history size for any account"""
    policy = get_policy()
    status = policy.status(account_id)
    status['old_password_count'] = len(policy.get_old_passwords(account_id))
    return jsonify(status)


@admin_bp.route('/reset-token')
@admin_required
def reset_token():
    """Issue the anti-forgery token required by the reset action"""
    return jsonify({'ticket': generate_csrf()})


@admin_bp.route('/reset-all-passwords', methods=['POST'])
@admin_required
def reset_all_passwords():
    """Flag every account for a password reset and destroy all sessions"""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form
    elif not isinstance(data, dict):
        raise InvalidToken('The reset request must be a JSON object.')
    ticket = data.get('ticket') or request.headers.get('X-CSRFToken')
    if not isinstance(ticket, str) or not ticket:
        logger.warning("Rejected global password reset from account %s: missing or malformed token",
                       g.current_account.id)
        raise InvalidToken()
    try:
        validate_csrf(ticket)
    except ValidationError as e:
        logger.warning("Rejected global password reset from account %s: %s", g.current_account.id, e)
        raise InvalidToken(str(e))

    flagged = get_policy().trigger_global_reset(actor_id=g.current_account.id)

    # The caller's own session went with everyone else's
    session.clear()
    return jsonify({'flagged_accounts': flagged, 'login_url': url_for('auth.login')})
