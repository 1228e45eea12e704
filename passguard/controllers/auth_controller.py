# passguard/controllers/auth_controller.py
"""Authentication Controller for Passguard
Registration, login and password rotation behind the expiration gate
"""
from flask import Blueprint, g, jsonify, request, session, url_for
from flask_wtf.csrf import generate_csrf

from passguard.extensions import db
from passguard.services import get_policy
from passguard.services.auth_service import AuthService
from passguard.utils.decorators import login_required

auth_bp = Blueprint('auth', __name__)


def _payload():
    """JSON object body or form fields; any other JSON shape reads as empty"""
    data = request.get_json(silent=True)
    if data is None:
        return request.form
    return data if isinstance(data, dict) else {}


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account; its password clock starts now"""
    data = _payload()
    account = AuthService(get_policy()).register_account(
        data.get('username', ''), data.get('password', '')
    )
    return jsonify({
        'message': 'Account created successfully',
        'account': account.to_dict(),
        'password_expires_at': get_policy().get_expiration_date(account.id)
    }), 201


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Start a session; expired passwords are pointed at the change-password endpoint"""
    if request.method == 'GET':
        return jsonify({'login_url': url_for('auth.login'), 'csrf_token': generate_csrf()})

    data = _payload()
    policy = get_policy()
    account = AuthService(policy).authenticate(data.get('username', ''), data.get('password', ''))

    session.clear()
    session['account_id'] = account.id
    session['session_token'] = policy.sessions.issue(account)
    session.permanent = True
    db.session.commit()

    response = {
        'message': 'Login successful',
        'account': account.to_dict(),
        'password_expired': policy.is_password_expired(account.id),
        'countdown_days': policy.get_countdown(account.id),
        'csrf_token': generate_csrf(),
    }
    if response['password_expired']:
        response['redirect'] = url_for('auth.change_password')
    return jsonify(response)


@auth_bp.route('/logout', methods=['POST'])
@login_required(allow_expired=True)
def logout():
    """End the current session server-side and client-side"""
    g.current_account.invalidate_session()
    db.session.commit()
    session.clear()
    return jsonify({'message': 'You have been logged out', 'redirect': url_for('auth.login')})


@auth_bp.route('/change-password', methods=['POST'])
@login_required(allow_expired=True)
def change_password():
    """Rotate the password, refusing any previously used one"""
    data = _payload()
    policy = get_policy()
    AuthService(policy).change_password(
        g.current_account,
        data.get('current_password', ''),
        data.get('new_password', '')
    )
    return jsonify({
        'message': 'Password updated successfully',
        'status': policy.status(g.current_account.id)
    })


@auth_bp.route('/password-status')
@login_required(allow_expired=True)
def password_status():
    """Expiration summary for the logged in account"""
    return jsonify(get_policy().status(g.current_account.id))
