"""Tests for policy administration and the global reset action"""
from datetime import datetime, timedelta

from passguard.extensions import db
from passguard.models.account import Account
from passguard.models.audit_log import PolicyAuditLog
from passguard.policy import RESET_MARKER
from passguard.services.policy_service import META_KEY

from conftest import ADMIN_PASSWORD, T0, USER_PASSWORD, login, refresh


def reset_ticket(client):
    response = client.get('/admin/reset-token')
    assert response.status_code == 200
    return response.get_json()['ticket']


def test_settings_round_trip(admin_client, admin):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    assert admin_client.get('/admin/settings').get_json() == {
        'limit_days': 30,
        'save_old_passwords': True,
        'log_setting_changes': True,
        'history_limit': None,
    }

    response = admin_client.put('/admin/settings', json={'limit_days': 60, 'history_limit': 5})
    assert response.status_code == 200
    assert response.get_json()['limit_days'] == 60
    assert admin_client.get('/admin/settings').get_json()['history_limit'] == 5


def test_settings_change_is_audited(admin_client, admin):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    admin_client.put('/admin/settings', json={'limit_days': 45})

    refresh()
    entries = PolicyAuditLog.query.all()
    assert len(entries) == 1
    assert entries[0].action == 'settings_updated'
    assert entries[0].actor_id == admin.id
    assert entries[0].get_details()['new']['limit_days'] == 45

    log = admin_client.get('/admin/audit-log').get_json()['entries']
    assert [entry['action'] for entry in log] == ['settings_updated']


def test_invalid_settings_rejected(admin_client, admin, policy):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    for payload in ({'limit_days': 0}, {'limit_days': 'thirty'}, {'unknown': True}, [1, 2]):
        response = admin_client.put('/admin/settings', json=payload)
        assert response.status_code == 400
        assert response.get_json()['code'] == 'invalid_settings'
    assert policy.get_limit() == 30


def test_non_admin_cannot_administer(client, user):
    login(client, 'alice', USER_PASSWORD)
    response = client.get('/admin/settings')
    assert response.status_code == 403
    assert response.get_json()['code'] == 'permission_denied'
    assert client.post('/admin/reset-all-passwords', json={'ticket': 'x'}).status_code == 403


def test_anonymous_cannot_reset(client, user, policy):
    response = client.post('/admin/reset-all-passwords', json={'ticket': 'x'})
    assert response.status_code == 401
    assert policy.requires_reset(user.id) is False


def test_account_status(admin_client, admin, user):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    data = admin_client.get(f'/admin/accounts/{user.id}/password-status').get_json()
    assert data['last_change'] == T0
    assert data['old_password_count'] == 0
    assert data['requires_reset'] is False

    response = admin_client.get('/admin/accounts/999/password-status')
    assert response.status_code == 404
    assert response.get_json()['code'] == 'account_not_found'


def test_reset_with_invalid_token_changes_nothing(admin_client, client, admin, user, policy):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    login(client, 'alice', USER_PASSWORD)
    reset_ticket(admin_client)

    for payload in ({'ticket': 'forged-token'}, {}, {'ticket': 12345}, {'ticket': ['forged']}, ['forged-token']):
        response = admin_client.post('/admin/reset-all-passwords', json=payload)
        assert response.status_code == 403
        assert response.get_json()['code'] == 'invalid_token'

    refresh()
    assert policy.get_last_change(user.id) == T0
    assert policy.get_last_change(admin.id) == T0
    assert client.get('/auth/password-status').status_code == 200
    assert admin_client.get('/admin/settings').status_code == 200


def test_reset_all_passwords(admin_client, client, admin, user, policy):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    login(client, 'alice', USER_PASSWORD)

    response = admin_client.post('/admin/reset-all-passwords', json={'ticket': reset_ticket(admin_client)})
    assert response.status_code == 200
    data = response.get_json()
    assert data['flagged_accounts'] == 2
    assert data['login_url'].endswith('/auth/login')

    refresh()
    for account_id in (admin.id, user.id):
        assert policy.requires_reset(account_id) is True
        assert policy.is_password_expired(account_id) is True
    assert Account.query.filter(Account.session_token.isnot(None)).count() == 0

    # Every session is gone, including the administrator's
    assert client.get('/auth/password-status').status_code == 401
    assert admin_client.get('/admin/settings').status_code == 401

    # Logging back in lands on the forced password change
    assert login(client, 'alice', USER_PASSWORD).get_json()['password_expired'] is True


def test_reset_token_in_header(admin_client, admin, user, policy):
    login(admin_client, 'admin', ADMIN_PASSWORD)
    ticket = reset_ticket(admin_client)
    response = admin_client.post('/admin/reset-all-passwords', headers={'X-CSRFToken': ticket})
    assert response.status_code == 200

    refresh()
    assert policy.meta.get(user.id, META_KEY) == str(RESET_MARKER)


def test_prune_audit_log_command(app):
    db.session.add(PolicyAuditLog(action='settings_updated', timestamp=datetime.utcnow() - timedelta(days=400)))
    db.session.add(PolicyAuditLog(action='settings_updated'))
    db.session.commit()

    result = app.test_cli_runner().invoke(args=['prune-audit-log', '--days', '365'])
    assert result.exit_code == 0
    assert 'Removed 1 audit entries' in result.output
    assert PolicyAuditLog.query.count() == 1
