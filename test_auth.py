"""
test_auth.py: registration, login, sessions and user administration.
Run: pytest test_auth.py -v
"""
import logging

import pytest
from datetime import datetime, timedelta

from storefront import create_app, db
from storefront.auth.models import User, UserSession, ROLE_ADMIN
from storefront.auth.service import (
    register_user, authenticate, resolve_session, revoke_session,
    purge_expired_sessions, set_role, delete_user,
)
from storefront.checkout.models import Order
from storefront.errors import DuplicateEmail, InvalidCredentials


# ── Fixtures ──────────────────────────────────────────────────────

@pytest.fixture(scope='function')
def app(tmp_path):
    app = create_app('testing')
    app.config['UPLOAD_FOLDER'] = str(tmp_path)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, name='Maria', email='maria@example.com', password='s3nha!'):
    return client.post('/api/register', json={'name': name, 'email': email, 'password': password})


# ── Registration ──────────────────────────────────────────────────

def test_register_returns_token_and_code(client):
    resp = register(client)
    assert resp.status_code == 201
    data = resp.get_json()
    assert data['token']
    assert data['code'].startswith('USR-')
    assert data['name'] == 'Maria'
    assert data['role'] == 'user'


def test_password_is_never_stored_in_plaintext(app):
    register_user('Maria', 'maria@example.com', 's3nha!')
    user = User.query.filter_by(email='maria@example.com').one()
    assert user.password_hash != 's3nha!'
    assert 's3nha!' not in user.password_hash
    assert user.check_password('s3nha!')


def test_duplicate_email_is_rejected_without_second_row(client, app):
    assert register(client).status_code == 201
    resp = register(client, name='Outra Maria', email='MARIA@example.com ')
    assert resp.status_code == 409
    assert 'error' in resp.get_json()
    assert User.query.count() == 1


def test_duplicate_email_raises_in_service(app):
    register_user('Maria', 'maria@example.com', 'x')
    with pytest.raises(DuplicateEmail):
        register_user('Maria', 'maria@example.com', 'y')


def test_register_requires_fields(client):
    resp = client.post('/api/register', json={'name': '', 'email': 'nope', 'password': ''})
    assert resp.status_code == 400
    errors = resp.get_json()['errors']
    assert set(errors) == {'name', 'email', 'password'}


# ── Login ─────────────────────────────────────────────────────────

def test_login_only_issues_token_for_correct_password(client):
    register(client)

    ok = client.post('/api/login', json={'email': 'maria@example.com', 'password': 's3nha!'})
    assert ok.status_code == 200
    assert ok.get_json()['token']
    assert ok.get_json()['role'] == 'user'

    bad = client.post('/api/login', json={'email': 'maria@example.com', 'password': 'errada'})
    assert bad.status_code == 401
    assert 'token' not in bad.get_json()


def test_login_unknown_email(app):
    with pytest.raises(InvalidCredentials):
        authenticate('ninguem@example.com', 'x')


def test_login_keeps_previous_sessions(app):
    first = register_user('Maria', 'maria@example.com', 'pw')['token']
    second = authenticate('maria@example.com', 'pw')['token']
    assert first != second
    user_id = resolve_session(first)
    assert user_id is not None
    assert resolve_session(second) == user_id


@pytest.mark.parametrize('path', ['/api/register', '/api/login'])
def test_non_object_json_body_is_a_validation_error(client, path):
    resp = client.post(path, json=[1])
    assert resp.status_code == 400
    assert 'errors' in resp.get_json()


def test_logout_with_non_object_body_revokes_nothing(client):
    resp = client.post('/api/logout', json=[1])
    assert resp.status_code == 200
    assert resp.get_json() == {'revoked': False}


def test_register_rejects_non_string_fields(client):
    resp = client.post('/api/register', json={'name': 7, 'email': 'x@example.com', 'password': 123})
    assert resp.status_code == 400
    assert 'password' in resp.get_json()['errors']
    assert User.query.count() == 0


# ── Sessions ──────────────────────────────────────────────────────

def test_resolve_session_anonymous_cases(app):
    assert resolve_session(None) is None
    assert resolve_session('') is None
    assert resolve_session('does-not-exist') is None
    assert resolve_session(['not', 'a', 'token']) is None
    assert revoke_session(12345) is False


def test_expired_session_resolves_to_anonymous(app):
    token = register_user('Maria', 'maria@example.com', 'pw')['token']
    sess = db.session.get(UserSession, token)
    sess.expires_at = datetime.utcnow() - timedelta(seconds=1)
    db.session.commit()
    assert resolve_session(token) is None


def test_logout_revokes_token(client):
    token = register(client).get_json()['token']

    resp = client.post('/api/logout', json={'token': token})
    assert resp.get_json() == {'revoked': True}
    assert resolve_session(token) is None

    # Second logout has nothing left to revoke
    resp = client.post('/api/logout', headers={'Authorization': f'Bearer {token}'})
    assert resp.get_json() == {'revoked': False}


def test_purge_removes_expired_and_revoked(app):
    live = register_user('A', 'a@example.com', 'pw')['token']
    revoked = authenticate('a@example.com', 'pw')['token']
    expired = authenticate('a@example.com', 'pw')['token']
    revoke_session(revoked)
    db.session.get(UserSession, expired).expires_at = datetime.utcnow() - timedelta(hours=1)
    db.session.commit()

    assert purge_expired_sessions() == 2
    assert [s.token for s in UserSession.query.all()] == [live]


# ── User administration ───────────────────────────────────────────

def test_list_users_excludes_password(client):
    register(client)
    users = client.get('/api/users').get_json()
    assert len(users) == 1
    assert 'password' not in users[0]
    assert 'password_hash' not in users[0]
    assert users[0]['email'] == 'maria@example.com'


def test_set_role_stores_arbitrary_string_verbatim(client, app):
    register(client)
    user = User.query.one()

    resp = client.put(f'/api/users/{user.id}/role', json={'role': 'Super-Gerente'})
    assert resp.status_code == 200
    db.session.expire_all()
    assert db.session.get(User, user.id).role == 'Super-Gerente'


def test_set_role_unknown_user(client, app):
    resp = client.put('/api/users/999/role', json={'role': 'admin'})
    assert resp.status_code == 404
    assert set_role(999, 'admin') is None


def test_delete_user_cascades_sessions_and_keeps_orders(app):
    token = register_user('Maria', 'maria@example.com', 'pw')['token']
    user_id = resolve_session(token)
    db.session.add(Order(id='pref-1', user_id=user_id, items='[]', total=10))
    db.session.commit()

    assert delete_user(user_id) is True
    db.session.expire_all()

    assert UserSession.query.count() == 0
    order = db.session.get(Order, 'pref-1')
    assert order is not None
    assert order.user_id is None
    assert resolve_session(token) is None


def test_delete_missing_user_is_not_an_error(client):
    resp = client.delete('/api/users/12345')
    assert resp.status_code == 200


# ── Admin gate ────────────────────────────────────────────────────

def test_admin_routes_require_admin_token_when_enabled(client, app):
    app.config['REQUIRE_ADMIN_TOKEN'] = True
    user_token = register(client).get_json()['token']
    admin_token = register_user('Admin', 'admin@example.com', 'pw', role=ROLE_ADMIN)['token']

    assert client.get('/api/users').status_code == 401
    assert client.get('/api/users', headers={'Authorization': f'Bearer {user_token}'}).status_code == 403

    resp = client.get('/api/users', headers={'X-Session-Token': admin_token})
    assert resp.status_code == 200
    assert len(resp.get_json()) == 2

    # Public routes stay open
    assert client.get('/api/produtos').status_code == 200


def test_account_events_are_logged_by_the_service_logger(app, caplog):
    caplog.set_level(logging.INFO, logger='storefront.auth.service')
    register_user('Maria', 'maria@example.com', 'pw')
    with pytest.raises(InvalidCredentials):
        authenticate('maria@example.com', 'errada')

    records = [r for r in caplog.records if r.name == 'storefront.auth.service']
    messages = [r.getMessage() for r in records]
    assert any(m.startswith('New account registered: USR-') for m in messages)
    assert 'Failed login attempt for e-mail: maria@example.com' in messages
