"""
test_commands.py: flask CLI commands (seed-demo, seed-admin, purge-sessions).
Run: pytest test_commands.py -v
"""
from datetime import datetime, timedelta

import pytest

from storefront import create_app, db
from storefront.auth.models import User, UserSession
from storefront.auth.service import register_user
from storefront.catalog.models import Product


@pytest.fixture(scope='function')
def app(tmp_path):
    app = create_app('testing')
    app.config['UPLOAD_FOLDER'] = str(tmp_path)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def test_seed_demo_is_idempotent(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['seed-demo'])
    result = runner.invoke(args=['seed-demo'])
    assert result.exit_code == 0
    names = sorted(p.name for p in Product.query.all())
    assert names == ['E-Bike V10 Sport', 'Scooter X13 Pro']


def test_seed_admin_creates_admin(app):
    result = app.test_cli_runner().invoke(args=[
        'seed-admin', '--name', 'Dona', '--email', 'dona@example.com', '--password', 'pw',
    ])
    assert result.exit_code == 0
    assert User.query.filter_by(email='dona@example.com').one().role == 'admin'


def test_seed_admin_promotes_existing_account(app):
    register_user('Dona', 'dona@example.com', 'pw')
    result = app.test_cli_runner().invoke(args=[
        'seed-admin', '--name', 'Dona', '--email', 'dona@example.com', '--password', 'pw',
    ])
    assert result.exit_code == 0
    assert 'promoted' in result.output
    db.session.expire_all()
    assert User.query.one().role == 'admin'


def test_purge_sessions_command(app):
    token = register_user('Dona', 'dona@example.com', 'pw')['token']
    db.session.get(UserSession, token).expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.session.commit()

    result = app.test_cli_runner().invoke(args=['purge-sessions'])
    assert result.exit_code == 0
    assert '1 session(s) removed' in result.output
    assert UserSession.query.count() == 0
