from datetime import timedelta

import pytest
from sqlalchemy import update

from invitegate.app import create_app
from invitegate.config import Settings
from invitegate.db import db
from invitegate.db.models import InviteToken
from invitegate.services.invite_service import InviteService
from invitegate.services.user_service import UserService

STRONG_PASSWORD = 'Abc1234!'


@pytest.fixture
def settings(tmp_path):
    return Settings(
        port=3001,
        database_url=f"sqlite:///{tmp_path / 'test.sqlite'}",
        jwt_secret='test-secret',
        app_env='test',
        access_token_expires=timedelta(hours=1),
        refresh_token_expires=timedelta(days=7),
        password_hash_method='pbkdf2:sha256:1000',
        log_level='WARNING',
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config['TESTING'] = True
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_service(app):
    return app.extensions['auth_service']


@pytest.fixture
def make_user(app, auth_service):
    """Create a user and return its id"""
    def _make(email='user@example.com', password=STRONG_PASSWORD, is_admin=False, is_active=True):
        with app.app_context():
            user = UserService.create_user(email, auth_service.hash_password(password), is_admin=is_admin)
            if not is_active:
                user.is_active = False
                db.session.commit()
            return user.id
    return _make


@pytest.fixture
def make_token(app):
    """Create an invite token and return the token string"""
    def _make(expires_in_hours=1, max_uses=1, creator_id=None):
        with app.app_context():
            creator = UserService.get_user_by_id(creator_id) if creator_id else None
            return InviteService.create_token(creator, expires_in_hours=expires_in_hours, max_uses=max_uses).token
    return _make


@pytest.fixture
def set_token_fields(app):
    """Write token columns directly, bypassing the service rules"""
    def _set(token, **values):
        with app.app_context():
            db.session.execute(update(InviteToken).where(InviteToken.token == token).values(**values))
            db.session.commit()
    return _set


@pytest.fixture
def login(client):
    """Log in and return the JSON body"""
    def _login(email, password=STRONG_PASSWORD):
        response = client.post('/auth/login', json={'email': email, 'password': password})
        assert response.status_code == 200, response.get_json()
        return response.get_json()
    return _login


@pytest.fixture
def admin_headers(make_user, login):
    make_user('admin@example.com', is_admin=True)
    tokens = login('admin@example.com')
    return {'Authorization': f"Bearer {tokens['access_token']}"}
