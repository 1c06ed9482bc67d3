"""
Pytest fixtures for the back-office API tests.

Every test gets a fresh application on an in-memory SQLite database, its own
avatar directory and profile file, and one account per role.
"""

import pytest

from backoffice import create_app
from backoffice.extensions import db
from backoffice.models import User, Transaction, ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_STAFF
from backoffice.services.auth_service import hash_password


PASSWORD = "Password123!"


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        # cheap hashes keep the suite fast
        'BCRYPT_LOG_ROUNDS': 4,
        'AVATAR_UPLOAD_DIR': str(tmp_path / 'avatars'),
        'USER_PROFILES_FILE': str(tmp_path / 'user-profiles.json'),
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def _create_user(email, name, role, username=None):
    user = User(
        email=email,
        name=name,
        username=username,
        role=role,
        password_hash=hash_password(PASSWORD),
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    return _create_user("admin@test.com", "Admin User", ROLE_ADMIN, username="admin")


@pytest.fixture
def supervisor_user(app):
    return _create_user("supervisor@test.com", "Supervisor User", ROLE_SUPERVISOR, username="supervisor")


@pytest.fixture
def staff_user(app):
    return _create_user("staff@test.com", "Staff User", ROLE_STAFF, username="staff")


def get_auth_token(client, email, password=PASSWORD):
    """Log in and return the bearer token."""
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, "admin@test.com"))


@pytest.fixture
def supervisor_headers(client, supervisor_user):
    return auth_headers(get_auth_token(client, "supervisor@test.com"))


@pytest.fixture
def staff_headers(client, staff_user):
    return auth_headers(get_auth_token(client, "staff@test.com"))


@pytest.fixture
def login(client):
    """Returns a callable: login(email, password=PASSWORD) -> auth headers."""
    def _login(email, password=PASSWORD):
        return auth_headers(get_auth_token(client, email, password))
    return _login


@pytest.fixture
def audit_actions(app):
    """Returns a callable listing the stored audit actions, oldest first."""
    def _actions():
        rows = db.session.query(Transaction).order_by(Transaction.id.asc()).all()
        return [t.action for t in rows]
    return _actions
