"""
Pytest fixtures for pixstore backend tests.

Provides test database setup, role fixtures (owner, admin, user) and test client.
"""

from decimal import Decimal

import pytest
from pixstore import create_app
from pixstore.extensions import db
from pixstore.models import Product, ActivityLog
from pixstore.models.auth import ROLE_ADMIN, ROLE_OWNER, ROLE_USER
from pixstore.services.auth_service import create_user


PASSWORD = "secret123"


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
        'UPLOAD_FOLDER': str(tmp_path_factory.mktemp('uploads')),
        'OWNER_USERNAME': 'owner',
        'OWNER_PASSWORD': 'owner-pass',
        'ADMIN_USERNAME': 'admin',
        'ADMIN_PASSWORD': 'admin-pass',
        'DEFAULT_PIX_KEY': 'pix@test.local',
        'INIT_ENDPOINT_ENABLED': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def owner(db_session):
    return create_user("store_owner", PASSWORD, role=ROLE_OWNER)


@pytest.fixture(scope='function')
def admin(db_session):
    return create_user("store_admin", PASSWORD, role=ROLE_ADMIN)


@pytest.fixture(scope='function')
def customer(db_session):
    return create_user("alice", PASSWORD, role=ROLE_USER)


@pytest.fixture(scope='function')
def other_customer(db_session):
    return create_user("bob", PASSWORD, role=ROLE_USER)


@pytest.fixture(scope='function')
def owner_headers(client, owner):
    return auth_headers(get_auth_token(client, owner.username, PASSWORD))


@pytest.fixture(scope='function')
def admin_headers(client, admin):
    return auth_headers(get_auth_token(client, admin.username, PASSWORD))


@pytest.fixture(scope='function')
def customer_headers(client, customer):
    return auth_headers(get_auth_token(client, customer.username, PASSWORD))


@pytest.fixture(scope='function')
def other_customer_headers(client, other_customer):
    return auth_headers(get_auth_token(client, other_customer.username, PASSWORD))


@pytest.fixture(scope='function')
def product(db_session):
    """An active product priced 49.90."""
    product = Product(
        name="Preset Pack",
        description="Lightroom presets",
        price=Decimal("49.90"),
        is_active=True,
        is_featured=False,
        tags=["presets"],
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def inactive_product(db_session):
    product = Product(
        name="Retired Pack",
        description="No longer sold",
        price=Decimal("10.00"),
        is_active=False,
    )
    db_session.add(product)
    db_session.commit()
    return product


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def logged(db_session):
    """Returns a lookup of activity log rows by action, oldest first."""
    def _lookup(action: str) -> list:
        return (
            db_session.query(ActivityLog)
            .filter_by(action=action)
            .order_by(ActivityLog.id.asc())
            .all()
        )
    return _lookup
