"""
Pytest fixtures for Velvessa console tests.

Provides test database setup, a seeded domain state, team members for each
role, and test client login helpers.
"""

import pytest
from velvessa import create_app
from velvessa.extensions import db
from velvessa.models import User, UserRole, UserStatus
from velvessa.services import session_service
from velvessa.services.notification_service import SimulatedSmsGateway
from velvessa.services.state_service import DomainState


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SMS_DISPATCH_DELAY_SECONDS': 0,
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
def state(db_session):
    """Domain state on an empty store: every collection holds its seed data."""
    return DomainState()


@pytest.fixture(scope='function')
def admin_state(state):
    """Seed state with the default admin logged in."""
    session_service.login(state, "admin", "admin")
    return state


@pytest.fixture(scope='function')
def gateway():
    """SMS gateway without the dispatch delay."""
    return SimulatedSmsGateway(delay_seconds=0)


def _team_member(uid: str, name: str, email: str, role: UserRole, status=UserStatus.APPROVED) -> User:
    return User(id=uid, name=name, email=email, password="secret", role=role, status=status)


@pytest.fixture(scope='function')
def team(state):
    """
    Adds one approved Sales and one approved Inventory member, plus a
    Pending and a Rejected applicant. All share the password "secret".
    """
    members = {
        "sales": _team_member("u-sales", "Sam Sales", "sales@velvessa.test", UserRole.SALES),
        "inventory": _team_member("u-inv", "Ivy Inventory", "inventory@velvessa.test", UserRole.INVENTORY),
        "pending": _team_member("u-pend", "Pat Pending", "pending@velvessa.test", UserRole.SALES, UserStatus.PENDING),
        "rejected": _team_member("u-rej", "Rex Rejected", "rejected@velvessa.test", UserRole.SALES, UserStatus.REJECTED),
    }
    state.replace("users", lambda prev: [*prev, *members.values()])
    return members


def login(client, email: str, password: str):
    """Helper to open the console session through the API."""
    return client.post('/api/auth/login', json={'email': email, 'password': password})


def login_as_admin(client):
    response = login(client, 'admin', 'admin')
    assert response.status_code == 200
    return response
