"""
Pytest fixtures for RoyalCare backend tests.

Provides an in-memory database, a throwaway upload folder, the test client,
and claim headers for each kind of caller.
"""

import os

import pytest
from royalcare import create_app
from royalcare.extensions import db
from royalcare.services.claims_service import Claims


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    upload_dir = tmp_path_factory.mktemp("uploads")
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'UPLOAD_FOLDER': str(upload_dir),
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
    """Empty every table and the upload folder before each test."""
    with app.app_context():
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        upload_dir = app.config['UPLOAD_FOLDER']
        for name in os.listdir(upload_dir):
            os.remove(os.path.join(upload_dir, name))

        yield db.session

        db.session.rollback()


@pytest.fixture
def upload_dir(app):
    return app.config['UPLOAD_FOLDER']


# =============================================================================
# CALLERS
# =============================================================================

ADMIN = Claims(role="admin", user_id=1)
ICU_USER = Claims(role="user", department="ICU", user_id=2)
ER_USER = Claims(role="user", department="ER", user_id=3)
NO_DEPT_USER = Claims(role="user", user_id=4)


def claim_headers(claims: Claims) -> dict:
    """Headers a client sends to present the given claims."""
    headers = {}
    if claims.role:
        headers['X-Role'] = claims.role
    if claims.department:
        headers['X-Department'] = claims.department
    if claims.user_id is not None:
        headers['X-User-Id'] = str(claims.user_id)
    return headers


@pytest.fixture
def admin_headers(db_session):
    return claim_headers(ADMIN)


@pytest.fixture
def icu_headers(db_session):
    return claim_headers(ICU_USER)


@pytest.fixture
def er_headers(db_session):
    return claim_headers(ER_USER)


# =============================================================================
# DEVICES
# =============================================================================

def device_payload(**overrides) -> dict:
    payload = {
        "name": "Pump-1",
        "model": "Infusomat Space",
        "serial_number": "SN-0001",
        "location": "Room 101",
        "branch": "Central",
        "department": "ICU",
        "status": "Active",
        "last_service_date": "2026-01-15",
        "next_service_date": "2026-07-15",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def icu_device(client, admin_headers):
    """Device in ICU, created through the API."""
    resp = client.post("/devices", json=device_payload(), headers=admin_headers)
    assert resp.status_code == 201
    return resp.get_json()


@pytest.fixture
def er_device(client, admin_headers):
    """Device in ER, created through the API."""
    resp = client.post(
        "/devices",
        json=device_payload(name="Monitor-7", serial_number="SN-0007", department="ER"),
        headers=admin_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()
