"""
Pytest configuration and fixtures for the customer accounts API.
"""

import os

os.environ["SECRET_KEY"] = "test-secret-key-for-testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("TWILIO_ACCOUNT_SID", None)
os.environ.pop("TWILIO_AUTH_TOKEN", None)

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import utils
from app.database import Base, get_db
from app.main import app as fastapi_app

fake = Faker()

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope='session')
def app():
    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope='function')
def db_session():
    """Fresh tables for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope='function')
def client(app, db_session):
    return TestClient(app)


class FakeMessages:
    def __init__(self, outbox):
        self.outbox = outbox

    def create(self, body, from_, to):
        self.outbox.append({"body": body, "from": from_, "to": to})

        class _Message:
            sid = f"SM{len(self.outbox):032d}"
        return _Message()


class FakeSmsClient:
    def __init__(self, outbox):
        self.messages = FakeMessages(outbox)


@pytest.fixture
def sms_outbox(monkeypatch):
    """Capture outgoing SMS instead of calling Twilio."""
    outbox = []
    monkeypatch.setattr(utils, "get_sms_client", lambda: FakeSmsClient(outbox))
    return outbox


def _signup(client, **overrides):
    data = {
        'email': fake.unique.email(),
        'phone': fake.numerify('##########'),
        'password': 'secret123',
    }
    data.update(overrides)
    response = client.post('/customer/signup', json=data)
    assert response.status_code == 201, response.text
    # signup also sets the token cookie; tests authenticate explicitly
    client.cookies.clear()
    body = response.json()
    return {
        'email': body['email'],
        'phone': data['phone'],
        'password': data['password'],
        'signature': body['signature'],
    }


@pytest.fixture
def signup(client, sms_outbox):
    return lambda **overrides: _signup(client, **overrides)


@pytest.fixture
def customer(signup):
    return signup()


@pytest.fixture
def auth_headers(customer):
    return {'Authorization': f"Bearer {customer['signature']}"}
