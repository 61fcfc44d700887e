"""
Pytest configuration and fixtures for the art marketplace API.
"""
import os

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"

from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from artmarket.api.deps import get_image_client, get_mail_client, get_payment_client
from artmarket.data.database import Base, get_db
from artmarket.domain.errors import UpstreamError
from artmarket.main import create_app
import artmarket.data.models  # noqa: F401


class FakeImageHost:
    """Image host that records uploads and returns predictable URLs."""

    def __init__(self):
        self.uploads: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()
        self._seq = count(1)

    def upload(self, blob, folder):
        if blob.filename in self.fail_on:
            raise UpstreamError(f"Image upload failed: {blob.filename}")
        self.uploads.append((folder, blob.filename))
        return f"https://img.test/{folder}/{next(self._seq)}-{blob.filename}"

    def upload_many(self, blobs, folder):
        return [self.upload(b, folder) for b in blobs]


class FakePaymentGateway:
    def __init__(self):
        self.should_succeed = True
        self.calls: list[dict] = []

    def create_order(self, amount_minor, currency, receipt=None):
        self.calls.append({"amount": amount_minor, "currency": currency, "receipt": receipt})
        if not self.should_succeed:
            raise UpstreamError("Payment gateway error")
        return {
            "id": "order_test123",
            "entity": "order",
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }


class FakeMailRelay:
    def __init__(self):
        self.should_succeed = True
        self.sent: list[dict] = []

    def send(self, to, subject, text, html=None):
        if not self.should_succeed:
            raise UpstreamError("Mail relay error")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})
        return f"msg-{len(self.sent)}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def mail_relay() -> FakeMailRelay:
    return FakeMailRelay()


@pytest.fixture
def app(engine, image_host, payment_gateway, mail_relay):
    TestingSession = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app = create_app(rate_limit_enabled=False)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_client] = lambda: image_host
    app.dependency_overrides[get_payment_client] = lambda: payment_gateway
    app.dependency_overrides[get_mail_client] = lambda: mail_relay
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def sample_user() -> dict:
    return {
        "UserId": "u1",
        "fullName": "Frida Kahlo",
        "Email": "frida@example.com",
        "imageurl": "https://img.test/avatars/frida.png",
        "username": "frida",
    }


@pytest.fixture
def sample_listing() -> dict:
    return {
        "category": "Painting",
        "title": "Sunset",
        "description": "Oil on canvas",
        "price": "100",
        "userId": "u1",
    }


@pytest.fixture
def make_images():
    """Build multipart ``images`` entries for the given file names."""

    def _make(*names: str) -> list:
        return [("images", (name, b"\x89PNG fake " + name.encode(), "image/png")) for name in names]

    return _make
