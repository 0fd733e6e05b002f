"""Pytest configuration and shared fixtures."""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nightguard.api.deps import get_document_store
from nightguard.database import init_db
from nightguard.main import app
from nightguard.models.enums import UserRole, VenueStatus
from nightguard.services.documents import DocumentStore
from nightguard.services.passwords import hash_password
from nightguard.storage.database import DatabaseStorage
from nightguard.storage.factory import get_storage
from nightguard.storage.memory import MemStorage

PASSWORD = "secret123"


@pytest.fixture
def db_session():
    """Create a fresh in-memory database for each test."""
    # StaticPool keeps one connection, so the API's worker threads see the same database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(bind=engine)

    TestingSessionLocal = sessionmaker(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture(params=["database", "memory"])
def storage(request, db_session):
    """The same tests run against both storage backends."""
    if request.param == "database":
        return DatabaseStorage(db_session)
    return MemStorage()


@pytest.fixture
def password():
    """Password of every user made by make_user."""
    return PASSWORD


@pytest.fixture
def make_user(storage):
    """Factory for users with a known password."""
    counter = {"n": 0}

    def _make_user(role: UserRole, username: str = None):
        counter["n"] += 1
        username = username or f"{role.value}{counter['n']}"
        return storage.create_user({
            "username": username,
            "password": hash_password(PASSWORD),
            "name": f"{role.value.title()} User",
            "email": f"{username}@example.com",
            "role": role,
        })

    return _make_user


@pytest.fixture
def sample_venue(storage):
    return storage.create_venue({
        "name": "The Basement",
        "address": "12 Lane St",
        "contact": "555-0100",
        "status": VenueStatus.OPEN,
    })


@pytest.fixture
def sample_incident(storage, sample_venue):
    """A pending incident at the sample venue."""
    return storage.create_incident({
        "type": "Disturbance",
        "severity": "medium",
        "date": datetime(2024, 5, 1, 23, 30),
        "venue_id": sample_venue.id,
        "location": "Main Bar",
        "description": "Argument between two patrons",
        "reported_by": "Sam Guard",
        "position": "Door Security",
    })


@pytest.fixture
def sample_sign_in(storage, sample_venue):
    """An on-duty guard at the sample venue."""
    return storage.create_security_sign_in({
        "security_name": "Alex Rodriguez",
        "badge_number": "SG67890",
        "venue_id": sample_venue.id,
        "position": "Floor Security",
        "date": datetime(2024, 5, 1),
        "time_in": datetime(2024, 5, 1, 20, 0),
    })


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def document_store(upload_dir):
    return DocumentStore(root=str(upload_dir), max_bytes=64 * 1024)


@pytest.fixture
def api(storage, document_store):
    """Route the app to the test storage and upload directory."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_document_store] = lambda: document_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(api):
    return TestClient(api)


@pytest.fixture
def login_as(api, make_user):
    """Factory: a TestClient holding a session cookie for a new user of `role`."""
    def _login_as(role: UserRole):
        user = make_user(role)
        client = TestClient(api)
        response = client.post("/api/login", json={"username": user.username, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return client, user

    return _login_as


@pytest.fixture
def staff_client(login_as):
    return login_as(UserRole.STAFF)[0]


@pytest.fixture
def security_client(login_as):
    return login_as(UserRole.SECURITY)[0]


@pytest.fixture
def manager_client(login_as):
    return login_as(UserRole.MANAGER)[0]


@pytest.fixture
def admin_client(login_as):
    return login_as(UserRole.ADMIN)[0]
