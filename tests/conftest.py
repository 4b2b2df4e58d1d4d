import os

# Must be set before threadboard.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-threadboard-tests"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from threadboard.core import security
from threadboard.db.session import Base, get_db
from threadboard.db.init_db import create_all_tables
from threadboard.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Minimum bcrypt cost keeps the suite fast
security.pwd_context.update(bcrypt__rounds=4)


@pytest.fixture(scope="function")
def db():
    """Fresh schema and session for each test."""
    create_all_tables(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client whose requests share the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register_and_login(client, username, password="s3cret-pass"):
    response = client.post("/auth/register", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(tokens):
    return {"Authorization": f"Bearer {tokens['accessToken']}"}


@pytest.fixture
def alice(client):
    return bearer(register_and_login(client, "alice"))


@pytest.fixture
def bob(client):
    return bearer(register_and_login(client, "bob"))
