"""
Pytest configuration for account service tests.

Each test gets its own SQLite file, and the app's ``get_db`` dependency is
pointed at it.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from account_service.db import Base, build_engine, get_db
from account_service.main import app
from account_service import models  # noqa: F401


@pytest.fixture
def engine(tmp_path):
    test_engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


PASSWORD = "Secret123!"


def register_payload(email="bob@example.com", password=PASSWORD, first_name="Bob", last_name="Smith"):
    return {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "password": password,
    }
