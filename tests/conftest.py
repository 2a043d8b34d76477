"""Shared pytest fixtures for postforge tests."""

import pytest
from fastapi.testclient import TestClient

from postforge.api.app import create_app
from postforge.db.session import Database


@pytest.fixture
def database():
    """Create an open in-memory database with schema and default settings."""
    db = Database().open()
    db.create_schema()
    yield db
    db.close()


@pytest.fixture
def session(database):
    """Create a database session for testing."""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    """Create a test client bound to the in-memory database."""
    app = create_app(database)
    return TestClient(app)
