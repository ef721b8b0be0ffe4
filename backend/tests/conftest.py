"""Shared fixtures for backend tests: a throwaway SQLite database and a test client."""

import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

# Must be set before backend.database is imported
_DB_FILE = os.path.join(tempfile.mkdtemp(prefix="speakercalc-test-"), "test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"
os.environ["AI_RATE_LIMIT_PER_MINUTE"] = "10000"

from fastapi.testclient import TestClient

from backend.database import SessionLocal, init_db
from backend.main import app
from backend.models_db import Calculation


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    session.query(Calculation).delete()
    session.commit()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client
