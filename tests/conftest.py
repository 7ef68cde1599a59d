"""
Pytest configuration and fixtures

The app is pointed at a private in-memory SQLite database before anything
from `app` is imported. Tables are dropped and recreated around every test.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from app.core.db import Base, SessionLocal, engine
from app.core.repository import MeasurementRepository
from app.main import app


@pytest.fixture(autouse=True)
def _fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repo(db_session):
    return MeasurementRepository(db_session)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def sample_payload():
    """Submission as sent by the entry form."""
    return {
        "weightKg": 70,
        "heightCm": 175,
        "age": 30,
        "sex": "male",
        "activity": "moderate",
        "measurementDate": "2026-10-01",
    }


@pytest.fixture
def store(repo):
    """Insert a computed measurement for a 30 year old male."""
    from app.core.metrics import calculate_metrics
    from app.core.validation import MeasurementInput

    def _store(measurement_date, weight_kg=70.0, height_cm=175.0, activity_level="moderate"):
        data = MeasurementInput(
            weight_kg=weight_kg,
            height_cm=height_cm,
            age=30,
            sex="male",
            activity_level=activity_level,
            measurement_date=measurement_date,
        )
        metrics = calculate_metrics(data.weight_kg, data.height_cm, data.age, data.sex, data.activity_level)
        return repo.insert(data, metrics)

    return _store
