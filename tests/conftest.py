"""
Pytest configuration and fixtures
"""
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.config import Settings  # noqa: E402
from src.index import create_app  # noqa: E402
from src.students.store import StudentStore  # noqa: E402

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock for timestamp and age assertions."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def years_before(reference: date, years: int) -> date:
    """Same month/day ``years`` earlier (Feb 29 falls back to Feb 28)."""
    try:
        return reference.replace(year=reference.year - years)
    except ValueError:
        return reference.replace(year=reference.year - years, day=28)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return StudentStore(clock=clock)


@pytest.fixture
def settings():
    return Settings(log_level=0)


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def student_payload():
    """Valid create payload for a 20-year-old relative to FIXED_NOW."""
    return {
        "firstName": "John",
        "lastName": "Doe",
        "dateOfBirth": years_before(FIXED_NOW.date(), 20).isoformat(),
        "gpa": 3.8,
        "email": "john@example.com",
    }
