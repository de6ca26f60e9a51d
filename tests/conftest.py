"""Pytest configuration and fixtures for LifeOS export tests."""

import os
from datetime import date, datetime

import pytest

# Set test environment
os.environ["APP_ENV"] = "test"
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "INFO"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///data/test.db"

from app.export.domains import ExportDomain  # noqa: E402
from tests.fakes import FakeReader  # noqa: E402


@pytest.fixture
def make_readers():
    """Factory: builds a full reader registry, overriding selected domains."""

    def _make(**overrides: FakeReader) -> dict[ExportDomain, FakeReader]:
        readers = {domain: FakeReader(domain) for domain in ExportDomain}
        for domain in ExportDomain:
            override = overrides.get(domain.name.lower())
            if override is not None:
                readers[domain] = override
        return readers

    return _make


@pytest.fixture
def sample_financial_goals():
    """Financial goals for two users."""
    return [
        {
            "id": "fg_1",
            "user_id": "user_1",
            "name": "Save, invest, retire",
            "type": "RETIREMENT",
            "target_amount": 1000000.0,
            "current_amount": 2500.5,
            "is_paused": False,
            "notes": None,
            "created_at": datetime(2024, 3, 1, 9, 30),
        },
        {
            "id": "fg_2",
            "user_id": "user_1",
            "name": "Emergency fund",
            "type": "EMERGENCY_FUND",
            "target_amount": 50000.0,
            "current_amount": 12000.0,
            "is_paused": True,
            "notes": 'Keep "untouchable"',
            "created_at": datetime(2023, 12, 15, 18, 0),
        },
        {
            "id": "fg_3",
            "user_id": "user_2",
            "name": "Other user's goal",
            "type": "CUSTOM",
            "target_amount": 10.0,
            "current_amount": 0.0,
            "is_paused": False,
            "notes": None,
            "created_at": datetime(2024, 3, 2, 10, 0),
        },
    ]


@pytest.fixture
def sample_habits():
    """Habits with nested check-ins; the second habit has an extra field."""
    return [
        {
            "id": "h_1",
            "user_id": "user_1",
            "name": "Read",
            "frequency": "DAILY",
            "current_streak": 4,
            "is_active": True,
            "created_at": datetime(2024, 2, 1, 8, 0),
            "check_ins": [
                {"id": "c_1", "date": date(2024, 2, 3), "completed": True},
            ],
        },
        {
            "id": "h_2",
            "user_id": "user_1",
            "name": "Run",
            "frequency": "WEEKLY",
            "current_streak": 0,
            "is_active": False,
            "created_at": datetime(2024, 1, 10, 7, 0),
            "check_ins": [],
            "quantity_unit": "km",
        },
    ]
