"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from pulseid.emergency.models import Profile
from pulseid.main import app

FIXED_NOW = datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def full_profile() -> Profile:
    return make_profile(
        gender="Female",
        blood_group="O+",
        height="165",
        height_unit="cm",
        weight="60",
        weight_unit="kg",
        conditions=["Asthma"],
        medications=["Salbutamol inhaler"],
        allergies=["Penicillin"],
        symptoms=[],
        emergency_contacts=[
            {"name": "Ravi Menon", "number": "+91 98765 43210", "relationship": "Brother"},
        ],
        doctor_contacts=[
            {"name": "Dr. Iyer", "number": "+91 80 2222 3333", "specialization": "Pulmonology"},
        ],
        emergency_doctor={"name": "Kapoor", "number": "+91 80 4444 5555"},
    )


def make_profile(name: str = "Asha", age: str = "30", **fields: Any) -> Profile:
    """Helper to build a Profile from snake_case fields."""
    return Profile(name=name, age=age, **fields)
