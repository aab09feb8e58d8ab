from datetime import datetime, timedelta, timezone

import pytest

from hospital_dashboard.application.ports.store_client import StoreResult
from hospital_dashboard.application.repositories import AppointmentRepository, DoctorRepository, PatientRepository
from hospital_dashboard.database import build_engine, create_db_and_tables
from hospital_dashboard.infrastructure.store import InMemoryStoreClient, SqlStoreClient


DR_A = {
    "full_name": "Dr. A",
    "specialization": "Cardiology",
    "email": "a@x.com",
    "phone": "555-0100",
    "experience_years": 5,
    "qualification": "MD",
}

P1 = {
    "full_name": "P1",
    "email": "p1@x.com",
    "phone": "555-0200",
    "date_of_birth": "1990-01-01",
    "gender": "Female",
}


class Clock:
    """Manual clock; each call advances by `step`"""

    def __init__(self, start=datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


class RecordingStore:
    """Wraps a real store and records every call made to it"""

    def __init__(self, inner=None):
        self.inner = inner or InMemoryStoreClient()
        self.calls = []

    async def list(self, collection, embed=(), order_by=None, direction=None):
        self.calls.append(("list", collection, tuple(embed), order_by, direction))
        return await self.inner.list(collection, embed=embed, order_by=order_by, direction=direction)

    async def insert(self, collection, record):
        self.calls.append(("insert", collection, dict(record)))
        return await self.inner.insert(collection, record)

    async def update(self, collection, record_id, patch):
        self.calls.append(("update", collection, record_id, dict(patch)))
        return await self.inner.update(collection, record_id, patch)

    async def delete(self, collection, record_id):
        self.calls.append(("delete", collection, record_id))
        return await self.inner.delete(collection, record_id)

    def writes(self):
        return [c for c in self.calls if c[0] != "list"]


class FailingStore:
    """Every call fails with the given code"""

    def __init__(self, code="unavailable", message="store is down"):
        self.code = code
        self.message = message
        self.calls = 0

    async def list(self, collection, embed=(), order_by=None, direction=None):
        self.calls += 1
        return StoreResult.failure(self.code, self.message)

    async def insert(self, collection, record):
        self.calls += 1
        return StoreResult.failure(self.code, self.message)

    async def update(self, collection, record_id, patch):
        self.calls += 1
        return StoreResult.failure(self.code, self.message)

    async def delete(self, collection, record_id):
        self.calls += 1
        return StoreResult.failure(self.code, self.message)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(clock):
    return RecordingStore(InMemoryStoreClient(clock=clock))


@pytest.fixture
def sql_store(clock):
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield SqlStoreClient(engine, clock=clock)
    engine.dispose()


@pytest.fixture
def doctors(store):
    return DoctorRepository(store)


@pytest.fixture
def patients(store):
    return PatientRepository(store)


@pytest.fixture
def appointments(store):
    return AppointmentRepository(store)
