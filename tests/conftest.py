# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "false"

from backoffice.database import get_db
from backoffice.main import app
from backoffice.models import Base, Employee, Role
from backoffice.security import get_password_hash
from backoffice.services import rbac_service
from backoffice.store import SqlAlchemyStore

# Test database setup
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class InMemoryStore:
    """``RecordStore`` fake keeping records in plain dicts.

    Column defaults are applied on insert the way the database would, so
    services see ids, flags and timestamps without a real session.
    """

    def __init__(self) -> None:
        self.records: dict[type, dict[Any, Any]] = {}

    def _table(self, model: type) -> dict[Any, Any]:
        return self.records.setdefault(model, {})

    @staticmethod
    def _matches(record: Any, criteria: dict[str, Any]) -> bool:
        return all(getattr(record, name) == value for name, value in criteria.items())

    def get(self, model: type, record_id: Any) -> Any:
        if record_id is None:
            return None
        return self._table(model).get(record_id)

    def find(
        self, model: type, where: Callable[[Any], bool] | None = None, **criteria: Any
    ) -> list[Any]:
        return [
            record
            for record in self._table(model).values()
            if self._matches(record, criteria) and (where is None or where(record))
        ]

    def first(
        self, model: type, where: Callable[[Any], bool] | None = None, **criteria: Any
    ) -> Any:
        matches = self.find(model, where, **criteria)
        return matches[0] if matches else None

    def count(self, model: type, **criteria: Any) -> int:
        return len(self.find(model, **criteria))

    def insert(self, record: Any) -> Any:
        for column in type(record).__table__.columns:
            if getattr(record, column.key) is not None or column.default is None:
                continue
            default = column.default
            value = default.arg(None) if default.is_callable else default.arg
            setattr(record, column.key, value)
        self._table(type(record))[record.id] = record
        return record

    def update(self, record: Any, **changes: Any) -> Any:
        for field, value in changes.items():
            setattr(record, field, value)
        return record

    def delete(self, record: Any) -> None:
        self._table(type(record)).pop(record.id, None)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStore"]:
        yield self


def make_employee(
    store,
    username: str = "ana",
    password: str = "secret123",
    role_id=None,
    is_active: bool = True,
    first_name: str = "Ana",
    last_name: str = "Test",
) -> Employee:
    """Helper to create a persisted employee."""
    return store.insert(
        Employee(
            username=username,
            password_hash=get_password_hash(password) if password else None,
            first_name=first_name,
            last_name=last_name,
            is_active=is_active,
            role_id=role_id,
        )
    )


@pytest.fixture
def employee_factory() -> Callable[..., Employee]:
    """Factory persisting employees into a given store."""
    return make_employee


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Empty in-memory record store."""
    return InMemoryStore()


@pytest.fixture
def seeded_store(memory_store) -> InMemoryStore:
    """In-memory store with the default modules and roles."""
    rbac_service.seed_defaults(memory_store)
    return memory_store


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_store(db_session) -> SqlAlchemyStore:
    """Database-backed store seeded with the default modules and roles."""
    store = SqlAlchemyStore(db_session)
    rbac_service.seed_defaults(store)
    return store


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_employee(db_store) -> Employee:
    """Employee holding the seeded system-admin role."""
    role = rbac_service.get_role_by_name(db_store, "admin")
    return make_employee(
        db_store,
        username="carla",
        password="adminpass123",
        role_id=role.id,
        first_name="Carla",
    )


@pytest.fixture
def sales_employee(db_store) -> Employee:
    """Employee holding the seeded scoped ``sales`` role."""
    role: Role = rbac_service.get_role_by_name(db_store, "sales")
    return make_employee(
        db_store, username="ana", password="salespass123", role_id=role.id
    )


@pytest.fixture
def admin_client(client, admin_employee):
    """Create an authenticated admin test client."""
    response = client.post(
        "/api/v1/auth/login", json={"username": "carla", "password": "adminpass123"}
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def sales_client(client, sales_employee):
    """Create a test client authenticated as a sales employee."""
    response = client.post(
        "/api/v1/auth/login", json={"username": "ana", "password": "salespass123"}
    )
    assert response.status_code == 200
    return client
