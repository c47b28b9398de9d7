"""Root conftest - shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Seeded users cover every role; each comes with a matching Principal

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for workflow tests
      (PostgreSQL-specific features not exercised here)
    - StaticPool: the request session and the notification session share the
      one in-memory database
"""

import os

# Never reach a real database from tests
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from dataclasses import dataclass  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import workboard.models  # noqa: E402,F401
from workboard.core.domain_types import Principal, Role  # noqa: E402
from workboard.db.base import Base  # noqa: E402
from workboard.models.user import User  # noqa: E402


@dataclass
class Person:
    user: User
    principal: Principal

    @property
    def id(self):
        return self.user.id


@dataclass
class People:
    lead: Person
    other_manager: Person
    admin: Person
    alice: Person
    bob: Person
    carol: Person


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def people(test_db) -> People:
    """Seed one user per role plus plain team members."""
    specs = {
        "lead": ("Lena Lead", Role.MANAGER),
        "other_manager": ("Omar Other", Role.MANAGER),
        "admin": ("Ada Admin", Role.ADMIN),
        "alice": ("Alice Member", Role.USER),
        "bob": ("Bob Member", Role.USER),
        "carol": ("Carol Member", Role.USER),
    }
    seeded = {}
    for key, (name, role) in specs.items():
        user = User(full_name=name, email=f"{key}@example.com", role=role.value)
        test_db.add(user)
        seeded[key] = user
    await test_db.commit()
    return People(**{
        key: Person(user, Principal(user.id, Role(user.role)))
        for key, user in seeded.items()
    })
