"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; point everything at in-memory SQLite first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-only-secret-key"
os.environ["ANALYTICS_API_KEY"] = "test-analytics-key"
os.environ["ANALYTICS_SCHEDULER_ENABLED"] = "false"
os.environ["DEBUG"] = "false"
os.environ["LOG_FORMAT"] = "console"
os.environ["SENTRY_DSN"] = ""

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shiftlink import models  # noqa: E402,F401
from shiftlink.core.security import actor_from_user, create_access_token, get_password_hash  # noqa: E402
from shiftlink.db.base import Base  # noqa: E402
from shiftlink.db.session import get_db  # noqa: E402
from shiftlink.main import app  # noqa: E402
from shiftlink.models.application import Application  # noqa: E402
from shiftlink.models.employer import Employer  # noqa: E402
from shiftlink.models.job import Job  # noqa: E402
from shiftlink.models.student import Student  # noqa: E402
from shiftlink.models.user import User  # noqa: E402

API_KEY = "test-analytics-key"
PASSWORD = "password123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    """Session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app, sharing the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Seed:
    """Creates committed rows through short-lived sessions."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._counter = 0

    def _email(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}{self._counter}@example.com"

    async def _save(self, *objects):
        async with self.session_factory() as session:
            session.add_all(objects)
            await session.commit()

    def _user(self, name, email, role, country):
        return User(
            name=name,
            email=email,
            password_hash=get_password_hash(PASSWORD),
            role=role,
            country=country,
            is_active=True,
        )

    async def student(self, name="Aiko", email=None, country="Japan") -> User:
        user = self._user(name, email or self._email("student"), "student", country)
        user.student = Student(skills=[])
        user.employer = None
        await self._save(user)
        return user

    async def employer(self, company_name="Corner Cafe", email=None, country="Japan") -> User:
        user = self._user(company_name + " Owner", email or self._email("employer"), "employer", country)
        user.employer = Employer(company_name=company_name)
        user.student = None
        await self._save(user)
        return user

    async def admin(self, email=None) -> User:
        user = self._user("Admin", email or self._email("admin"), "admin", None)
        user.student = None
        user.employer = None
        await self._save(user)
        return user

    async def job(self, employer_user: User, **overrides) -> Job:
        fields = {
            "title": "Barista",
            "location": "Tokyo",
            "description": "Evening shifts making coffee",
            "hourly_rate": 1200.0,
            "hours_per_week": 20,
            "country": "Japan",
            "is_active": True,
        }
        fields.update(overrides)
        job = Job(employer_id=employer_user.employer.id, **fields)
        await self._save(job)
        return job

    async def application(self, job: Job, student_user: User, status="PENDING", is_completed=False) -> Application:
        application = Application(
            job_id=job.id,
            student_id=student_user.student.id,
            status=status,
            is_completed=is_completed,
        )
        await self._save(application)
        return application


@pytest.fixture
def seed(session_factory):
    return Seed(session_factory)


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


def actor(user: User):
    return actor_from_user(user)


@pytest.fixture
def headers():
    """Bearer headers for a seeded user."""
    return auth_headers


@pytest.fixture
def as_actor():
    """ActorContext for a seeded user."""
    return actor
