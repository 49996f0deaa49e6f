"""
Shared pytest fixtures for FleetFusion backend tests.

Uses SQLite in-memory with StaticPool so all sessions share one connection,
meaning data written in one session is visible to others (important for HTTP client tests).
"""
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import fleetfusion.models  # noqa – registers all SQLAlchemy models with Base.metadata
from fleetfusion.core.database import Base, get_db
from fleetfusion.core.security import create_access_token
from fleetfusion.main import app
from fleetfusion.models.driver import Driver
from fleetfusion.models.organization import Organization
from fleetfusion.models.user import User
from fleetfusion.models.vehicle import Vehicle

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ── Shared engine (function-scoped: fresh DB per test) ───────────────────────

@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,          # single shared connection → all sessions see same data
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncSession:
    """Async DB session for direct data inspection inside tests."""
    async with session_factory() as session:
        yield session


# ── HTTP client fixture ───────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client(session_factory) -> AsyncClient:
    """
    FastAPI test client with get_db overridden to use the test engine.
    Each request gets its own session but shares the same underlying
    connection via StaticPool.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# ── Organization + user fixtures ──────────────────────────────────────────────

async def make_organization(db, name: str = "Test Freight", timezone: str = "America/Denver") -> Organization:
    org = Organization(
        external_id=f"org_{uuid.uuid4().hex[:12]}",
        name=name,
        slug=f"test-{uuid.uuid4().hex[:8]}",
        timezone=timezone,
        subscription_status="active",
        is_active=True,
    )
    db.add(org)
    await db.commit()
    await db.refresh(org)
    return org


async def make_user(db, organization: Organization, role: str, email: str | None = None) -> User:
    u = User(
        external_id=f"user_{uuid.uuid4().hex[:12]}",
        organization_id=organization.id,
        email=email or f"{role}-{uuid.uuid4().hex[:6]}@test.dev",
        first_name=role.capitalize(),
        last_name="Tester",
        role=role,
        is_active=True,
        onboarding_complete=True,
    )
    db.add(u)
    await db.commit()
    await db.refresh(u)
    return u


async def make_driver(db, organization: Organization, user: User | None = None, **kwargs) -> Driver:
    d = Driver(
        organization_id=organization.id,
        user_id=user.id if user else None,
        first_name=kwargs.pop("first_name", "Mike"),
        last_name=kwargs.pop("last_name", "Carter"),
        employee_id=kwargs.pop("employee_id", f"D-{uuid.uuid4().hex[:6]}"),
        **kwargs,
    )
    db.add(d)
    await db.commit()
    await db.refresh(d)
    return d


async def make_vehicle(db, organization: Organization, **kwargs) -> Vehicle:
    v = Vehicle(
        organization_id=organization.id,
        unit_number=kwargs.pop("unit_number", f"T-{uuid.uuid4().hex[:4]}"),
        **kwargs,
    )
    db.add(v)
    await db.commit()
    await db.refresh(v)
    return v


def token_for(user: User) -> str:
    return create_access_token(user.id, user.organization_id, user.role)


@pytest_asyncio.fixture
async def organization(db) -> Organization:
    return await make_organization(db)


@pytest_asyncio.fixture
async def other_organization(db) -> Organization:
    return await make_organization(db, name="Other Haulage")


@pytest_asyncio.fixture
async def admin_user(db, organization) -> User:
    return await make_user(db, organization, "admin", email="admin@test.dev")


@pytest_asyncio.fixture
async def dispatcher_user(db, organization) -> User:
    return await make_user(db, organization, "dispatcher", email="dispatch@test.dev")


@pytest_asyncio.fixture
async def compliance_user(db, organization) -> User:
    return await make_user(db, organization, "compliance", email="compliance@test.dev")


@pytest_asyncio.fixture
async def viewer_user(db, organization) -> User:
    return await make_user(db, organization, "viewer", email="viewer@test.dev")


@pytest_asyncio.fixture
async def driver_user(db, organization) -> User:
    return await make_user(db, organization, "driver", email="driver@test.dev")


@pytest_asyncio.fixture
async def driver(db, organization, driver_user) -> Driver:
    """Driver record linked to ``driver_user``."""
    return await make_driver(db, organization, driver_user, employee_id="D-001")


@pytest_asyncio.fixture
async def other_driver(db, organization) -> Driver:
    """Driver in the same organization without a login."""
    return await make_driver(db, organization, first_name="Ana", last_name="Silva", employee_id="D-002")


@pytest_asyncio.fixture
async def foreign_driver(db, other_organization) -> Driver:
    """Driver belonging to another organization."""
    return await make_driver(db, other_organization, first_name="Otto", last_name="Fremd", employee_id="D-001")


@pytest.fixture
def admin_token(admin_user) -> str:
    return token_for(admin_user)


@pytest.fixture
def dispatcher_token(dispatcher_user) -> str:
    return token_for(dispatcher_user)


@pytest.fixture
def compliance_token(compliance_user) -> str:
    return token_for(compliance_user)


@pytest.fixture
def viewer_token(viewer_user) -> str:
    return token_for(viewer_user)


@pytest.fixture
def driver_token(driver_user) -> str:
    return token_for(driver_user)


# ── Helper ────────────────────────────────────────────────────────────────────

def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
