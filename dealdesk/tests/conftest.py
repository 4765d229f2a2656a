"""Async test fixtures for DealDesk tests using SQLite."""

from __future__ import annotations

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.database import build_engine, build_session_factory, get_db
from dealdesk.models.base import Base
from dealdesk.models.profile import Profile
from dealdesk.schemas.forms import CompanyForm
from dealdesk.services import company_svc


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest_asyncio.fixture
async def engine():
    eng = build_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def profile(db: AsyncSession):
    row = Profile(
        id=uuid.uuid4(),
        name="Dana Seller",
        email="dana@example.com",
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


@pytest_asyncio.fixture
async def company(db: AsyncSession):
    return await company_svc.create_company(
        db, CompanyForm(name="Acme", industry="Technology")
    )


@pytest_asyncio.fixture
async def client(engine):
    """HTTPX async test client against the DealDesk app."""
    from dealdesk.app import app

    session_factory = build_session_factory(engine)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
