"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- In-memory async database engine and sessions
- Church / member / event factories
- An HTTP client bound to the same database
- A private realtime broker
"""

import os

# Set test environment variables before importing app modules
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
os.environ['AUTO_CREATE_TABLES'] = 'false'
os.environ['PUBLIC_BASE_URL'] = 'https://igreja.example.com'

from datetime import date, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventscale.core.database import Base, get_db
from eventscale.main import app
from eventscale.models import Church, Member
from eventscale.services.db_service import DBService
from eventscale.services.realtime import EventBroker


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_async_engine(
        'sqlite+aiosqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    # This must be set for each connection
    def _fk_pragma_on_connect(dbapi_con, con_record):
        cursor = dbapi_con.cursor()
        cursor.execute('pragma foreign_keys=ON')
        cursor.close()

    event.listen(engine.sync_engine, 'connect', _fk_pragma_on_connect)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def db_service(test_db_session):
    return DBService(test_db_session)


@pytest.fixture
def broker():
    """A broker private to the test, so published messages can be inspected."""
    return EventBroker(queue_size=10)


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest_asyncio.fixture
async def church(test_db_session):
    church = Church(name='Igreja Central')
    test_db_session.add(church)
    await test_db_session.commit()
    return church


@pytest_asyncio.fixture
async def other_church(test_db_session):
    church = Church(name='Igreja Vizinha')
    test_db_session.add(church)
    await test_db_session.commit()
    return church


@pytest.fixture
def make_member(test_db_session, church):
    """Factory for creating directory members."""
    async def _create(name='Ana Souza', phone='91993837093', church_id=None):
        member = Member(church_id=church_id or church.id, name=name, phone=phone)
        test_db_session.add(member)
        await test_db_session.commit()
        return member
    return _create


@pytest_asyncio.fixture
async def member(make_member):
    return await make_member()


@pytest.fixture
def make_event(db_service, church):
    """Factory for creating events through the store."""
    async def _create(church_id=None, **overrides):
        data = {
            'title': 'Sunday Service',
            'type': 'service',
            'date': date(2024, 5, 12),
            'time': time(19, 0),
            'location': 'Main Temple',
        }
        data.update(overrides)
        return await db_service.create_event(data, church_id or church.id)
    return _create


@pytest_asyncio.fixture
async def sunday_service(make_event):
    return await make_event()


# ============================================================================
# HTTP Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client whose requests use the test database."""
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def operator_headers(church):
    return {'X-Church-Id': str(church.id), 'X-User-Role': 'pastor'}


@pytest.fixture
def member_headers(church):
    return {'X-Church-Id': str(church.id), 'X-User-Role': 'membro'}
