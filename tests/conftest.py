
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from orderdesk.models import Base
from orderdesk.services.auth import ActorContext



@pytest_asyncio.fixture
async def factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(factory):
    async with factory() as session:
        yield session


@pytest.fixture
def tech():
    return ActorContext(technician_id="01TECHALICE0000000000000AA", role="tech")


@pytest.fixture
def other_tech():
    return ActorContext(technician_id="01TECHBOB000000000000000BB", role="tech")


@pytest.fixture
def admin():
    return ActorContext(technician_id="01ADMIN0000000000000000000", role="admin")
