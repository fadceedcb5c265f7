import pytest
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from app.core.base import Base
from app.core.database import get_db
from app.models.student import Student
from app.services.record_store import RecordStore

# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def store(db_session: AsyncSession) -> RecordStore:
    return RecordStore(db_session)


@pytest.fixture
async def seeded_students(db_session: AsyncSession) -> list[Student]:
    """Three students from the intake sheet, committed so API calls see them."""
    students = [
        Student(
            student_id="S001", name="張三", phone="0912345678",
            source="FB", inquiry_date="2024/3/1", consultant="Amy",
        ),
        Student(
            student_id="S002", name="李四", phone="0923456789",
            source_flags={"Instagram": "TRUE"}, method_flags={"電話": "1"},
            inquiry_date="2024-03-15", consultant="Amy",
        ),
        Student(
            student_id="S003", name="王五", phone="0934567890",
            source="介紹", inquiry_date="20/4/2024", consultant="Ben",
        ),
    ]
    db_session.add_all(students)
    await db_session.commit()
    return students


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
