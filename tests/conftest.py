from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lesson_market.db import Base, get_db
from lesson_market.main import app
from lesson_market.models import Instructor, Lesson, LessonSlot

# SQLite in-memory for simplicity, one connection shared by the whole test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on a fresh in-memory database."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing endpoints."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def instructor_factory(db_session: AsyncSession):
    async def create(name: str = "Test Instructor", average_rating: float = 4.0, **kwargs) -> Instructor:
        instructor = Instructor(name=name, average_rating=average_rating, **kwargs)
        db_session.add(instructor)
        await db_session.flush()
        return instructor

    return create


@pytest.fixture
def lesson_factory(db_session: AsyncSession, instructor_factory):
    """Create a lesson with one slot per start datetime (aware, UTC)."""

    async def create(starts: list[datetime] | None = None, instructor: Instructor | None = None, **kwargs) -> Lesson:
        instructor = instructor or await instructor_factory()
        fields = {
            "title": "Piano for beginners",
            "category": "music",
            "location_type": "online",
            "lesson_type": "one_time",
            "price": 3000,
            "capacity": 5,
            "status": "published",
        }
        fields.update(kwargs)
        lesson = Lesson(instructor_id=instructor.id, **fields)
        lesson.slots = [
            LessonSlot(
                date_time_start=start,
                date_time_end=start + timedelta(minutes=60),
                booking_deadline=start - timedelta(days=1),
                capacity=fields["capacity"],
                price=fields["price"],
                status="published",
            )
            for start in (starts or [])
        ]
        db_session.add(lesson)
        await db_session.flush()
        return lesson

    return create
