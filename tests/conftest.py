# ============================================================================
# Test Configuration & Fixtures
# ============================================================================
import pytest
import random
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from unittest.mock import AsyncMock, MagicMock

from quizprep.main import app
from quizprep.core.database import Base, get_db
from quizprep.api.deps import get_cache, get_question_rng
from quizprep.models.user import User, UserType
from quizprep.models.curriculum import Subject, Topic, Question, TestSeries, TestSeriesQuestion

@pytest.fixture
async def test_engine(tmp_path):
    """SQLite engine on a per-test database file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )

    # Let SQLAlchemy own BEGIN so SAVEPOINTs behave under pysqlite
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_maker() as session:
        yield session

@pytest.fixture
def mock_cache():
    """Mock analytics cache that always misses"""
    cache = MagicMock()
    cache.get_json = AsyncMock(return_value=None)
    cache.set_json = AsyncMock()
    cache.delete = AsyncMock()
    return cache

@pytest.fixture
async def client(db_session: AsyncSession, mock_cache) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden database, cache and randomness"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: mock_cache
    app.dependency_overrides[get_question_rng] = lambda: random.Random(42)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    """Guest user with empty aggregate stats"""
    user = User(
        user_type=UserType.GUEST,
        device_id="device-123",
        display_name="Guest User",
        total_questions_attempted=0,
        total_correct_answers=0,
        current_streak=0,
        longest_streak=0,
    )
    db_session.add(user)
    await db_session.commit()
    return user

@pytest.fixture
def make_topic(db_session: AsyncSession):
    """Factory: a topic with ``count`` questions whose answers are Q0, Q1, ..."""
    async def _make_topic(count: int = 3, marks: int = 1, negative_marks: float = 0, name: str = "Kinematics"):
        subject = Subject(name=f"Physics {name}", display_order=0)
        db_session.add(subject)
        await db_session.flush()

        topic = Topic(subject_id=subject.id, name=name, display_order=0)
        db_session.add(topic)
        await db_session.flush()

        questions = []
        for i in range(count):
            question = Question(
                topic_id=topic.id,
                question_text=f"Question {i}?",
                question_type="mcq",
                options=[f"Q{i}", "wrong", "other", "none"],
                correct_answer=f"Q{i}",
                explanation=f"Because Q{i}",
                difficulty="easy",
                marks=marks,
                negative_marks=negative_marks,
                time_recommended_seconds=60,
            )
            db_session.add(question)
            questions.append(question)
        await db_session.commit()
        return topic, questions
    return _make_topic

@pytest.fixture
def make_test_series(db_session: AsyncSession):
    """Factory: a test series over the given questions, in the given order"""
    async def _make_test_series(questions, total_marks: int = 10):
        series = TestSeries(
            title="Mock Test 1",
            total_questions=len(questions),
            duration_minutes=30,
            total_marks=total_marks,
        )
        db_session.add(series)
        await db_session.flush()
        for order, question in enumerate(questions, start=1):
            db_session.add(TestSeriesQuestion(
                test_series_id=series.id,
                question_id=question.id,
                question_order=order,
            ))
        await db_session.commit()
        return series
    return _make_test_series
