# ============================================================================
# Database Connection
# ============================================================================
import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from quizprep.config import get_settings
from quizprep.core.exceptions import QuizPrepException, TransientError, InternalError

settings = get_settings()
logger = logging.getLogger(__name__)

# Define Base FIRST (very important)
class Base(DeclarativeBase):
    pass

# Convert postgresql:// to postgresql+asyncpg://
database_url = settings.DATABASE_URL
if database_url.startswith("postgresql://"):
    database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

logger.info(f"Connecting to database: {database_url.split('@')[1] if '@' in database_url else database_url}")

engine_kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}
if database_url.startswith("postgresql+asyncpg://"):
    engine_kwargs.update(
        pool_size=5,
        max_overflow=10,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        connect_args={"command_timeout": settings.DB_COMMAND_TIMEOUT_SECONDS},
    )

engine = create_async_engine(database_url, **engine_kwargs)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

async def get_db():
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def is_transient(exc: BaseException) -> bool:
    """Whether a storage failure is worth retrying as a whole call"""
    if isinstance(exc, (OperationalError, PoolTimeoutError, asyncio.TimeoutError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@asynccontextmanager
async def unit_of_work(db: AsyncSession):
    """
    Run a block as one transaction on ``db``.

    Commits on success and rolls back on any failure so no half-applied
    update survives. Domain errors propagate unchanged; storage failures are
    translated into ``TransientError`` or ``InternalError``.
    """
    try:
        yield db
        await db.commit()
    except QuizPrepException:
        await db.rollback()
        raise
    except (SQLAlchemyError, asyncio.TimeoutError) as e:
        await db.rollback()
        if is_transient(e):
            logger.warning(f"Transient storage failure: {e}")
            raise TransientError() from e
        logger.error(f"Storage failure: {e}")
        raise InternalError() from e
