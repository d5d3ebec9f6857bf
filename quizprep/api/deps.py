# ============================================================================
# API Dependencies
# ============================================================================
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
import random

from quizprep.core.database import get_db
from quizprep.core.redis import cache, RedisCache
from quizprep.config import get_settings
from quizprep.services.practice.session_manager import SessionLifecycleManager
from quizprep.services.analytics.user_analytics import UserAnalytics

settings = get_settings()


def get_question_rng() -> random.Random:
    """
    Randomness used to pick topic questions.

    With QUESTION_RANDOM_SEED set every request draws the same selection,
    which makes sessions reproducible in tests and demos.
    """
    return random.Random(settings.QUESTION_RANDOM_SEED)


async def get_session_manager(
    db: AsyncSession = Depends(get_db),
    rng: random.Random = Depends(get_question_rng)
) -> SessionLifecycleManager:
    return SessionLifecycleManager(db, rng=rng)


async def get_user_analytics(db: AsyncSession = Depends(get_db)) -> UserAnalytics:
    return UserAnalytics(db)


def get_cache() -> RedisCache:
    return cache
