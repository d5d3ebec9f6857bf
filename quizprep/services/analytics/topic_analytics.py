# ============================================================================
# Topic Analytics Aggregator
# ============================================================================
"""
Incrementally merges completed-session outcomes into the cumulative
per-user, per-topic statistics.

Each merge reads the (user, topic) row under a row lock, adds the delta and
recomputes accuracy and strength from the new cumulative totals, so two
finalizations on the same topic can never lose an update.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from uuid import UUID
import logging

from quizprep.config import get_settings
from quizprep.models.analytics import TopicAnalytics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopicDelta:
    """Per-topic outcome of one completed session"""
    total_attempted: int = 0
    total_correct: int = 0
    total_wrong: int = 0
    total_skipped: int = 0


def accuracy_percent(correct: int, attempted: int) -> float:
    if not attempted:
        return 0.0
    return (correct / attempted) * 100


def classify_strength(accuracy: float) -> str:
    settings = get_settings()
    if accuracy >= settings.STRONG_ACCURACY_THRESHOLD:
        return "strong"
    if accuracy >= settings.NEUTRAL_ACCURACY_THRESHOLD:
        return "neutral"
    return "weak"


class TopicAnalyticsAggregator:
    """Serialized read-merge-write of topic analytics rows"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def merge(self, user_id: UUID, topic_id: UUID, delta: TopicDelta) -> TopicAnalytics:
        """
        Add ``delta`` onto the user's cumulative stats for a topic.

        Must run inside the caller's transaction; the row lock is held until
        that transaction ends.
        """
        record = await self._locked_record(user_id, topic_id)
        if record is None:
            record = await self._create_record(user_id, topic_id)

        record.total_attempted = (record.total_attempted or 0) + delta.total_attempted
        record.total_correct = (record.total_correct or 0) + delta.total_correct
        record.total_wrong = (record.total_wrong or 0) + delta.total_wrong
        record.total_skipped = (record.total_skipped or 0) + delta.total_skipped

        record.accuracy_percent = accuracy_percent(record.total_correct, record.total_attempted)
        record.strength_level = classify_strength(record.accuracy_percent)

        now = datetime.now(timezone.utc)
        record.last_practiced_at = now
        record.updated_at = now

        await self.db.flush()
        return record

    async def get(self, user_id: UUID, topic_id: UUID) -> Optional[TopicAnalytics]:
        result = await self.db.execute(
            select(TopicAnalytics)
            .where(TopicAnalytics.user_id == user_id)
            .where(TopicAnalytics.topic_id == topic_id)
        )
        return result.scalar_one_or_none()

    async def _locked_record(self, user_id: UUID, topic_id: UUID) -> Optional[TopicAnalytics]:
        result = await self.db.execute(
            select(TopicAnalytics)
            .where(TopicAnalytics.user_id == user_id)
            .where(TopicAnalytics.topic_id == topic_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _create_record(self, user_id: UUID, topic_id: UUID) -> TopicAnalytics:
        record = TopicAnalytics(
            user_id=user_id,
            topic_id=topic_id,
            total_attempted=0,
            total_correct=0,
            total_wrong=0,
            total_skipped=0,
            accuracy_percent=0.0,
            strength_level="neutral",
        )
        try:
            async with self.db.begin_nested():
                self.db.add(record)
            return record
        except IntegrityError:
            # Another finalization created the row first; merge into theirs
            logger.info(f"Topic analytics for {user_id}/{topic_id} created concurrently, re-reading")
            existing = await self._locked_record(user_id, topic_id)
            if existing is None:
                raise
            return existing
