# ============================================================================
# Question Source
# ============================================================================
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from uuid import UUID
import random

from quizprep.models.curriculum import Question, Topic, TestSeries, TestSeriesQuestion

class QuestionSource:
    """Read access to the question catalog plus per-question attempt stats"""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng or random.Random()

    async def get_question(self, question_id: UUID) -> Optional[Question]:
        return await self.db.get(Question, question_id)

    async def get_topic(self, topic_id: UUID) -> Optional[Topic]:
        return await self.db.get(Topic, topic_id)

    async def get_questions_by_topic(self, topic_id: UUID, limit: int) -> List[Question]:
        """Random subset of the topic's active questions, at most ``limit``"""
        result = await self.db.execute(
            select(Question)
            .where(Question.topic_id == topic_id)
            .where(Question.is_active == True)
            .order_by(Question.id)
        )
        questions = list(result.scalars().all())

        # Ordered by id first so a seeded generator always picks the same set
        return self.rng.sample(questions, min(limit, len(questions)))

    async def get_test_series_by_id(self, test_series_id: UUID) -> Optional[TestSeries]:
        return await self.db.get(TestSeries, test_series_id)

    async def get_test_series_questions(self, test_series_id: UUID) -> List[Question]:
        """All questions of a test series in their fixed order"""
        result = await self.db.execute(
            select(Question)
            .join(TestSeriesQuestion, TestSeriesQuestion.question_id == Question.id)
            .where(TestSeriesQuestion.test_series_id == test_series_id)
            .order_by(TestSeriesQuestion.question_order)
        )
        return list(result.scalars().all())

    async def increment_question_stats(self, question_id: UUID, was_correct: bool) -> None:
        values = {"total_attempts": Question.total_attempts + 1}
        if was_correct:
            values["correct_attempts"] = Question.correct_attempts + 1

        await self.db.execute(
            update(Question)
            .where(Question.id == question_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
