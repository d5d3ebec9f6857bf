# ============================================================================
# User Performance Analytics
# ============================================================================
from typing import Any, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from uuid import UUID

from quizprep.core.exceptions import NotFound
from quizprep.models.analytics import TopicAnalytics
from quizprep.models.curriculum import Topic
from quizprep.models.user import User

MAX_RECOMMENDATIONS = 3

class UserAnalytics:
    """Read-side analytics built from the user aggregate and topic stats"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_analytics(self, user_id: UUID) -> Dict[str, Any]:
        """Overall stats, per-topic stats, weak/strong split and recommendations"""
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFound("User", user_id)

        topic_wise = await self._get_topic_stats(user_id)
        weak_topics = [t for t in topic_wise if t["strength_level"] == "weak"]
        strong_topics = [t for t in topic_wise if t["strength_level"] == "strong"]

        return {
            "overall": self._get_overview(user),
            "topic_wise": topic_wise,
            "weak_topics": weak_topics,
            "strong_topics": strong_topics,
            "recommendations": [
                {
                    "topic_id": t["topic_id"],
                    "topic_name": t["topic_name"],
                    "reason": f"Accuracy is {round(t['accuracy_percent'] or 0)}%",
                    "action": "Practice more questions in this topic",
                }
                for t in weak_topics[:MAX_RECOMMENDATIONS]
            ],
        }

    async def get_topic_analytics(self, user_id: UUID, topic_id: UUID) -> Dict[str, Any]:
        """One topic's stats, or a neutral placeholder before any practice"""
        result = await self.db.execute(
            select(TopicAnalytics, Topic.name)
            .outerjoin(Topic, Topic.id == TopicAnalytics.topic_id)
            .where(TopicAnalytics.user_id == user_id)
            .where(TopicAnalytics.topic_id == topic_id)
        )
        row = result.first()
        if row is None:
            return {
                "topic_id": topic_id,
                "topic_name": None,
                "total_attempted": 0,
                "total_correct": 0,
                "total_wrong": 0,
                "total_skipped": 0,
                "accuracy_percent": 0.0,
                "strength_level": "neutral",
                "last_practiced_at": None,
                "message": "No practice data for this topic yet",
            }
        record, topic_name = row
        return self._serialize(record, topic_name)

    def _get_overview(self, user: User) -> Dict[str, Any]:
        attempted = user.total_questions_attempted or 0
        correct = user.total_correct_answers or 0
        return {
            "total_questions_attempted": attempted,
            "total_correct_answers": correct,
            "accuracy": round(correct / attempted * 100) if attempted > 0 else 0,
            "current_streak": user.current_streak or 0,
            "longest_streak": user.longest_streak or 0,
            "last_active_at": user.last_active_at,
        }

    async def _get_topic_stats(self, user_id: UUID) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(TopicAnalytics, Topic.name)
            .outerjoin(Topic, Topic.id == TopicAnalytics.topic_id)
            .where(TopicAnalytics.user_id == user_id)
            .order_by(TopicAnalytics.last_practiced_at.desc())
        )
        return [self._serialize(record, topic_name) for record, topic_name in result.all()]

    def _serialize(self, record: TopicAnalytics, topic_name) -> Dict[str, Any]:
        return {
            "topic_id": record.topic_id,
            "topic_name": topic_name,
            "total_attempted": record.total_attempted,
            "total_correct": record.total_correct,
            "total_wrong": record.total_wrong,
            "total_skipped": record.total_skipped,
            "accuracy_percent": round(record.accuracy_percent or 0, 2),
            "strength_level": record.strength_level,
            "last_practiced_at": record.last_practiced_at,
        }
