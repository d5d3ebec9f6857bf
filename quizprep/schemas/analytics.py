# ============================================================================
# Analytics Schemas
# ============================================================================
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

class OverallStats(BaseModel):
    total_questions_attempted: int
    total_correct_answers: int
    accuracy: int
    current_streak: int
    longest_streak: int
    last_active_at: Optional[datetime] = None

class TopicStats(BaseModel):
    topic_id: UUID
    topic_name: Optional[str] = None
    total_attempted: int
    total_correct: int
    total_wrong: int
    total_skipped: int
    accuracy_percent: float
    strength_level: str
    last_practiced_at: Optional[datetime] = None
    message: Optional[str] = None

class Recommendation(BaseModel):
    topic_id: UUID
    topic_name: Optional[str] = None
    reason: str
    action: str

class UserAnalyticsResponse(BaseModel):
    overall: OverallStats
    topic_wise: List[TopicStats]
    weak_topics: List[TopicStats]
    strong_topics: List[TopicStats]
    recommendations: List[Recommendation]
