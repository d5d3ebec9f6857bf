# ============================================================================
# Analytics Models
# ============================================================================
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy import Float, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from quizprep.core.database import Base

class TopicAnalytics(Base):
    __tablename__ = "topic_analytics"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    topic_id = Column(UUID(as_uuid=True), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)

    # Cumulative across completed sessions
    total_attempted = Column(Integer, nullable=False, default=0)
    total_correct = Column(Integer, nullable=False, default=0)
    total_wrong = Column(Integer, nullable=False, default=0)
    total_skipped = Column(Integer, nullable=False, default=0)

    accuracy_percent = Column(Float, default=0)  # 0-100
    strength_level = Column(String(10), default="neutral")  # weak, neutral, strong

    last_practiced_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="topic_analytics")
    topic = relationship("Topic")

    __table_args__ = (
        UniqueConstraint('user_id', 'topic_id', name='unique_user_topic'),
    )

    def __repr__(self):
        return f"<TopicAnalytics {self.topic_id} {self.accuracy_percent}% ({self.strength_level})>"
