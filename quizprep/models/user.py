# ============================================================================
# User Models
# ============================================================================
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy import Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum
from quizprep.core.database import Base

class UserType(str, enum.Enum):
    GUEST = "guest"
    REGISTERED = "registered"

class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_type = Column(Enum(UserType), nullable=False, default=UserType.GUEST)
    display_name = Column(String(100))
    avatar_url = Column(String(500))
    device_id = Column(String(200), unique=True, nullable=True, index=True)

    # Aggregate stats, mutated only when a session is finalized
    total_questions_attempted = Column(Integer, nullable=False, default=0)
    total_correct_answers = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_active_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    sessions = relationship("PracticeSession", back_populates="user", cascade="all, delete-orphan")
    topic_analytics = relationship("TopicAnalytics", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.id} ({self.user_type.value if self.user_type else 'guest'})>"
