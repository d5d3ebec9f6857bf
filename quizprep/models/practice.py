# ============================================================================
# Practice Session Models
# ============================================================================
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy import Text, Float, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from quizprep.core.database import Base

class PracticeSession(Base):
    __tablename__ = "practice_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    test_series_id = Column(UUID(as_uuid=True), ForeignKey("test_series.id", ondelete="SET NULL"), nullable=True)
    topic_id = Column(UUID(as_uuid=True), ForeignKey("topics.id", ondelete="SET NULL"), nullable=True)

    session_type = Column(String(20), nullable=False, default="practice")  # practice, mock, pyq

    # Fixed at creation
    total_questions = Column(Integer, nullable=False, default=0)
    total_marks = Column(Float, default=0)

    # Running counters; questions_attempted == correct_answers + wrong_answers
    questions_attempted = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)
    wrong_answers = Column(Integer, nullable=False, default=0)
    skipped_questions = Column(Integer, nullable=False, default=0)
    marks_obtained = Column(Float, default=0)
    time_taken_seconds = Column(Integer, default=0)

    is_completed = Column(Boolean, nullable=False, default=False)
    auto_submitted = Column(Boolean, nullable=False, default=False)
    started_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True))

    user = relationship("User", back_populates="sessions")
    questions = relationship(
        "SessionQuestion",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionQuestion.position"
    )
    answers = relationship("UserAnswer", back_populates="session", cascade="all, delete-orphan")

    @property
    def status(self) -> str:
        if self.is_completed:
            return "completed"
        if (self.questions_attempted or 0) + (self.skipped_questions or 0) > 0:
            return "in_progress"
        return "created"

    def __repr__(self):
        return f"<PracticeSession {self.id} ({self.status})>"

class SessionQuestion(Base):
    """Grading snapshot of a question, taken when the session starts"""
    __tablename__ = "session_questions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(UUID(as_uuid=True), ForeignKey("practice_sessions.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(UUID(as_uuid=True), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    correct_answer = Column(Text, nullable=False)
    explanation = Column(Text)
    marks = Column(Integer, nullable=False, default=1)
    negative_marks = Column(Float, default=0)

    session = relationship("PracticeSession", back_populates="questions")

    __table_args__ = (
        UniqueConstraint('session_id', 'question_id', name='unique_session_question'),
    )

class UserAnswer(Base):
    __tablename__ = "user_answers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(UUID(as_uuid=True), ForeignKey("practice_sessions.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(UUID(as_uuid=True), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    selected_answer = Column(Text)  # NULL means skipped
    is_correct = Column(Boolean)  # NULL when skipped
    is_skipped = Column(Boolean, nullable=False, default=False)
    time_taken_seconds = Column(Integer, default=0)
    marks_awarded = Column(Float, default=0)
    revision = Column(Integer, nullable=False, default=0)  # times the answer was resubmitted

    answered_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("PracticeSession", back_populates="answers")

    __table_args__ = (
        UniqueConstraint('session_id', 'question_id', name='unique_session_answer'),
    )

    def __repr__(self):
        mark = "-" if self.is_skipped else ("✓" if self.is_correct else "✗")
        return f"<UserAnswer {self.id} ({mark})>"
