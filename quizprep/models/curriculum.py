# ============================================================================
# Curriculum Models
# ============================================================================
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy import Text, JSON, Float
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from quizprep.core.database import Base

class Subject(Base):
    __tablename__ = "subjects"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text)
    icon_name = Column(String(50))
    color_hex = Column(String(7))
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    topics = relationship("Topic", back_populates="subject", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Subject {self.name}>"

class Topic(Base):
    __tablename__ = "topics"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    subject = relationship("Subject", back_populates="topics")
    questions = relationship("Question", back_populates="topic")

    def __repr__(self):
        return f"<Topic {self.name}>"

class Question(Base):
    __tablename__ = "questions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    topic_id = Column(UUID(as_uuid=True), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)

    question_text = Column(Text, nullable=False)
    question_type = Column(String(30), nullable=False, default="mcq")  # mcq, multi_select, numerical
    options = Column(JSON, nullable=True)  # For MCQ: ["option1", "option2", ...]
    correct_answer = Column(Text, nullable=False)
    explanation = Column(Text)
    difficulty = Column(String(20), nullable=False, default="medium")  # easy, medium, hard

    # Source information
    year = Column(Integer)
    exam_name = Column(String(100))

    # Scoring
    marks = Column(Integer, nullable=False, default=1)
    negative_marks = Column(Float, default=0)
    time_recommended_seconds = Column(Integer, default=60)
    image_url = Column(String(500))

    # Statistics
    total_attempts = Column(Integer, nullable=False, default=0)
    correct_attempts = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    topic = relationship("Topic", back_populates="questions")

    @property
    def success_rate(self) -> float:
        if not self.total_attempts:
            return 0.0
        return (self.correct_attempts / self.total_attempts) * 100

    def __repr__(self):
        return f"<Question {self.id} ({self.difficulty})>"

class TestSeries(Base):
    __tablename__ = "test_series"
    __test__ = False  # keep pytest from collecting the model

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)

    total_questions = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    total_marks = Column(Integer, nullable=False)
    passing_marks = Column(Integer)
    difficulty = Column(String(20), default="medium")

    is_free = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    starts_at = Column(DateTime(timezone=True))
    ends_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    entries = relationship(
        "TestSeriesQuestion",
        back_populates="test_series",
        cascade="all, delete-orphan",
        order_by="TestSeriesQuestion.question_order"
    )

    def __repr__(self):
        return f"<TestSeries {self.title}>"

class TestSeriesQuestion(Base):
    __tablename__ = "test_series_questions"
    __test__ = False

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_series_id = Column(UUID(as_uuid=True), ForeignKey("test_series.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(UUID(as_uuid=True), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    question_order = Column(Integer, nullable=False)

    test_series = relationship("TestSeries", back_populates="entries")
    question = relationship("Question")
