# ============================================================================
# Practice Schemas
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from enum import Enum

class QuestionTypeEnum(str, Enum):
    MCQ = "mcq"
    MULTI_SELECT = "multi_select"
    NUMERICAL = "numerical"

class DifficultyEnum(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class SessionTypeEnum(str, Enum):
    PRACTICE = "practice"
    MOCK = "mock"
    PYQ = "pyq"

# ==================== Requests ====================

class StartSessionRequest(BaseModel):
    # Presence and exclusivity of the ids are checked by the session manager
    user_id: Optional[UUID] = None
    topic_id: Optional[UUID] = None
    test_series_id: Optional[UUID] = None
    session_type: SessionTypeEnum = SessionTypeEnum.PRACTICE
    question_count: Optional[int] = Field(None, ge=1, le=200)

class SubmitAnswerRequest(BaseModel):
    question_id: UUID
    user_id: Optional[UUID] = None
    selected_answer: Optional[str] = None  # absent or "" means skipped
    time_taken_seconds: int = Field(0, ge=0)

class FinalizeSessionRequest(BaseModel):
    auto_submit: bool = False
    time_taken_seconds: Optional[int] = Field(None, ge=0)

# ==================== Responses ====================

class SessionQuestionResponse(BaseModel):
    """Client-visible question; never carries the answer or explanation"""
    id: UUID
    question_text: str
    question_type: str
    options: Optional[List[str]] = None
    difficulty: str
    marks: int
    negative_marks: float = 0
    time_recommended_seconds: Optional[int] = None
    image_url: Optional[str] = None

    class Config:
        from_attributes = True

class SessionResponse(BaseModel):
    id: UUID
    user_id: UUID
    topic_id: Optional[UUID]
    test_series_id: Optional[UUID]
    session_type: str
    status: str
    total_questions: int
    questions_attempted: int
    correct_answers: int
    wrong_answers: int
    skipped_questions: int
    total_marks: float
    marks_obtained: float
    time_taken_seconds: int
    is_completed: bool
    auto_submitted: bool
    started_at: Optional[datetime]
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True

class StartSessionResponse(BaseModel):
    session: SessionResponse
    questions: List[SessionQuestionResponse]

class AnswerResponse(BaseModel):
    id: UUID
    session_id: UUID
    question_id: UUID
    user_id: UUID
    selected_answer: Optional[str]
    is_correct: Optional[bool]
    is_skipped: bool
    time_taken_seconds: int
    marks_awarded: float
    revision: int
    answered_at: Optional[datetime]

    class Config:
        from_attributes = True

class SubmitAnswerResponse(BaseModel):
    answer: AnswerResponse
    is_correct: Optional[bool]  # None when skipped
    is_skipped: bool
    marks_awarded: float
    correct_answer: str  # Only revealed once the answer is recorded
    explanation: Optional[str]
    session: SessionResponse

class SessionSummary(BaseModel):
    total_questions: int
    attempted: int
    correct: int
    wrong: int
    skipped: int
    marks_obtained: float
    total_marks: float
    percentage: int
    auto_submitted: bool
    time_taken_seconds: int

class FinalizeSessionResponse(BaseModel):
    session: SessionResponse
    summary: SessionSummary
