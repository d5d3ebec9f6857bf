# ============================================================================
# Catalog Schemas
# ============================================================================
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID

class SubjectResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    icon_name: Optional[str]
    color_hex: Optional[str]
    display_order: int

    class Config:
        from_attributes = True

class TopicResponse(BaseModel):
    id: UUID
    subject_id: UUID
    name: str
    description: Optional[str]
    display_order: int

    class Config:
        from_attributes = True

class TestSeriesResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str]
    subject_id: Optional[UUID]
    total_questions: int
    duration_minutes: int
    total_marks: int
    passing_marks: Optional[int]
    difficulty: Optional[str]
    is_free: bool
    starts_at: Optional[datetime]
    ends_at: Optional[datetime]

    class Config:
        from_attributes = True
