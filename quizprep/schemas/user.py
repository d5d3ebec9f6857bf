# ============================================================================
# User Schemas
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from quizprep.models.user import UserType

class GuestUserRequest(BaseModel):
    device_id: str = Field(..., min_length=1, max_length=200)
    display_name: Optional[str] = Field(None, max_length=100)

class UserCreateRequest(BaseModel):
    user_type: UserType = UserType.GUEST
    display_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)
    device_id: Optional[str] = Field(None, min_length=1, max_length=200)

class UserUpdateRequest(BaseModel):
    """Profile fields only; omitted fields stay unchanged"""
    user_type: Optional[UserType] = None
    display_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)
    device_id: Optional[str] = Field(None, min_length=1, max_length=200)

class UserResponse(BaseModel):
    id: UUID
    user_type: UserType
    display_name: Optional[str]
    avatar_url: Optional[str] = None
    total_questions_attempted: int
    total_correct_answers: int
    current_streak: int
    longest_streak: int
    last_active_at: Optional[datetime]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
