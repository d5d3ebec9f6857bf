# ============================================================================
# User Endpoints
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from typing import List, Optional
from uuid import UUID
import logging

from quizprep.api.deps import get_session_manager
from quizprep.core.database import get_db, unit_of_work
from quizprep.core.exceptions import InvalidRequest, NotFound
from quizprep.models.user import User, UserType
from quizprep.schemas.practice import SessionResponse
from quizprep.schemas.responses import ERROR_RESPONSES
from quizprep.schemas.user import GuestUserRequest, UserCreateRequest, UserUpdateRequest, UserResponse
from quizprep.services.practice.session_manager import SessionLifecycleManager

router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES)
logger = logging.getLogger(__name__)

async def _get_by_device(db: AsyncSession, device_id: str) -> Optional[User]:
    result = await db.execute(
        select(User)
        .where(User.device_id == device_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def _save_user(db: AsyncSession, user: User, changes: Optional[dict] = None) -> bool:
    """Flush ``user`` (with ``changes`` applied) in a savepoint; False when its device_id is taken"""
    try:
        async with db.begin_nested():
            db.add(user)
            for field, value in (changes or {}).items():
                setattr(user, field, value)
        return True
    except IntegrityError:
        return False

@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    request: UserCreateRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create a guest or registered user"""
    async with unit_of_work(db):
        user = User(
            **request.model_dump(),
            total_questions_attempted=0,
            total_correct_answers=0,
            current_streak=0,
            longest_streak=0
        )
        if not await _save_user(db, user):
            raise InvalidRequest(f"device_id already registered: {request.device_id}")
        logger.info(f"Created {user.user_type.value} user {user.id}")
    await db.refresh(user)
    return user

@router.post("/guest", response_model=UserResponse)
async def get_or_create_guest(
    request: GuestUserRequest,
    db: AsyncSession = Depends(get_db)
):
    """Get the guest user bound to a device, creating it on first use"""
    async with unit_of_work(db):
        user = await _get_by_device(db, request.device_id)
        if not user:
            user = User(
                user_type=UserType.GUEST,
                device_id=request.device_id,
                display_name=request.display_name or "Guest User",
                total_questions_attempted=0,
                total_correct_answers=0,
                current_streak=0,
                longest_streak=0
            )
            if await _save_user(db, user):
                logger.info(f"Created guest user {user.id}")
            else:
                # A concurrent first launch on the same device won the insert
                user = await _get_by_device(db, request.device_id)
                if user is None:
                    raise InvalidRequest(f"Could not register device: {request.device_id}")
    await db.refresh(user)
    return user

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User", user_id)
    return user

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    updates: UserUpdateRequest,
    db: AsyncSession = Depends(get_db)
):
    """Update profile fields; aggregate stats only change on finalize"""
    async with unit_of_work(db):
        user = await db.get(User, user_id)
        if not user:
            raise NotFound("User", user_id)

        update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
        if not await _save_user(db, user, update_data):
            raise InvalidRequest(f"device_id already registered: {updates.device_id}")
    await db.refresh(user)
    return user

@router.get("/{user_id}/sessions", response_model=List[SessionResponse])
async def get_session_history(
    user_id: UUID,
    limit: int = 20,
    manager: SessionLifecycleManager = Depends(get_session_manager)
):
    """Get practice session history, newest first"""
    return await manager.list_user_sessions(user_id, limit=min(max(limit, 1), 100))
