# ============================================================================
# Practice Session Endpoints
# ============================================================================
from fastapi import APIRouter, Depends
from typing import Optional, List
from uuid import UUID

from quizprep.api.deps import get_session_manager, get_cache
from quizprep.core.redis import RedisCache, analytics_cache_key
from quizprep.schemas.practice import (
    StartSessionRequest, StartSessionResponse, SubmitAnswerRequest, SubmitAnswerResponse,
    FinalizeSessionRequest, FinalizeSessionResponse, SessionResponse, AnswerResponse,
    SessionQuestionResponse
)
from quizprep.schemas.responses import ERROR_RESPONSES
from quizprep.services.practice.session_manager import SessionLifecycleManager

router = APIRouter(prefix="/sessions", tags=["sessions"], responses=ERROR_RESPONSES)

@router.post("/start", response_model=StartSessionResponse, status_code=201)
async def start_session(
    request: StartSessionRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager)
):
    """Start a practice session from a topic or a test series"""
    session, questions = await manager.start_session(
        user_id=request.user_id,
        topic_id=request.topic_id,
        test_series_id=request.test_series_id,
        session_type=request.session_type.value,
        question_count=request.question_count
    )
    return StartSessionResponse(
        session=SessionResponse.model_validate(session),
        questions=[SessionQuestionResponse.model_validate(q) for q in questions]
    )

@router.post("/{session_id}/answer", response_model=SubmitAnswerResponse)
async def submit_answer(
    session_id: UUID,
    request: SubmitAnswerRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager)
):
    """Submit (or resubmit) the answer for one question"""
    result = await manager.submit_answer(
        session_id=session_id,
        question_id=request.question_id,
        user_id=request.user_id,
        selected_answer=request.selected_answer,
        time_taken_seconds=request.time_taken_seconds
    )
    return SubmitAnswerResponse(
        answer=AnswerResponse.model_validate(result.answer),
        is_correct=result.grade.is_correct,
        is_skipped=result.grade.is_skipped,
        marks_awarded=result.grade.marks_awarded,
        correct_answer=result.correct_answer,
        explanation=result.explanation,
        session=SessionResponse.model_validate(result.session)
    )

@router.post("/{session_id}/submit", response_model=FinalizeSessionResponse)
async def finalize_session(
    session_id: UUID,
    request: Optional[FinalizeSessionRequest] = None,
    manager: SessionLifecycleManager = Depends(get_session_manager),
    cache: RedisCache = Depends(get_cache)
):
    """Finish a session, by the user or by the timer (auto_submit)"""
    request = request or FinalizeSessionRequest()
    session, summary = await manager.finalize_session(
        session_id=session_id,
        auto_submit=request.auto_submit,
        time_taken_seconds=request.time_taken_seconds
    )

    # Totals changed; drop the cached analytics document
    await cache.delete(analytics_cache_key(session.user_id))

    return {"session": SessionResponse.model_validate(session), "summary": summary}

@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID,
    manager: SessionLifecycleManager = Depends(get_session_manager)
):
    return await manager.get_session(session_id)

@router.get("/{session_id}/answers", response_model=List[AnswerResponse])
async def get_session_answers(
    session_id: UUID,
    manager: SessionLifecycleManager = Depends(get_session_manager)
):
    return await manager.list_session_answers(session_id)
