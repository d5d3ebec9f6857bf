# ============================================================================
# Practice Session Management Service
# ============================================================================
"""
Manages the practice-session lifecycle: start, answer submission and
finalization.

A session moves created -> in_progress -> completed and never reopens.
Every mutating operation runs as one unit of work with the session row
locked, so counters are updated with server-side increments and a failure
leaves nothing half-applied. Finalization also folds the session into the
user's aggregate stats and the per-topic analytics.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, update, func, distinct
from datetime import datetime, timezone
from uuid import UUID
import math
import random
import logging

from quizprep.config import get_settings
from quizprep.core.database import unit_of_work
from quizprep.core.exceptions import InvalidRequest, InvalidState, NotFound
from quizprep.models.curriculum import Question
from quizprep.models.practice import PracticeSession, SessionQuestion, UserAnswer
from quizprep.models.user import User
from quizprep.services.analytics.topic_analytics import TopicAnalyticsAggregator, TopicDelta
from quizprep.services.practice.question_source import QuestionSource
from quizprep.services.practice.scoring import GradeResult, grade, contribution_delta

logger = logging.getLogger(__name__)

SESSION_TYPES = ("practice", "mock", "pyq")


@dataclass
class AnswerResult:
    """What a client learns after submitting one answer"""
    answer: UserAnswer
    grade: GradeResult
    correct_answer: str
    explanation: Optional[str]
    session: PracticeSession


def question_marks(question) -> int:
    """Marks a question is worth; unset counts as 1"""
    return question.marks if question.marks is not None else 1


def percentage(marks_obtained: float, total_marks: float) -> int:
    """Score percentage rounded half up; 0 when there are no marks to earn"""
    if not total_marks or total_marks <= 0:
        return 0
    return int(math.floor((marks_obtained or 0) / total_marks * 100 + 0.5))


def build_summary(session: PracticeSession) -> Dict[str, Any]:
    return {
        "total_questions": session.total_questions,
        "attempted": session.questions_attempted,
        "correct": session.correct_answers,
        "wrong": session.wrong_answers,
        "skipped": session.skipped_questions,
        "marks_obtained": round(session.marks_obtained or 0, 2),
        "total_marks": session.total_marks or 0,
        "percentage": percentage(session.marks_obtained, session.total_marks),
        "auto_submitted": bool(session.auto_submitted),
        "time_taken_seconds": session.time_taken_seconds or 0,
    }


# ============================================================================
# Session Lifecycle Manager
# ============================================================================
class SessionLifecycleManager:
    """Orchestrates session creation, answer submission and finalization"""

    def __init__(
        self,
        db: AsyncSession,
        question_source: Optional[QuestionSource] = None,
        rng: Optional[random.Random] = None
    ):
        self.db = db
        self.questions = question_source or QuestionSource(db, rng)
        self.aggregator = TopicAnalyticsAggregator(db)
        self.settings = get_settings()

    # ==================== Session Lifecycle ====================

    async def start_session(
        self,
        user_id: Optional[UUID],
        topic_id: Optional[UUID] = None,
        test_series_id: Optional[UUID] = None,
        session_type: str = "practice",
        question_count: Optional[int] = None
    ) -> Tuple[PracticeSession, List[Question]]:
        """
        Start a new session from a topic or a test series.

        Args:
            user_id: Owner of the session
            topic_id: Practice a random subset of this topic's questions
            test_series_id: Take this test series' fixed, ordered question set
            session_type: practice, mock or pyq
            question_count: Topic sessions only; defaults to
                DEFAULT_PRACTICE_QUESTIONS

        Returns:
            Tuple of (PracticeSession, questions in presentation order)
        """
        if not user_id:
            raise InvalidRequest("user_id is required")
        if topic_id and test_series_id:
            raise InvalidRequest("Provide either topic_id or test_series_id, not both")
        if not topic_id and not test_series_id:
            raise InvalidRequest("Either test_series_id or topic_id is required")
        if session_type not in SESSION_TYPES:
            raise InvalidRequest(f"Unknown session type: {session_type}")

        async with unit_of_work(self.db):
            user = await self.db.get(User, user_id)
            if not user:
                raise NotFound("User", user_id)

            if test_series_id:
                series = await self.questions.get_test_series_by_id(test_series_id)
                if not series:
                    raise NotFound("Test series", test_series_id)
                questions = await self.questions.get_test_series_questions(test_series_id)
                total_marks = series.total_marks
            else:
                topic = await self.questions.get_topic(topic_id)
                if not topic:
                    raise NotFound("Topic", topic_id)
                count = question_count or self.settings.DEFAULT_PRACTICE_QUESTIONS
                if count < 1:
                    raise InvalidRequest("question_count must be at least 1")
                count = min(count, self.settings.MAX_SESSION_QUESTIONS)
                questions = await self.questions.get_questions_by_topic(topic_id, count)
                total_marks = sum(question_marks(q) for q in questions)

            if not questions:
                raise InvalidRequest("No questions available for this selection")

            session = PracticeSession(
                user_id=user_id,
                topic_id=topic_id,
                test_series_id=test_series_id,
                session_type=session_type,
                total_questions=len(questions),
                total_marks=total_marks,
                questions_attempted=0,
                correct_answers=0,
                wrong_answers=0,
                skipped_questions=0,
                marks_obtained=0.0,
                time_taken_seconds=0,
                is_completed=False,
                auto_submitted=False,
                started_at=datetime.now(timezone.utc)
            )
            self.db.add(session)
            await self.db.flush()

            # Grading reads this snapshot, never the live catalog
            for position, question in enumerate(questions):
                self.db.add(SessionQuestion(
                    session_id=session.id,
                    question_id=question.id,
                    position=position,
                    correct_answer=question.correct_answer,
                    explanation=question.explanation,
                    marks=question_marks(question),
                    negative_marks=question.negative_marks or 0
                ))
            await self.db.flush()

        logger.info(
            f"Started {session_type} session {session.id} for user {user_id}: "
            f"{session.total_questions} questions, {session.total_marks} marks"
        )
        return session, questions

    async def submit_answer(
        self,
        session_id: UUID,
        question_id: UUID,
        user_id: Optional[UUID],
        selected_answer: Optional[str] = None,
        time_taken_seconds: Optional[int] = 0
    ) -> AnswerResult:
        """
        Grade and record one answer, then update the session counters.

        Resubmitting a question replaces its earlier answer; only the
        difference between the two gradings is applied to the counters.
        """
        if not user_id:
            raise InvalidRequest("user_id is required")
        time_taken = max(int(time_taken_seconds or 0), 0)

        async with unit_of_work(self.db):
            session = await self._lock_session(session_id)
            if session.is_completed:
                raise InvalidState()
            if session.user_id != user_id:
                raise InvalidRequest("Session belongs to a different user")

            snapshot = await self._get_snapshot(session_id, question_id)
            result = grade(snapshot, selected_answer)
            now = datetime.now(timezone.utc)

            answer = await self._get_answer(session_id, question_id)
            previous = None
            if answer is None:
                answer = UserAnswer(
                    session_id=session_id,
                    question_id=question_id,
                    user_id=user_id,
                    revision=0
                )
                self.db.add(answer)
                time_delta = time_taken
            else:
                previous = GradeResult(
                    is_skipped=answer.is_skipped,
                    is_correct=answer.is_correct,
                    marks_awarded=answer.marks_awarded or 0.0
                )
                time_delta = time_taken - (answer.time_taken_seconds or 0)
                answer.revision = (answer.revision or 0) + 1
                logger.info(f"Overwriting answer for question {question_id} in session {session_id}")

            answer.selected_answer = None if result.is_skipped else selected_answer
            answer.is_correct = result.is_correct
            answer.is_skipped = result.is_skipped
            answer.marks_awarded = result.marks_awarded
            answer.time_taken_seconds = time_taken
            answer.answered_at = now
            await self.db.flush()

            delta = contribution_delta(result, previous)
            delta["time_taken_seconds"] = time_delta
            await self._apply_counters(session, delta)

            if not result.is_skipped and (previous is None or previous.is_skipped):
                await self._record_question_stats(question_id, result.is_correct)

        return AnswerResult(
            answer=answer,
            grade=result,
            correct_answer=snapshot.correct_answer,
            explanation=snapshot.explanation,
            session=session
        )

    async def finalize_session(
        self,
        session_id: UUID,
        auto_submit: bool = False,
        time_taken_seconds: Optional[int] = None
    ) -> Tuple[PracticeSession, Dict[str, Any]]:
        """
        Close a session and fold it into user and topic analytics.

        Not idempotent: a second call fails with InvalidState and changes
        nothing, which keeps analytics from being counted twice. An explicit
        ``time_taken_seconds`` (0 included) replaces the accumulated answer time.

        Returns:
            Tuple of (PracticeSession, summary dict)
        """
        async with unit_of_work(self.db):
            session = await self._lock_session(session_id)
            if session.is_completed:
                raise InvalidState()

            answered = await self.db.scalar(
                select(func.count(distinct(UserAnswer.question_id)))
                .where(UserAnswer.session_id == session_id)
            )
            residual_skipped = max((session.total_questions or 0) - (answered or 0), 0)
            now = datetime.now(timezone.utc)

            session.skipped_questions = (session.skipped_questions or 0) + residual_skipped
            session.is_completed = True
            session.auto_submitted = bool(auto_submit)
            session.completed_at = now
            if time_taken_seconds is not None:
                session.time_taken_seconds = int(time_taken_seconds)

            await self._update_user_aggregate(session, bool(auto_submit), now)

            if session.topic_id:
                await self.aggregator.merge(
                    session.user_id,
                    session.topic_id,
                    TopicDelta(
                        total_attempted=session.questions_attempted,
                        total_correct=session.correct_answers,
                        total_wrong=session.wrong_answers,
                        total_skipped=session.skipped_questions
                    )
                )
            await self.db.flush()

        summary = build_summary(session)
        logger.info(
            f"Session {session_id} completed: {summary['correct']}/{summary['attempted']} correct, "
            f"{summary['marks_obtained']}/{summary['total_marks']} marks "
            f"({'auto-submitted' if summary['auto_submitted'] else 'submitted'})"
        )
        return session, summary

    # ==================== Reads ====================

    async def get_session(self, session_id: UUID) -> PracticeSession:
        session = await self.db.get(PracticeSession, session_id)
        if not session:
            raise NotFound("Session", session_id)
        return session

    async def list_session_answers(self, session_id: UUID) -> List[UserAnswer]:
        await self.get_session(session_id)
        result = await self.db.execute(
            select(UserAnswer)
            .where(UserAnswer.session_id == session_id)
            .order_by(UserAnswer.answered_at)
        )
        return list(result.scalars().all())

    async def list_user_sessions(self, user_id: UUID, limit: int = 20) -> List[PracticeSession]:
        result = await self.db.execute(
            select(PracticeSession)
            .where(PracticeSession.user_id == user_id)
            .order_by(PracticeSession.started_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # ==================== Helpers ====================

    async def _lock_session(self, session_id: UUID) -> PracticeSession:
        result = await self.db.execute(
            select(PracticeSession)
            .where(PracticeSession.id == session_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        session = result.scalar_one_or_none()
        if not session:
            raise NotFound("Session", session_id)
        return session

    async def _get_snapshot(self, session_id: UUID, question_id: UUID) -> SessionQuestion:
        result = await self.db.execute(
            select(SessionQuestion)
            .where(SessionQuestion.session_id == session_id)
            .where(SessionQuestion.question_id == question_id)
        )
        snapshot = result.scalar_one_or_none()
        if not snapshot:
            raise NotFound("Question", question_id)
        return snapshot

    async def _get_answer(self, session_id: UUID, question_id: UUID) -> Optional[UserAnswer]:
        result = await self.db.execute(
            select(UserAnswer)
            .where(UserAnswer.session_id == session_id)
            .where(UserAnswer.question_id == question_id)
        )
        return result.scalar_one_or_none()

    async def _apply_counters(self, session: PracticeSession, delta: Dict[str, Any]) -> None:
        """Increment session counters in the database, then reload the row"""
        values = {
            column: getattr(PracticeSession, column) + amount
            for column, amount in delta.items()
            if amount
        }
        if values:
            await self.db.execute(
                update(PracticeSession)
                .where(PracticeSession.id == session.id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        await self.db.refresh(session)

    async def _record_question_stats(self, question_id: UUID, was_correct: Optional[bool]) -> None:
        """Best effort: a failed stats update never fails the answer"""
        try:
            async with self.db.begin_nested():
                await self.questions.increment_question_stats(question_id, bool(was_correct))
        except SQLAlchemyError as e:
            logger.warning(f"Question stats update failed for {question_id}: {e}")

    async def _update_user_aggregate(
        self,
        session: PracticeSession,
        auto_submit: bool,
        now: datetime
    ) -> User:
        result = await self.db.execute(
            select(User)
            .where(User.id == session.user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFound("User", session.user_id)

        user.total_questions_attempted = (user.total_questions_attempted or 0) + session.questions_attempted
        user.total_correct_answers = (user.total_correct_answers or 0) + session.correct_answers

        if not auto_submit:
            user.current_streak = (user.current_streak or 0) + 1
        elif self.settings.RESET_STREAK_ON_AUTO_SUBMIT:
            user.current_streak = 0
        user.longest_streak = max(user.longest_streak or 0, user.current_streak or 0)
        user.last_active_at = now
        return user
