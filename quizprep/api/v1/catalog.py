# ============================================================================
# Catalog Endpoints (read-only)
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
from uuid import UUID

from quizprep.core.database import get_db
from quizprep.core.exceptions import NotFound
from quizprep.models.curriculum import Subject, Topic, TestSeries
from quizprep.schemas.catalog import SubjectResponse, TopicResponse, TestSeriesResponse

router = APIRouter(tags=["catalog"])

@router.get("/subjects", response_model=List[SubjectResponse])
async def list_subjects(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Subject)
        .where(Subject.is_active == True)
        .order_by(Subject.display_order)
    )
    return result.scalars().all()

@router.get("/subjects/{subject_id}/topics", response_model=List[TopicResponse])
async def list_topics(subject_id: UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Topic)
        .where(Topic.subject_id == subject_id)
        .where(Topic.is_active == True)
        .order_by(Topic.display_order)
    )
    return result.scalars().all()

@router.get("/test-series", response_model=List[TestSeriesResponse])
async def list_test_series(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(TestSeries)
        .where(TestSeries.is_active == True)
        .order_by(TestSeries.created_at.desc())
    )
    return result.scalars().all()

@router.get("/test-series/{test_series_id}", response_model=TestSeriesResponse)
async def get_test_series(test_series_id: UUID, db: AsyncSession = Depends(get_db)):
    series = await db.get(TestSeries, test_series_id)
    if not series:
        raise NotFound("Test series", test_series_id)
    return series
