# ============================================================================
# Analytics Endpoints
# ============================================================================
from fastapi import APIRouter, Depends
from uuid import UUID

from quizprep.api.deps import get_user_analytics, get_cache
from quizprep.config import get_settings
from quizprep.core.redis import RedisCache, analytics_cache_key
from quizprep.schemas.analytics import UserAnalyticsResponse, TopicStats
from quizprep.schemas.responses import ERROR_RESPONSES
from quizprep.services.analytics.user_analytics import UserAnalytics

settings = get_settings()
router = APIRouter(prefix="/users", tags=["analytics"], responses=ERROR_RESPONSES)

@router.get("/{user_id}/analytics", response_model=UserAnalyticsResponse)
async def get_analytics(
    user_id: UUID,
    analytics: UserAnalytics = Depends(get_user_analytics),
    cache: RedisCache = Depends(get_cache)
):
    """Overall and topic-wise performance with practice recommendations"""
    cache_key = analytics_cache_key(user_id)
    cached = await cache.get_json(cache_key)
    if cached:
        return cached

    data = await analytics.get_user_analytics(user_id)
    payload = UserAnalyticsResponse.model_validate(data).model_dump(mode="json")
    await cache.set_json(cache_key, payload, ttl=settings.ANALYTICS_CACHE_TTL)
    return payload

@router.get("/{user_id}/analytics/{topic_id}", response_model=TopicStats)
async def get_topic_analytics(
    user_id: UUID,
    topic_id: UUID,
    analytics: UserAnalytics = Depends(get_user_analytics)
):
    """Stats for one topic, or a zeroed placeholder before any practice"""
    return await analytics.get_topic_analytics(user_id, topic_id)
