# ============================================================================
# Main API Router
# ============================================================================
from fastapi import APIRouter

from quizprep.api.v1 import analytics, catalog, sessions, users

api_router = APIRouter()

api_router.include_router(sessions.router)
api_router.include_router(users.router)
api_router.include_router(analytics.router)
api_router.include_router(catalog.router)
