# ============================================================================
# FastAPI Application Entry Point
# ============================================================================
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from quizprep.config import get_settings
from quizprep.core.exceptions import QuizPrepException
from quizprep.schemas.responses import HealthCheckResponse

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME}...")

    # Register every model on Base.metadata before create_all
    import quizprep.models  # noqa: F401
    from quizprep.core.database import engine, Base

    # Initialize database tables
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    # Redis only backs the analytics cache (optional - continue if fails)
    try:
        from quizprep.core.redis import redis_client
        await redis_client.ping()
        logger.info("Redis connected")
    except Exception as e:
        logger.warning(f"Redis connection failed (non-critical): {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    from quizprep.core.database import engine
    from quizprep.core.redis import redis_client
    await redis_client.aclose()
    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    description="Practice sessions, scoring and topic analytics for test preparation",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception Handlers
@app.exception_handler(QuizPrepException)
async def quizprep_exception_handler(request: Request, exc: QuizPrepException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_code": "INTERNAL_ERROR"}
    )

# Health Check - Root level
@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "status": "running",
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}

from quizprep.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix=settings.API_V1_PREFIX)
