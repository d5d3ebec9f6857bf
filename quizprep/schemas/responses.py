# ============================================================================
# Common Response Schemas
# ============================================================================
from pydantic import BaseModel
from typing import Optional

class ErrorResponse(BaseModel):
    detail: str
    error_code: Optional[str] = None

class HealthCheckResponse(BaseModel):
    status: str
    app: str

# Documented on every route that can fail with a domain error
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Session already completed"},
    503: {"model": ErrorResponse, "description": "Transient storage failure, retry"},
}
