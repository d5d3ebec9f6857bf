# ============================================================================
# Custom Exceptions
# ============================================================================
from typing import Optional

class QuizPrepException(Exception):
    """Base exception for the practice engine"""
    def __init__(
        self,
        detail: str,
        status_code: int = 400,
        error_code: Optional[str] = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code or "QUIZPREP_ERROR"
        super().__init__(self.detail)

class InvalidRequest(QuizPrepException):
    """Missing or contradictory required fields"""
    def __init__(self, message: str):
        super().__init__(
            detail=message,
            status_code=400,
            error_code="INVALID_REQUEST"
        )

class NotFound(QuizPrepException):
    def __init__(self, resource: str, resource_id=None):
        detail = f"{resource} not found"
        if resource_id is not None:
            detail = f"{resource} not found: {resource_id}"
        super().__init__(
            detail=detail,
            status_code=404,
            error_code="NOT_FOUND"
        )
        self.resource = resource

class InvalidState(QuizPrepException):
    """Operation not allowed in the session's current state"""
    def __init__(self, message: str = "Session already completed"):
        super().__init__(
            detail=message,
            status_code=409,
            error_code="INVALID_STATE"
        )

class TransientError(QuizPrepException):
    """Storage or timeout failure; the whole call is safe to retry"""
    def __init__(self, message: str = "Storage temporarily unavailable, please retry"):
        super().__init__(
            detail=message,
            status_code=503,
            error_code="TRANSIENT"
        )

class InternalError(QuizPrepException):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(
            detail=message,
            status_code=500,
            error_code="INTERNAL_ERROR"
        )
