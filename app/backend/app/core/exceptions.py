from fastapi import HTTPException, status
from typing import Any, Dict
from app.core.error_codes import ErrorCode

class AppException(HTTPException):
    def __init__(
        self,
        *,
        error_code: ErrorCode,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        user_message: str | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={"error_code": error_code, "user_message": user_message, "details": details},
        )
        self.error_code = error_code
        self.user_message = user_message
        self.details = details

    def __str__(self) -> str:
        return self.user_message or self.error_code.value


# Failure taxonomy. Each class pins the status the boundary renders.

class _TaxonomyError(AppException):
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    error_code_default: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(
        self,
        user_message: str | None = None,
        *,
        error_code: ErrorCode | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(
            error_code=error_code or self.error_code_default,
            status_code=self.status_code_default,
            user_message=user_message,
            details=details,
        )

class InvalidInput(_TaxonomyError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    error_code_default = ErrorCode.INVALID_INPUT

class NotFound(_TaxonomyError):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code_default = ErrorCode.NOT_FOUND

class Conflict(_TaxonomyError):
    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = ErrorCode.CONFLICT

class RateLimited(_TaxonomyError):
    status_code_default = status.HTTP_429_TOO_MANY_REQUESTS
    error_code_default = ErrorCode.RATE_LIMITED

class Forbidden(_TaxonomyError):
    status_code_default = status.HTTP_403_FORBIDDEN
    error_code_default = ErrorCode.FORBIDDEN

class Internal(_TaxonomyError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code_default = ErrorCode.INTERNAL_ERROR

class Timeout(_TaxonomyError):
    status_code_default = status.HTTP_504_GATEWAY_TIMEOUT
    error_code_default = ErrorCode.TIMEOUT

def is_reportable(exc: AppException) -> bool:
    """Internal and Timeout classes trigger the out-of-band error report."""
    return exc.status_code >= 500
