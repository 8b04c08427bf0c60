from pydantic import BaseModel
from typing import Any, Dict, Literal
from app.core.error_codes import ErrorCode


class StatusOK(BaseModel):
    status: Literal["ok"] = "ok"


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
    error_code: ErrorCode
    details: Dict[str, Any] | None = None
