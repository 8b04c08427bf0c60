import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.schemas.common import ErrorResponse, StatusOK
from app.core.exceptions import AppException
from app.core.error_codes import ErrorCode

from app.api.deps import set_session_cookie
from app.api.routes import auth
from app.core.config import settings
from app.db.session import engine

logger = logging.getLogger(__name__)

app = FastAPI(title="Money Transfers API", version="0.1.0")

def _error(status_code: int, code: ErrorCode, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, error_code=code, details=details).model_dump(mode="json"),
    )

@app.on_event("startup")
async def _configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

@app.on_event("shutdown")
async def _dispose_engine():
    await engine.dispose()

@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    response = await call_next(request)
    # a session created on this request reaches the client whatever the outcome
    issued = getattr(request.state, "issued_session_id", None)
    if issued:
        set_session_cookie(response, issued)
    return response

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc)
    return _error(exc.status_code, exc.error_code, str(exc), exc.details)

@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in e.get("loc", ())[1:]), "message": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    message = "; ".join(f"{e['field'] or 'request'}: {e['message']}" for e in errors) or "Invalid request data"
    return _error(status.HTTP_400_BAD_REQUEST, ErrorCode.INVALID_INPUT, message, {"errors": errors})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Map plain HTTPExceptions (unknown route, wrong method) into our envelope
    code_map = {
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.CONFLICT,
        429: ErrorCode.RATE_LIMITED,
    }
    message = str(exc.detail) if exc.detail else "Request failed"
    if exc.status_code == 404:
        message = "Page not found"
    return _error(exc.status_code, code_map.get(exc.status_code, ErrorCode.INVALID_INPUT), message)

@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Try to distinguish unique constraint violations
    msg = str(exc.orig).lower() if exc.orig else ""
    if "unique" in msg or "duplicate" in msg:
        return _error(status.HTTP_409_CONFLICT, ErrorCode.UNIQUE_CONSTRAINT_VIOLATION, "Unique constraint violated")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.DATABASE_ERROR, "Internal server error")

@app.exception_handler(SQLAlchemyError)
async def sa_error_handler(request: Request, exc: SQLAlchemyError):
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.DATABASE_ERROR, "Internal server error")

@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL_ERROR, "Internal server error")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(auth.router)

@app.get("/health", response_model=StatusOK)
async def health():
    return StatusOK()
