import asyncio
import logging
from typing import Callable, Coroutine, Any

from fastapi import HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError
from starlette.requests import ClientDisconnect

from app.core.config import settings
from app.core.exceptions import AppException, Internal, Timeout, is_reportable
from app.services.error_reporter import schedule_error_report

logger = logging.getLogger(__name__)

def _log_abandoned(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("abandoned handler finished with %r", exc)

async def _raw_body(request: Request) -> bytes:
    try:
        return await request.body()
    except (ClientDisconnect, RuntimeError):
        return b""

async def _report(request: Request, message: str) -> None:
    schedule_error_report(
        message,
        request.method,
        request.url.path,
        await _raw_body(request),
        request.cookies.get(settings.SESSION_COOKIE_NAME),
    )


class WatchdogRoute(APIRoute):
    """Route that bounds handling time and reports server-side failures.

    The handler runs as its own task behind `asyncio.shield`: when the
    ceiling is hit the client gets a Timeout error, the work itself is
    abandoned rather than cancelled.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def watched(request: Request) -> Response:
            task = asyncio.ensure_future(handler(request))
            try:
                return await asyncio.wait_for(asyncio.shield(task), timeout=settings.REQUEST_TIMEOUT_SECONDS)
            except asyncio.TimeoutError:
                task.add_done_callback(_log_abandoned)
                logger.error("%s %s timed out after %ss", request.method, request.url.path, settings.REQUEST_TIMEOUT_SECONDS)
                await _report(request, "Operation timed out")
                raise Timeout("Operation timed out") from None
            except AppException as exc:
                if is_reportable(exc):
                    await _report(request, str(exc))
                raise
            except (HTTPException, RequestValidationError):
                raise
            except Exception as exc:
                logger.exception("unhandled error in %s %s", request.method, request.url.path)
                await _report(request, f"Internal server error: {exc}")
                if isinstance(exc, SQLAlchemyError):
                    raise
                # rendered by the AppException handler, inside the middleware stack
                raise Internal("Internal server error") from exc

        return watched
