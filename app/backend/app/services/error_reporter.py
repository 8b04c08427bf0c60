import asyncio
import logging

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

# detached report tasks, held so they are not collected mid-flight
_pending: set[asyncio.Task] = set()

def _enabled() -> bool:
    return bool(settings.ERROR_REPORT_ENABLED and settings.TELEGRAM_BOT_TOKEN and settings.TELEGRAM_CHAT_ID)

def format_report(message: str, method: str, path: str, session_id: str | None, body: bytes) -> str:
    raw = body.decode("utf-8", errors="replace")
    return f"{message}\n{method} {path}\n{session_id or ''}\n{raw}\n"

async def report_error(message: str, method: str, path: str, body: bytes = b"", session_id: str | None = None) -> None:
    if not _enabled():
        return
    url = f"{settings.TELEGRAM_API_BASE_URL.rstrip('/')}/bot{settings.TELEGRAM_BOT_TOKEN}/sendMessage"
    params = {"chat_id": settings.TELEGRAM_CHAT_ID, "text": format_report(message, method, path, session_id, body)}
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            r = await client.get(url, params=params)
            r.raise_for_status()
    except httpx.HTTPError as exc:
        # the report is best effort; nothing upstream waits for it
        logger.warning("error report failed: %s", exc)

def schedule_error_report(message: str, method: str, path: str, body: bytes = b"", session_id: str | None = None) -> None:
    """Fire-and-forget dispatch of `report_error`; must be called from a running loop."""
    task = asyncio.get_running_loop().create_task(report_error(message, method, path, body, session_id))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
