from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from contextlib import asynccontextmanager
from typing import List, Tuple

from sqlalchemy.exc import OperationalError

from app.db.transaction import TransactionCoordinator
from app.services.email import EmailDeliveryError


class FakeClock:
    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self._t = start

    def __call__(self) -> datetime:
        return self._t

    def advance(self, seconds: float) -> None:
        self._t += timedelta(seconds=seconds)


@dataclass
class FakeMailer:
    sent: List[Tuple[str, str, str]] = field(default_factory=list)
    fail: bool = False

    async def __call__(self, to_email: str, subject: str, body: str) -> None:
        if self.fail:
            raise EmailDeliveryError("smtp unavailable")
        self.sent.append((to_email, subject, body))

    def last_code(self) -> str:
        return self.sent[-1][2].removeprefix("Code: ")


class BrokenReadsCoordinator(TransactionCoordinator):
    """Lookups fail as if the database went away; writes still work."""

    @asynccontextmanager
    async def read(self):
        raise OperationalError("SELECT", {}, ConnectionError("database is unreachable"))
        yield  # pragma: no cover
