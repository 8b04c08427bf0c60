"""
One-time email codes, scoped by (email, code type).

Only the newest row for a pair is ever consulted; a new send inserts a new
row instead of refreshing the old one. Validation checks run in a fixed
order (existence, attempts, expiry, value) and only the last one has a
side effect: a mismatch bumps the attempt counter in its own transaction.
A successful validation does not consume the code.
"""

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.error_codes import ErrorCode
from app.core.exceptions import Forbidden, Internal, NotFound, RateLimited
from app.core.security import as_utc, gen_code, gen_recovery_code, utcnow
from app.db.transaction import TransactionCoordinator
from app.models.email_code import EmailCode
from app.models.enums import CodeType
from app.services.email import EmailDeliveryError, send_email

logger = logging.getLogger(__name__)

Mailer = Callable[[str, str, str], Awaitable[None]]

# recovery codes reset passwords, so they get the larger space
CODE_GENERATORS: dict[CodeType, Callable[[], str]] = {
    CodeType.registration: lambda: gen_code(4),
    CodeType.recovery: gen_recovery_code,
}


class VerificationCodeEngine:
    def __init__(
        self,
        coordinator: TransactionCoordinator,
        mailer: Mailer = send_email,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._coordinator = coordinator
        self._mailer = mailer
        self._clock = clock

    @property
    def cooldown(self) -> timedelta:
        return timedelta(seconds=settings.VERIFY_RESEND_COOLDOWN_SECONDS)

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=settings.VERIFY_CODE_TTL_MINUTES)

    async def last_code(self, email: str, code_type: CodeType) -> EmailCode | None:
        try:
            async with self._coordinator.read() as db:
                res = await db.execute(
                    select(EmailCode)
                    .where(EmailCode.email == email, EmailCode.code_type == code_type.value)
                    .order_by(EmailCode.ctime.desc(), EmailCode.id.desc())
                    .limit(1)
                )
                return res.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("code lookup failed for %s/%s", email, code_type.value)
            raise Internal("Internal server error") from exc

    async def request_code(self, email: str, code_type: CodeType) -> EmailCode:
        now = self._clock()
        last = await self.last_code(email, code_type)
        if last is not None and now < as_utc(last.ctime) + self.cooldown:
            raise RateLimited(
                "Last code was sent less than a minute ago",
                error_code=ErrorCode.VERIFICATION_RESEND_TOO_SOON,
            )

        row = EmailCode(
            email=email,
            code=CODE_GENERATORS[code_type](),
            code_type=code_type.value,
            ctime=now,
            attempts=0,
        )
        try:
            async with self._coordinator.begin() as uow:
                uow.session.add(row)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.exception("code insert failed for %s/%s", email, code_type.value)
            raise Internal("Internal server error") from exc
        logger.info("issued %s code %s for %s", code_type.value, row.id, email)

        # the row stays even if delivery fails
        try:
            await self._mailer(email, settings.MAIL_SUBJECT, f"Code: {row.code}")
        except EmailDeliveryError as exc:
            raise Internal(f"Internal server error: {exc}", error_code=ErrorCode.EMAIL_SEND_FAILED) from exc
        return row

    async def validate_code(self, email: str, code_type: CodeType, submitted: str) -> None:
        row = await self.last_code(email, code_type)
        if row is None:
            raise NotFound("Code does not exist", error_code=ErrorCode.VERIFICATION_CODE_NOT_FOUND)
        if row.attempts > settings.VERIFY_MAX_ATTEMPTS:
            raise Forbidden("Number of attempts exceeded", error_code=ErrorCode.VERIFICATION_ATTEMPTS_EXCEEDED)
        if self._clock() > as_utc(row.ctime) + self.ttl:
            raise Forbidden(
                f"Code is older than {settings.VERIFY_CODE_TTL_MINUTES} minutes",
                error_code=ErrorCode.VERIFICATION_CODE_EXPIRED,
            )
        if row.code != submitted:
            await self._increase_attempts(row.id)
            logger.info("wrong %s code for %s (attempt %d)", code_type.value, email, row.attempts + 1)
            raise Forbidden("Code is wrong", error_code=ErrorCode.VERIFICATION_CODE_INVALID)

    async def _increase_attempts(self, code_id: int) -> None:
        # single-statement increment, concurrent misses are not lost
        try:
            async with self._coordinator.begin() as uow:
                await uow.session.execute(
                    update(EmailCode).where(EmailCode.id == code_id).values(attempts=EmailCode.attempts + 1)
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.exception("attempt increment failed for code %s", code_id)
            raise Internal("Internal server error") from exc
