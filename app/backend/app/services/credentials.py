"""
Credential store: user rows and their at-rest password form.

`exists` and `authenticate` open their own read-only units. `create` and
`update_password` run inside the caller's unit of work so they can be
combined with other writes (session binding) and committed together.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.error_codes import ErrorCode
from app.core.exceptions import Conflict, Internal, NotFound
from app.core.security import derive_password, utcnow
from app.db.transaction import TransactionCoordinator, UnitOfWork
from app.models.user import User

logger = logging.getLogger(__name__)


class CredentialStore:
    def __init__(self, coordinator: TransactionCoordinator, clock: Callable[[], datetime] = utcnow):
        self._coordinator = coordinator
        self._clock = clock

    async def exists(self, email: str) -> bool:
        try:
            async with self._coordinator.read() as db:
                res = await db.execute(select(func.count()).select_from(User).where(User.email == email))
                return res.scalar_one() > 0
        except SQLAlchemyError as exc:
            logger.exception("user lookup failed for %s", email)
            raise Internal("Internal server error") from exc

    async def create(self, uow: UnitOfWork, email: str, name: str, password: str) -> User:
        user = User(email=email, name=name, password=derive_password(password), ctime=self._clock())
        uow.session.add(user)
        try:
            await uow.session.flush()
        except IntegrityError as exc:
            # lost a race with a concurrent registration of the same email
            raise Conflict("User already exists", error_code=ErrorCode.USER_ALREADY_EXISTS) from exc
        except SQLAlchemyError as exc:
            logger.exception("user insert failed for %s", email)
            raise Internal("Internal server error") from exc
        logger.info("created user %s for %s", user.id, email)
        return user

    async def update_password(self, uow: UnitOfWork, email: str, password: str) -> None:
        # existence is the caller's concern (the recovery flow only issues codes to known users)
        try:
            await uow.session.execute(
                update(User).where(User.email == email).values(password=derive_password(password))
            )
        except SQLAlchemyError as exc:
            logger.exception("password update failed for %s", email)
            raise Internal("Internal server error") from exc

    async def authenticate(self, email: str, password: str) -> User:
        # one query on (email, derived password): a bad email and a bad password look the same
        try:
            async with self._coordinator.read() as db:
                res = await db.execute(
                    select(User).where(User.email == email, User.password == derive_password(password))
                )
                user = res.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("user lookup failed for %s", email)
            raise Internal("Internal server error") from exc
        if user is None:
            raise NotFound("Wrong login or password", error_code=ErrorCode.INVALID_CREDENTIALS)
        return user
