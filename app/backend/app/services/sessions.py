import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import Internal
from app.core.security import gen_session_id, utcnow
from app.db.transaction import TransactionCoordinator, UnitOfWork
from app.models.session import ClientSession

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        coordinator: TransactionCoordinator,
        id_factory: Callable[[], str] = gen_session_id,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._coordinator = coordinator
        self._id_factory = id_factory
        self._clock = clock

    async def resolve_or_create(self, token: str | None) -> tuple[ClientSession, bool]:
        """Return the stored session for `token`, or a freshly persisted one.

        The flag is True only when a new session was created, i.e. when the
        caller has to hand the new id back to the client as a cookie.
        """
        try:
            if token:
                async with self._coordinator.read() as db:
                    session = await db.get(ClientSession, token)
                if session is not None:
                    return session, False

            session = ClientSession(id=self._id_factory(), user_id=None, data={}, ctime=self._clock())
            async with self._coordinator.begin() as uow:
                uow.session.add(session)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.exception("session resolution failed")
            raise Internal("Internal server error") from exc
        logger.info("created session %s", session.id)
        return session, True

    async def bind_user(self, uow: UnitOfWork, session: ClientSession, user_id: int) -> None:
        # runs in the caller's unit of work; committed together with the user row
        try:
            await uow.session.execute(
                update(ClientSession).where(ClientSession.id == session.id).values(user_id=user_id)
            )
        except SQLAlchemyError as exc:
            logger.exception("binding user %s to session %s failed", user_id, session.id)
            raise Internal("Internal server error") from exc
        session.user_id = user_id
