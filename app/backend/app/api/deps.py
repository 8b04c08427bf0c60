from datetime import timedelta

from fastapi import Depends, Request, Response

from app.core.config import settings
from app.core.security import utcnow
from app.db.session import AsyncSessionLocal
from app.db.transaction import TransactionCoordinator
from app.models.session import ClientSession
from app.services.credentials import CredentialStore
from app.services.email import send_email
from app.services.sessions import SessionManager
from app.services.verification import VerificationCodeEngine

def get_coordinator() -> TransactionCoordinator:
    return TransactionCoordinator(AsyncSessionLocal)

def get_mailer():
    return send_email

def get_clock():
    return utcnow

def get_session_manager(coordinator: TransactionCoordinator = Depends(get_coordinator)) -> SessionManager:
    return SessionManager(coordinator)

def get_credential_store(
    coordinator: TransactionCoordinator = Depends(get_coordinator),
    clock=Depends(get_clock),
) -> CredentialStore:
    return CredentialStore(coordinator, clock=clock)

def get_code_engine(
    coordinator: TransactionCoordinator = Depends(get_coordinator),
    mailer=Depends(get_mailer),
    clock=Depends(get_clock),
) -> VerificationCodeEngine:
    return VerificationCodeEngine(coordinator, mailer=mailer, clock=clock)

def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=int(timedelta(days=settings.SESSION_COOKIE_MAX_AGE_DAYS).total_seconds()),
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )

async def resolve_session(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> ClientSession:
    session, issued = await manager.resolve_or_create(request.cookies.get(settings.SESSION_COOKIE_NAME))
    if issued:
        # picked up by the response middleware in app.main, error responses included
        request.state.issued_session_id = session.id
    return session
