import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import (
    get_code_engine,
    get_coordinator,
    get_credential_store,
    get_session_manager,
    resolve_session,
)
from app.api.routing import WatchdogRoute
from app.core.error_codes import ErrorCode
from app.core.exceptions import Conflict, InvalidInput, NotFound
from app.core.security import is_valid_email
from app.db.transaction import TransactionCoordinator
from app.models.enums import CodeType
from app.models.session import ClientSession
from app.schemas.auth import CodeQuery, EmailQuery, LoginIn, RecoveryIn, RegisterIn
from app.schemas.common import StatusOK
from app.schemas.openapi import ERROR_RESPONSES
from app.schemas.user import UserOut
from app.services.credentials import CredentialStore
from app.services.sessions import SessionManager
from app.services.verification import VerificationCodeEngine

logger = logging.getLogger(__name__)

# every request under /auth resolves (or issues) a session first
router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    route_class=WatchdogRoute,
    dependencies=[Depends(resolve_session)],
    responses=ERROR_RESPONSES,
)


@router.post("", response_model=UserOut)
async def login(
    data: LoginIn,
    session: ClientSession = Depends(resolve_session),
    credentials: CredentialStore = Depends(get_credential_store),
    sessions: SessionManager = Depends(get_session_manager),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
):
    user = await credentials.authenticate(data.email, data.password)

    async with coordinator.begin() as uow:
        await sessions.bind_user(uow, session, user.id)
        await uow.commit()
    return user


@router.get("/send_code", response_model=StatusOK)
async def send_code(
    params: Annotated[EmailQuery, Query()],
    codes: VerificationCodeEngine = Depends(get_code_engine),
):
    if not is_valid_email(params.email):
        raise InvalidInput("Email is wrong", error_code=ErrorCode.EMAIL_INVALID)

    await codes.request_code(params.email, CodeType.registration)
    return StatusOK()


@router.get("/check_code", response_model=StatusOK)
async def check_code(
    params: Annotated[CodeQuery, Query()],
    codes: VerificationCodeEngine = Depends(get_code_engine),
):
    await codes.validate_code(params.email, CodeType.registration, params.code)
    return StatusOK()


@router.get("/check_user", response_model=StatusOK)
async def check_user(
    params: Annotated[EmailQuery, Query()],
    credentials: CredentialStore = Depends(get_credential_store),
):
    if await credentials.exists(params.email):
        raise Conflict("User already exists", error_code=ErrorCode.USER_ALREADY_EXISTS)
    return StatusOK()


@router.post("/register", response_model=UserOut)
async def register(
    data: RegisterIn,
    session: ClientSession = Depends(resolve_session),
    codes: VerificationCodeEngine = Depends(get_code_engine),
    credentials: CredentialStore = Depends(get_credential_store),
    sessions: SessionManager = Depends(get_session_manager),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
):
    await codes.validate_code(data.email, CodeType.registration, data.code)

    # prevent duplicate accounts
    if await credentials.exists(data.email):
        raise Conflict("User already exists", error_code=ErrorCode.USER_ALREADY_EXISTS)

    # user row and session binding land together or not at all
    async with coordinator.begin() as uow:
        user = await credentials.create(uow, data.email, data.name, data.password)
        await sessions.bind_user(uow, session, user.id)
        await uow.commit()

    logger.info("registered user %s on session %s", user.id, session.id)
    return user


@router.get("/send_recovery_code", response_model=StatusOK)
async def send_recovery_code(
    params: Annotated[EmailQuery, Query()],
    codes: VerificationCodeEngine = Depends(get_code_engine),
    credentials: CredentialStore = Depends(get_credential_store),
):
    if not is_valid_email(params.email):
        raise InvalidInput("Email is wrong", error_code=ErrorCode.EMAIL_INVALID)
    if not await credentials.exists(params.email):
        raise NotFound("User doesn't exist", error_code=ErrorCode.USER_NOT_FOUND)

    await codes.request_code(params.email, CodeType.recovery)
    return StatusOK()


@router.get("/check_recovery_code", response_model=StatusOK)
async def check_recovery_code(
    params: Annotated[CodeQuery, Query()],
    codes: VerificationCodeEngine = Depends(get_code_engine),
):
    await codes.validate_code(params.email, CodeType.recovery, params.code)
    return StatusOK()


@router.put("/change_password_by_code", response_model=StatusOK)
async def change_password_by_code(
    data: RecoveryIn,
    codes: VerificationCodeEngine = Depends(get_code_engine),
    credentials: CredentialStore = Depends(get_credential_store),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
):
    await codes.validate_code(data.email, CodeType.recovery, data.code)

    async with coordinator.begin() as uow:
        await credentials.update_password(uow, data.email, data.password)
        await uow.commit()

    logger.info("password changed by recovery code for %s", data.email)
    return StatusOK()
