import hashlib
import hmac
import secrets
import uuid
from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email

from app.core.config import settings

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def derive_password(p: str, scheme: str | None = None) -> str:
    """Deterministic at-rest form of a password.

    Derived once on create/update and compared as a derived value on login,
    so the lookup stays a single (email, password) query whichever scheme
    is configured.
    """
    scheme = scheme or settings.PASSWORD_SCHEME
    if scheme == "hex":
        return p.encode("utf-8").hex()
    if scheme == "hmac-sha256":
        key = settings.PASSWORD_SECRET.encode("utf-8")
        return hmac.new(key, p.encode("utf-8"), hashlib.sha256).hexdigest()
    raise ValueError(f"unknown password scheme: {scheme}")

def gen_code(n: int = 4) -> str:
    # zero-padded decimal, leading zeros are significant
    return f"{secrets.randbelow(10 ** n):0{n}d}"

def gen_recovery_code() -> str:
    # two 8-digit groups
    return gen_code(8) + gen_code(8)

def gen_session_id() -> str:
    return str(uuid.uuid4())

def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
