from enum import Enum

class ErrorCode(str, Enum):
    # --- Generic / HTTP-ish ---
    INTERNAL_ERROR = "internal_error"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    TIMEOUT = "timeout"

    # --- Auth / Users ---
    EMAIL_INVALID = "email_invalid"
    USER_ALREADY_EXISTS = "user_already_exists"
    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"

    # --- Verification codes ---
    VERIFICATION_CODE_NOT_FOUND = "verification_code_not_found"
    VERIFICATION_ATTEMPTS_EXCEEDED = "verification_attempts_exceeded"
    VERIFICATION_CODE_EXPIRED = "verification_code_expired"
    VERIFICATION_CODE_INVALID = "verification_code_invalid"
    VERIFICATION_RESEND_TOO_SOON = "verification_resend_too_soon"

    # --- Email / Messaging ---
    EMAIL_SEND_FAILED = "email_send_failed"

    # --- Infra / Storage ---
    DATABASE_ERROR = "database_error"
    UNIQUE_CONSTRAINT_VIOLATION = "unique_constraint_violation"
