from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = "dev"
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    REQUEST_TIMEOUT_SECONDS: float = 30
    CORS_ORIGINS: list[str] = ["*"]

    PG_HOST: str
    PG_PORT: int
    PG_DB: str
    PG_USER: str
    PG_PASSWORD: str
    # overrides the PG_* settings when set (tests, local sqlite)
    DATABASE_URL: str | None = None

    SESSION_COOKIE_NAME: str = "SessionID"
    SESSION_COOKIE_MAX_AGE_DAYS: int = 365
    SESSION_COOKIE_SECURE: bool = True

    VERIFY_CODE_TTL_MINUTES: int = 5
    VERIFY_RESEND_COOLDOWN_SECONDS: int = 60
    VERIFY_MAX_ATTEMPTS: int = 5

    # "hex" reproduces the legacy at-rest format of existing rows
    PASSWORD_SCHEME: str = "hmac-sha256"
    PASSWORD_SECRET: str

    SMTP_HOST: str = "smtp.example.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_TLS: bool = True
    MAIL_FROM: str = "noreply@shekelrubl.co.il"
    MAIL_FROM_NAME: str = "Shekel Rubl"
    MAIL_SUBJECT: str = "Shekel Rubl Code"

    EMAIL_ENABLED: bool = True
    SMTP_TIMEOUT_SECONDS: int = 10

    ERROR_REPORT_ENABLED: bool = False
    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
    TELEGRAM_BOT_TOKEN: str | None = None
    TELEGRAM_CHAT_ID: str | None = None

settings = Settings()
