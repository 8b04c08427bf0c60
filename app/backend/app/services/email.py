import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from app.core.config import settings

logger = logging.getLogger(__name__)

class EmailDeliveryError(Exception):
    pass

def _send_email_sync(to_email: str, subject: str, body: str) -> None:
    msg = MIMEText(body, "html", "utf-8")
    msg["Subject"] = subject
    msg["From"] = formataddr((settings.MAIL_FROM_NAME, settings.MAIL_FROM))
    msg["To"] = to_email

    # Respect timeout to avoid hanging the request
    timeout = float(settings.SMTP_TIMEOUT_SECONDS)
    server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=timeout)
    try:
        if settings.SMTP_TLS:
            server.starttls()
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.send_message(msg)
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            server.close()

async def send_email(to_email: str, subject: str, body: str) -> None:
    # Short-circuit in dev or placeholder host
    if (not settings.EMAIL_ENABLED) or settings.SMTP_HOST in {"smtp.example.com", "", None}:
        logger.info("[DEV EMAIL] To: %s Subject: %s\n%s", to_email, subject, body)
        return

    # Offload synchronous SMTP work to thread so we don't block the event loop
    try:
        await asyncio.to_thread(_send_email_sync, to_email, subject, body)
    except (OSError, smtplib.SMTPException) as e:
        logger.warning("email to %s failed: %s", to_email, e)
        raise EmailDeliveryError(str(e)) from e
