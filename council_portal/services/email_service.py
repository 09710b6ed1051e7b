from pathlib import Path

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from jinja2 import Environment, FileSystemLoader, select_autoescape
from council_portal.config import settings
import logging

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"])
)


def _connection_config(port: int, use_ssl: bool) -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.EMAIL_HOST_USER,
        MAIL_PASSWORD=settings.EMAIL_HOST_PASSWORD,
        MAIL_FROM=settings.EMAIL_FROM,
        MAIL_FROM_NAME=settings.EMAIL_FROM_NAME,
        MAIL_PORT=port,
        MAIL_SERVER=settings.EMAIL_HOST,
        MAIL_STARTTLS=not use_ssl,
        MAIL_SSL_TLS=use_ssl,
        USE_CREDENTIALS=bool(settings.EMAIL_HOST_USER),
        VALIDATE_CERTS=True
    )


# 🔁 Central retry wrapper
async def send_email_with_retry(message: MessageSchema, subject: str, to_email: str) -> bool:
    """Try sending via TLS first (587), then SSL (465) if it fails"""
    if not settings.EMAIL_HOST:
        logger.warning("EMAIL_HOST not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        fm = FastMail(_connection_config(settings.EMAIL_PORT, use_ssl=False))
        await fm.send_message(message)
        logger.info(f"{subject} email sent to {to_email} via port {settings.EMAIL_PORT}")
        return True
    except Exception as e:
        logger.warning(f"Failed to send {subject} via port {settings.EMAIL_PORT}: {str(e)}")
        try:
            fm = FastMail(_connection_config(465, use_ssl=True))
            await fm.send_message(message)
            logger.info(f"{subject} email sent to {to_email} via port 465")
            return True
        except Exception as e2:
            logger.error(f"Failed to send {subject} email via both ports: {str(e2)}")
            return False


def _html_message(subject: str, to_email: str, html: str) -> MessageSchema:
    return MessageSchema(
        subject=subject,
        recipients=[to_email],
        body=html,
        subtype=MessageType.html
    )


async def send_welcome_email(to_email: str, name: str) -> bool:
    try:
        html = env.get_template("welcome.html").render(name=name)
        subject = "Welcome to Telangana Dental Council"
        return await send_email_with_retry(_html_message(subject, to_email, html), subject, to_email)
    except Exception as e:
        logger.error(f"Failed to build/send welcome email to {to_email}: {str(e)}")
        return False


async def send_password_reset_email(to_email: str, name: str, reset_url: str, expires_minutes: int) -> bool:
    try:
        html = env.get_template("reset_password.html").render(
            name=name,
            reset_url=reset_url,
            expires_minutes=expires_minutes
        )
        subject = "TSDC Password Reset Request"
        return await send_email_with_retry(_html_message(subject, to_email, html), subject, to_email)
    except Exception as e:
        logger.error(f"Failed to build/send password reset email to {to_email}: {str(e)}")
        return False
