"""
Email service for verification and password reset emails using Postmark
"""

from typing import Optional

import structlog
from postmarker.core import PostmarkClient
from starlette.concurrency import run_in_threadpool

from videotube.core.config import settings
from videotube.core.exceptions import EmailDeliveryError

logger = structlog.get_logger()


class EmailService:
    """Service for handling email operations"""

    def __init__(self):
        """Initialize email service with Postmark client"""
        if not settings.POSTMARK_SERVER_TOKEN:
            logger.warning("POSTMARK_SERVER_TOKEN not configured - email functionality disabled")
            self.client = None
        else:
            self.client = PostmarkClient(server_token=settings.POSTMARK_SERVER_TOKEN)

    async def _send(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        if not self.client:
            logger.error("Email client not configured", recipient=to)
            raise EmailDeliveryError("Email service is not configured", recipient=to)

        try:
            await run_in_threadpool(
                self.client.emails.send,
                From=settings.SENDER_EMAIL,
                To=to,
                Subject=subject,
                HtmlBody=html_body,
                TextBody=text_body,
            )
        except Exception as e:
            logger.error("Failed to send email", recipient=to, subject=subject, error=str(e))
            raise EmailDeliveryError(recipient=to)

        logger.info("Email sent", recipient=to, subject=subject)

    async def send_verification_email(self, email: str, name: str, token: str) -> None:
        """Send the account verification link for a pending registration"""
        verify_url = f"{settings.FRONTEND_URL.rstrip('/')}/verify-email/{token}"
        await self._send(
            to=email,
            subject="Verify your VideoTube account",
            html_body=(
                f"<p>Hello {name},</p>"
                f"<p>Confirm your email address to finish creating your account:</p>"
                f'<p><a href="{verify_url}">{verify_url}</a></p>'
                f"<p>This link expires in {settings.EMAIL_VERIFICATION_EXPIRE_HOURS} hours.</p>"
            ),
            text_body=(
                f"Hello {name},\n\nConfirm your email address: {verify_url}\n\n"
                f"This link expires in {settings.EMAIL_VERIFICATION_EXPIRE_HOURS} hours."
            ),
        )

    async def send_password_reset_email(self, email: str, name: str, reset_url: str) -> None:
        """Send the password reset link"""
        await self._send(
            to=email,
            subject="Reset your VideoTube password",
            html_body=(
                f"<p>Hello {name},</p>"
                f"<p>Use the link below to choose a new password:</p>"
                f'<p><a href="{reset_url}">{reset_url}</a></p>'
                f"<p>This link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. "
                f"If you did not request a reset you can ignore this email.</p>"
            ),
            text_body=(
                f"Hello {name},\n\nReset your password: {reset_url}\n\n"
                f"This link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes."
            ),
        )


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """FastAPI dependency returning the shared email service"""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
