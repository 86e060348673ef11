"""
Email delivery for verification codes and password reset links.

The account services only hand messages to an ``EmailSender``; which
sender is used is decided once, when the application is built.
"""
import logging
import smtplib
import ssl
import time
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)

# Connection timeout settings
SMTP_TIMEOUT = 30
MAX_RETRIES = 3
RETRY_DELAY = 2


class EmailDeliveryError(RuntimeError):
    """A message could not be delivered after all retries."""


class EmailSender(Protocol):
    def send_verification_code(self, email: str, full_name: str, code: str) -> None: ...

    def send_password_reset(self, email: str, full_name: str, reset_url: str, expires_at: datetime) -> None: ...

    def send_password_changed(self, email: str, full_name: str) -> None: ...


def verification_body(full_name: str, code: str) -> str:
    return (
        f"<p>Hello {full_name},</p>"
        f"<p>Use the following code to verify your email address:</p>"
        f"<p style=\"font-size: 24px; font-weight: bold;\">{code}</p>"
        f"<p>If you did not create an account, please ignore this email.</p>"
    )


def password_reset_body(full_name: str, reset_url: str, expires_at: datetime) -> str:
    expiry = expires_at.strftime("%B %d, %Y at %I:%M %p UTC")
    return (
        f"<p>Hello {full_name},</p>"
        f"<p>We received a request to reset your password. "
        f"<a href=\"{reset_url}\">Reset your password</a></p>"
        f"<p><strong>Important:</strong> this link expires on {expiry}.</p>"
        f"<p>If you did not request a password reset, please ignore this email.</p>"
    )


def password_changed_body(full_name: str) -> str:
    return (
        f"<p>Hello {full_name},</p>"
        f"<p>Your password has been changed. If you did not make this change, "
        f"please contact support immediately.</p>"
    )


class SMTPEmailSender:
    """
    Sends HTML mail over SMTP with STARTTLS, retrying transient failures.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def send_verification_code(self, email: str, full_name: str, code: str) -> None:
        self._send(email, "Email Verification", verification_body(full_name, code))

    def send_password_reset(self, email: str, full_name: str, reset_url: str, expires_at: datetime) -> None:
        self._send(email, "Password Reset Request", password_reset_body(full_name, reset_url, expires_at))

    def send_password_changed(self, email: str, full_name: str) -> None:
        self._send(email, "Password Changed", password_changed_body(full_name))

    def _send(self, email: str, subject: str, html_content: str) -> None:
        msg = MIMEMultipart()
        msg["From"] = self.settings.mail_from
        msg["To"] = email
        msg["Subject"] = subject
        msg.attach(MIMEText(html_content, "html"))

        last_exception = None
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                logger.info(f"Email '{subject}' send attempt {attempt}/{MAX_RETRIES} to {email}")
                with smtplib.SMTP(self.settings.mail_server, self.settings.mail_port, timeout=SMTP_TIMEOUT) as server:
                    server.ehlo()
                    if self.settings.mail_starttls:
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                    if self.settings.mail_username:
                        server.login(self.settings.mail_username, self.settings.mail_password or "")
                    server.send_message(msg)
                logger.info(f"Email '{subject}' sent to {email} on attempt {attempt}")
                return

            except (smtplib.SMTPAuthenticationError, smtplib.SMTPRecipientsRefused) as e:
                # Retrying cannot fix these
                logger.error(f"SMTP rejected '{subject}' for {email}: {str(e)}")
                last_exception = e
                break

            except (smtplib.SMTPException, OSError) as e:
                logger.warning(f"SMTP error on attempt {attempt}: {str(e)}")
                last_exception = e
                if attempt < MAX_RETRIES:
                    time.sleep(RETRY_DELAY)

        raise EmailDeliveryError(f"Failed to send '{subject}' after {MAX_RETRIES} attempts: {last_exception}")


class LogEmailSender:
    """
    Used when no SMTP server is configured: records that a message would
    have been sent without its secret content.
    """

    def send_verification_code(self, email: str, full_name: str, code: str) -> None:
        logger.warning(f"Email delivery disabled; verification code for {email} not sent")

    def send_password_reset(self, email: str, full_name: str, reset_url: str, expires_at: datetime) -> None:
        logger.warning(f"Email delivery disabled; password reset link for {email} not sent")

    def send_password_changed(self, email: str, full_name: str) -> None:
        logger.warning(f"Email delivery disabled; password change notice for {email} not sent")


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.mail_server:
        return SMTPEmailSender(settings)
    logger.warning("MAIL_SERVER is not configured; outgoing email is disabled")
    return LogEmailSender()
